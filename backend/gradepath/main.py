# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import logging
import sentry_sdk
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from gradepath import __version__
from gradepath.database import get_db, init_db, ping
from gradepath.routers import lessons, progress, assessment
from gradepath.utils.cache import catalog_cache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error monitoring
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,
        environment=os.getenv("ENVIRONMENT", "development"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    init_db()
    logger.info("Database ready; catalog cache backend: %s", catalog_cache.backend)

    yield

    logger.info("Shutting down...")


tags_metadata = [
    {
        "name": "lessons",
        "description": "Lesson catalog by subject, grade and term, plus lesson management.",
    },
    {
        "name": "progress",
        "description": "Learner progress records and the derived dashboard (stats, streaks, recommendations).",
    },
    {
        "name": "assessment",
        "description": "Grade placement: the fixed placement test and the quiz-bank assessment.",
    },
]

app = FastAPI(
    title="GradePath API",
    description="""
## GradePath Primary School Learning Platform

Lessons for Grade 1 through Grade 6 and Common Entrance preparation.

### Features
- **Lesson Catalog** - Lessons by subject, grade and term
- **Progress Tracking** - Completions and quiz scores per lesson
- **Learner Dashboard** - Streaks, weekly goal, points, rank and next-lesson recommendations
- **Grade Placement** - Assessments that recommend a starting grade
    """,
    version=__version__,
    lifespan=lifespan,
    openapi_tags=tags_metadata,
)

ALLOWED_ORIGINS = [
    "http://localhost:5173",  # Vite dev server
    "http://localhost:3000",
]

# Allow additional origins from environment (for preview deploys)
extra_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
if extra_origins:
    ALLOWED_ORIGINS.extend([o.strip() for o in extra_origins.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With", "Accept"],
)

# Include routers
app.include_router(lessons.router)  # Lesson catalog
app.include_router(progress.router)  # Progress & dashboard
app.include_router(assessment.router)  # Grade placement


@app.get("/")
def root():
    return {
        "message": "GradePath API",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Liveness check including a database round trip."""
    database = "connected" if ping(db) else "unavailable"
    return {"status": "healthy", "database": database}
