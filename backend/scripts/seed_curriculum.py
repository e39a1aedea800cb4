#!/usr/bin/env python3
"""
Seed the GradePath Lesson Catalog

Loads lessons and their quizzes from a curriculum JSON file.

Usage:
    python scripts/seed_curriculum.py scripts/data/sample_curriculum.json

    # Replace everything currently in the catalog
    python scripts/seed_curriculum.py curriculum.json --clear

    # Point at another database
    python scripts/seed_curriculum.py curriculum.json --database-url postgresql://...
"""

import argparse
import logging
import os
import sys
from pathlib import Path


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed GradePath lessons and quizzes")
    parser.add_argument("json_path", type=Path, help="Path to curriculum JSON file")
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing lessons, quizzes and progress before seeding"
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Database URL (default: DATABASE_URL env var)"
    )
    args = parser.parse_args()

    # Must be set before gradepath.database creates its engine
    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    from gradepath.database import SessionLocal, init_db
    from gradepath.services.curriculum_seeder import (
        CurriculumFormatError, load_curriculum, seed_curriculum
    )

    if not args.json_path.exists():
        print(f"Error: {args.json_path} not found")
        return 1

    init_db()
    db = SessionLocal()
    try:
        counts = seed_curriculum(db, load_curriculum(args.json_path), clear=args.clear)
    except CurriculumFormatError as e:
        print(f"Error: {e}")
        return 1
    finally:
        db.close()

    print(f"Seeded {counts['lessons']} lessons and {counts['quizzes']} quizzes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
