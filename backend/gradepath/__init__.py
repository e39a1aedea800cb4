"""GradePath: lesson catalog, learner progress and grade placement API."""

__version__ = "1.0.0"
