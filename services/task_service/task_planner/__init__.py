"""Task planner: CRUD service for task records with filtering and statistics."""

__version__ = "0.1.0"
