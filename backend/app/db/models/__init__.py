"""ORM models exposed for metadata discovery."""
from app.db.models.task import Task

__all__ = ["Task"]
