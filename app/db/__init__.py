"""Database package — async SQLAlchemy store handle, Base, session dependency."""
from app.db.base import Base, Database, get_db

__all__ = ["Base", "Database", "get_db"]
