"""
Database connection modules.

- database: async SQLAlchemy engine, session factory, lifecycle hooks
- models: ORM models (accounts)
"""

from flashcard_api.db.database import async_session_maker, connect_db, disconnect_db

__all__ = ["async_session_maker", "connect_db", "disconnect_db"]
