"""
Async SQLAlchemy engine and session factory for the account store.

Usage:
    from flashcard_api.db.database import async_session_maker

    async with async_session_maker() as session:
        account = await session.get(Account, account_id)

Tables are created in the FastAPI lifespan (main.py).
"""

import asyncio
import logging
import os

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from flashcard_api.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


# ── Single global engine ──────────────────────────────────────────
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)

# Max retries for transient DB connection failures
_MAX_CONNECT_RETRIES = 3
_RETRY_DELAY_SECONDS = 2.0


def _ensure_sqlite_dir() -> None:
    url = make_url(settings.DATABASE_URL)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(url.database)), exist_ok=True)


async def connect_db() -> None:
    """Create tables, retrying transient connection failures with backoff."""
    from flashcard_api.db import models  # noqa: F401  (registers tables on Base)

    _ensure_sqlite_dir()

    last_exc = None
    for attempt in range(1, _MAX_CONNECT_RETRIES + 1):
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database ready")
            return
        except Exception as e:
            last_exc = e
            if attempt < _MAX_CONNECT_RETRIES:
                delay = _RETRY_DELAY_SECONDS * attempt
                logger.warning(
                    "DB connect attempt %d/%d failed: %s, retrying in %.1fs",
                    attempt, _MAX_CONNECT_RETRIES, e, delay,
                )
                await asyncio.sleep(delay)
            else:
                logger.error("Failed to connect to database after %d attempts: %s", _MAX_CONNECT_RETRIES, e)

    raise RuntimeError(f"Could not connect to database after {_MAX_CONNECT_RETRIES} attempts") from last_exc


async def disconnect_db() -> None:
    await engine.dispose()
    logger.info("Database engine disposed")


async def ping_db() -> bool:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True
