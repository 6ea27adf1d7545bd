"""Async SQLAlchemy engine, session factory and the request-scoped session dependency."""

import logging
from collections.abc import AsyncGenerator, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from stylesync.config import settings
from stylesync.exceptions import Unavailable

log = logging.getLogger("stylesync.db")

engine = create_async_engine(settings.DATABASE_URL, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Connectivity failures, as opposed to constraint or programming errors
STORE_ERRORS = (OperationalError, InterfaceError)
STORE_UNAVAILABLE = "Service temporarily unavailable, please retry"


class Base(DeclarativeBase):
    pass


@contextmanager
def store_errors_as_unavailable() -> Iterator[None]:
    """Re-raise a lost or unreachable store as the retryable ``Unavailable``."""
    try:
        yield
    except STORE_ERRORS as exc:
        log.error("Store unavailable: %s", exc)
        raise Unavailable(STORE_UNAVAILABLE) from exc


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
