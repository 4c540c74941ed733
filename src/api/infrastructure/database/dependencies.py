"""Control-plane database dependency injection for FastAPI.

Provides the engine and session factory for the control-plane database, which
stores user profiles. Tenant databases are reached through the connection
registry instead (see ``tenancy``).
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_control_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_control_engine: AsyncEngine | None = None
_control_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_control_engine() -> AsyncEngine:
    """Get the control-plane database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the sessionmaker for efficient session creation.

    Returns:
        Configured async engine for the control-plane database
    """
    global _control_engine, _control_sessionmaker
    if _control_engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _control_engine is None:
                settings = get_database_settings()
                _control_engine = create_control_engine(settings)
                _control_sessionmaker = async_sessionmaker(
                    _control_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
    return _control_engine


def get_control_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the control-plane session factory, initializing the engine if needed."""
    get_control_engine()
    assert _control_sessionmaker is not None
    return _control_sessionmaker


async def get_control_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a control-plane session (FastAPI dependency).

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()`.

    Yields:
        AsyncSession for control-plane operations
    """
    async with get_control_sessionmaker()() as session:
        yield session


async def close_control_plane() -> None:
    """Close the control-plane engine.

    Should be called on application shutdown to properly cleanup connections.
    Also resets the sessionmaker to allow reinitialization.
    """
    global _control_engine, _control_sessionmaker

    if _control_engine is not None:
        await _control_engine.dispose()
        _probe.control_plane_closed()
        _control_engine = None
        _control_sessionmaker = None
