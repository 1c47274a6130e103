import logging
import logging.handlers
import os
import tempfile

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set test environment variables
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/app.log."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    # Restore any that were removed (and strip any new ones tests may have added)
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture(autouse=True)
def _reset_config_caches(monkeypatch):
    """Each test reads settings and metrics config fresh."""
    from habit_metrics.core.config import get_settings
    from habit_metrics.core.typed_config_loader import _clear_caches

    for name in list(os.environ):
        if name.startswith("HABIT_METRICS_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    _clear_caches()
    yield
    get_settings.cache_clear()
    _clear_caches()


@pytest.fixture
async def db_session():
    """Session on a throwaway sqlite file with fresh tables."""
    from habit_metrics.models import Base

    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()
        os.unlink(db_path)
