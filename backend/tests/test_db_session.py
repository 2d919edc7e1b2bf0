"""Engine configuration per database backend."""

from collections.abc import Iterator

import pytest

from petcare.core.config import get_settings
from petcare.db.session import dispose_engine, engine_options, get_sessionmaker


@pytest.fixture()
def settings_env(db_url: str, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URL", db_url)
    monkeypatch.delenv("DATABASE_ECHO", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_server_databases_pre_ping(settings_env) -> None:
    options = engine_options("postgresql+asyncpg://petcare@localhost/petcare")
    assert options["pool_pre_ping"] is True
    assert options["echo"] is False


def test_sqlite_skips_pre_ping(settings_env, db_url: str) -> None:
    assert "pool_pre_ping" not in engine_options(db_url)


def test_echo_follows_settings(
    settings_env, db_url: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DATABASE_ECHO", "true")
    get_settings.cache_clear()
    assert engine_options(db_url)["echo"] is True


@pytest.mark.asyncio
async def test_sessionmaker_is_cached_per_url(reset_database, db_url: str) -> None:
    assert get_sessionmaker(db_url) is get_sessionmaker(db_url)
    await dispose_engine(db_url)
