"""Tests for the Alembic migration chain."""

from sqlalchemy import create_engine, inspect

from huddle.core.settings import settings
from huddle.db.session import Base
from huddle.scripts.migrate import run_upgrade_head


def test_upgrade_head_creates_schema(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.delenv("ALEMBIC_URL", raising=False)
    monkeypatch.setattr(settings, "database_url", url)
    monkeypatch.setattr(settings, "use_testing_database", False)

    run_upgrade_head()

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert set(Base.metadata.tables) <= tables
        assert "alembic_version" in tables
        indexes = {index["name"] for index in inspector.get_indexes("verification_requests")}
        assert "uq_verification_requests_active_user" in indexes
    finally:
        engine.dispose()
