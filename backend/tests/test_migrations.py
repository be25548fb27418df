"""
Migration tests: the Alembic schema must match the ORM metadata.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.core.database import Base

ALEMBIC_DIR = Path(__file__).parent.parent / "alembic"


def _constraint_names(url: str) -> dict:
    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        names = {}
        for table in inspector.get_table_names():
            if table == "alembic_version":
                continue
            names[table] = {
                "unique": sorted(uq["name"] for uq in inspector.get_unique_constraints(table)),
                "foreign": sorted(fk["name"] for fk in inspector.get_foreign_keys(table)),
            }
        return names
    finally:
        engine.dispose()


@pytest.fixture
def migrated_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("DATABASE_URL", url)

    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    command.upgrade(config, "head")
    return url


@pytest.fixture
def created_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'created.db'}"
    engine = create_engine(url)
    Base.metadata.create_all(engine)
    engine.dispose()
    return url


class TestInitialMigration:
    """001_initial_schema against Base.metadata."""

    def test_creates_every_table(self, migrated_url):
        tables = set(_constraint_names(migrated_url))
        assert tables == set(Base.metadata.tables)

    def test_constraint_names_match_create_all(self, migrated_url, created_url):
        assert _constraint_names(migrated_url) == _constraint_names(created_url)

    def test_constraints_follow_naming_convention(self, migrated_url):
        names = _constraint_names(migrated_url)
        assert names["servers"]["unique"] == ["uq_servers_fingerprint", "uq_servers_name"]
        assert "fk_licenses_server_id_servers" in names["licenses"]["foreign"]
        assert "fk_license_audit_license_id_licenses" in names["license_audit"]["foreign"]
