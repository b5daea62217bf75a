"""Test database migration functionality"""

import pytest
from alembic import command
from sqlalchemy import create_engine, inspect, text

from civictrack.storage.migrations import (
    get_database_url,
    get_migration_config,
    needs_migration,
    backup_database,
    run_migrations,
    initialize_database,
    get_project_config,
    save_project_config,
)


class TestMigrationSystem:
    """Test the automatic migration system"""

    def test_get_database_url(self):
        assert get_database_url() == "sqlite:///.civictrack/database.db"

    def test_needs_migration_no_database(self, clean_data_dir):
        assert needs_migration() is True

    def test_needs_migration_empty_database(self, empty_database):
        assert needs_migration() is True

    def test_project_config_defaults(self, clean_data_dir):
        config = get_project_config()
        assert config["tracking_prefix"] == "CIV"
        assert config["source_id"] == "local"

    def test_project_config_save_load(self, clean_data_dir):
        save_project_config({"tracking_prefix": "SPR", "source_id": "springfield"})
        config = get_project_config()

        assert config["tracking_prefix"] == "SPR"
        assert config["source_id"] == "springfield"

    def test_partial_config_keeps_defaults(self, clean_data_dir):
        save_project_config({"source_id": "springfield"})
        assert get_project_config()["tracking_prefix"] == "CIV"

    def test_corrupt_config_falls_back(self, clean_data_dir):
        clean_data_dir.mkdir()
        (clean_data_dir / "config.json").write_text("{not json")

        assert get_project_config()["tracking_prefix"] == "CIV"

    def test_backup_database_nonexistent(self, clean_data_dir):
        assert backup_database() is None

    def test_backup_database_exists(self, empty_database):
        empty_database.write_text("test content")

        backup_path = backup_database()

        assert backup_path is not None
        assert backup_path.exists()
        assert "backup" in backup_path.name
        assert backup_path.read_text() == "test content"

    def test_run_migrations_creates_schema(self, clean_data_dir):
        clean_data_dir.mkdir()
        run_migrations()

        assert needs_migration() is False

    def test_initialize_fresh_database(self, clean_data_dir):
        initialize_database()

        db_path = clean_data_dir / "database.db"
        assert db_path.exists()
        assert (clean_data_dir / "config.json").exists()

        engine = create_engine(f"sqlite:///{db_path}")
        inspector = inspect(engine)
        tables = inspector.get_table_names()
        for table in ["issues", "events", "user_roles", "issued_tracking_ids", "alembic_version"]:
            assert table in tables, f"Table {table} not found in {tables}"

        columns = {col["name"] for col in inspector.get_columns("issues")}
        assert {
            "id", "tracking_id", "title", "description", "category", "priority", "status",
            "location", "address", "latitude", "longitude", "image_urls", "video_urls",
            "upvotes", "user_id", "created_at", "updated_at",
        } <= columns
        engine.dispose()

    def test_empty_database_file_migrated(self, empty_database):
        assert empty_database.stat().st_size == 0

        initialize_database()

        assert empty_database.stat().st_size > 0
        assert needs_migration() is False

    def test_initialize_is_idempotent(self, clean_data_dir):
        initialize_database()
        initialize_database()

        assert needs_migration() is False
        assert not list(clean_data_dir.glob("database.db.backup.*"))

    def test_upgrade_backfills_issued_tracking_ids(self, clean_data_dir):
        clean_data_dir.mkdir()
        command.upgrade(get_migration_config(), "3f9c1a2b7d10")

        engine = create_engine(get_database_url())
        with engine.begin() as conn:
            conn.execute(text(
                "INSERT INTO issues (tracking_id, title, description, category, image_urls, "
                "video_urls, created_at, updated_at) VALUES ('CIV-OLD001', 'Pothole', "
                "'Large pothole', 'Road & Transportation', '[]', '[]', "
                "'2026-01-01 00:00:00', '2026-01-01 00:00:00')"
            ))

        assert needs_migration() is True
        initialize_database()

        with engine.connect() as conn:
            issued = conn.execute(text("SELECT tracking_id FROM issued_tracking_ids")).scalars().all()
        engine.dispose()

        assert issued == ["CIV-OLD001"]
        assert needs_migration() is False
