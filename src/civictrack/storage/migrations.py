"""Database migration handling with automatic upgrade on startup"""

import shutil
import json
from pathlib import Path
from datetime import datetime
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine

from ..core.logging import get_logger

logger = get_logger(__name__)

DATA_DIR = Path(".civictrack")
DB_PATH = DATA_DIR / "database.db"
CONFIG_PATH = DATA_DIR / "config.json"

DEFAULT_PROJECT_CONFIG = {
    "tracking_prefix": "CIV",
    "source_id": "local",
}


def get_database_url() -> str:
    """Get database URL for current deployment"""
    return f"sqlite:///{DB_PATH.as_posix()}"


def get_migration_config() -> Config:
    """Get Alembic configuration"""
    # This file is in civictrack/storage/, the migration scripts live in civictrack/
    package_root = Path(__file__).parent.parent

    alembic_ini = package_root / "alembic.ini"
    migrations_dir = package_root / "migrations"

    if not alembic_ini.exists():
        raise FileNotFoundError(
            f"alembic.ini not found at {alembic_ini}. "
            "This indicates an incomplete installation. "
            "Please reinstall civictrack."
        )

    if not migrations_dir.exists():
        raise FileNotFoundError(
            f"migrations directory not found at {migrations_dir}. "
            "This indicates an incomplete installation. "
            "Please reinstall civictrack."
        )

    alembic_cfg = Config(str(alembic_ini))
    alembic_cfg.set_main_option("script_location", str(migrations_dir))
    alembic_cfg.set_main_option("sqlalchemy.url", get_database_url())
    return alembic_cfg


def needs_migration() -> bool:
    """Check if database needs migration"""
    if not DB_PATH.exists():
        return True  # New database needs initial migration

    try:
        engine = create_engine(get_database_url())
        try:
            with engine.connect() as conn:
                context = MigrationContext.configure(conn)
                current_rev = context.get_current_revision()
        finally:
            engine.dispose()

        script_dir = ScriptDirectory.from_config(get_migration_config())
        head_rev = script_dir.get_current_head()

        return current_rev != head_rev
    except Exception as e:
        logger.warning(f"[MIGRATIONS] Error checking migration status: {e}")
        return True  # Assume migration needed if we can't check


def backup_database() -> Optional[Path]:
    """Create backup before migration"""
    if DB_PATH.exists():
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = DB_PATH.with_name(f"database.db.backup.{timestamp}")
        try:
            shutil.copy2(DB_PATH, backup_path)
            return backup_path
        except OSError as e:
            logger.warning(f"[MIGRATIONS] Could not create backup: {e}")
            return None
    return None


def run_migrations():
    """Run any pending migrations"""
    alembic_cfg = get_migration_config()
    command.upgrade(alembic_cfg, "head")


def get_project_config() -> dict:
    """Get deployment configuration from .civictrack/config.json"""
    config = dict(DEFAULT_PROJECT_CONFIG)
    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH, "r") as f:
                config.update(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"[CONFIG] Could not read config: {e}")
    return config


def save_project_config(config: dict):
    """Save deployment configuration to .civictrack/config.json"""
    CONFIG_PATH.parent.mkdir(exist_ok=True)

    with open(CONFIG_PATH, "w") as f:
        json.dump(config, f, indent=2)


def initialize_database():
    """Initialize database on first run or run migrations on upgrade"""
    DATA_DIR.mkdir(exist_ok=True)

    # Ensure config exists
    config = get_project_config()
    save_project_config(config)

    if not DB_PATH.exists():
        # Fresh installation - create latest schema
        logger.info("Initializing new civictrack database...")
        run_migrations()
        logger.info("Database initialized successfully")
    elif needs_migration():
        logger.info("Database migration required...")
        backup_path = backup_database()
        try:
            run_migrations()
            if backup_path:
                logger.info(f"Migration successful! Backup created at: {backup_path}")
            else:
                logger.info("Migration successful!")
        except Exception as e:
            logger.error(f"Migration failed: {e}")
            if backup_path:
                logger.error(f"Database backup available at: {backup_path}")
            raise
    else:
        logger.info("Database is up to date")


async def initialize_database_async():
    """Async wrapper for database initialization"""
    initialize_database()
