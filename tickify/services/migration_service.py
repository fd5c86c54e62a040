import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, pool

from tickify.core.config import PROJECT_ROOT, Settings
from tickify.models.schemas.migration import MigrationPlan, MigrationResult

logger = logging.getLogger(__name__)

ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"


def build_alembic_config(ini_path: Path = ALEMBIC_INI) -> Config:
    config = Config(str(ini_path))
    # The API process owns logging; alembic.ini must not reconfigure it.
    config.attributes["configure_logger"] = False
    return config


class MigrationService:
    """Inspects and applies alembic revisions against the configured database."""

    def __init__(self, settings: Settings, config: Config | None = None) -> None:
        self.settings = settings
        self.config = config or build_alembic_config()

    def plan(self) -> MigrationPlan:
        script = ScriptDirectory.from_config(self.config)
        head_revision = script.get_current_head()
        current_revision = self.current_revision()
        return MigrationPlan(
            current_revision=current_revision,
            head_revision=head_revision,
            pending=current_revision != head_revision,
        )

    def upgrade(self) -> MigrationResult:
        before = self.current_revision()
        command.upgrade(self.config, "head")
        after = self.current_revision()

        if before == after:
            message = "Database schema is already up to date."
        else:
            message = f"Upgraded database schema from {before or 'base'} to {after}."
        logger.info(message)
        return MigrationResult(message=message, current_revision=after)

    def current_revision(self) -> str | None:
        engine = create_engine(self.settings.sqlalchemy_database_url, poolclass=pool.NullPool)
        try:
            with engine.connect() as connection:
                return MigrationContext.configure(connection).get_current_revision()
        finally:
            engine.dispose()
