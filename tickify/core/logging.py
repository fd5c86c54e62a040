import logging
from logging.handlers import TimedRotatingFileHandler

from tickify.core.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(filename)s:%(lineno)d: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging once: console always, daily rolling file when log_dir is set."""
    root = logging.getLogger()
    if getattr(root, "_tickify_configured", False):
        return

    level = settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)

    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            settings.log_dir / "api.log",
            when="midnight",
            backupCount=14,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        file_handler.setLevel(level)
        root.addHandler(file_handler)

    root._tickify_configured = True  # type: ignore[attr-defined]
