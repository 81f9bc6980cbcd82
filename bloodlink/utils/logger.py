import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from bloodlink.config import get_settings

settings = get_settings()

_MAX_BYTES = 10 * 1024 * 1024  # 10MB
_BACKUPS = 5

_CONSOLE_FORMAT = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
_FILE_FORMAT = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _rotating(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS)
    handler.setLevel(level)
    handler.setFormatter(_FILE_FORMAT)
    return handler


def _configure() -> logging.Logger:
    """Build the `bloodlink` root logger: stdout + app.log + errors.log."""
    root = logging.getLogger("bloodlink")
    level = logging.DEBUG if settings.APP_DEBUG else logging.INFO
    root.setLevel(level)

    # Prevent duplicate logs on re-import
    if root.handlers:
        root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(_CONSOLE_FORMAT)
    root.addHandler(console)

    logs_dir = Path(settings.LOG_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)
    root.addHandler(_rotating(logs_dir / "app.log", logging.INFO))
    root.addHandler(_rotating(logs_dir / "errors.log", logging.ERROR))
    return root


logger = _configure()


def get_logger(name: str = None) -> logging.Logger:
    """Get a logger instance. If name is provided, returns a child logger."""
    if name:
        return logger.getChild(name)
    return logger
