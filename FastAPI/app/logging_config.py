import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "botocore",
    "boto3",
    "urllib3",
    "sqlalchemy.engine",
)


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        try:
            from app.config import settings
            level = settings.log_level
        except Exception:
            return logging.INFO
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: int | str | None = None) -> None:
    """Send every log record to stdout with one format; level defaults to settings.log_level."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    if root.handlers:
        root.handlers.clear()
    root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
