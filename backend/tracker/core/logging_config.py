"""
Application logging setup.

- Single console handler on the root logger
- Level taken from settings.LOG_LEVEL
- Chatty third-party loggers kept at WARNING
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ["httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access"]


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application-wide logging."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
