"""
Centralized logging configuration.

Sets up:
- Console handler (INFO level)
- Rotating file handler for imposter.log (DEBUG level)
- Separate file handler for errors.log (ERROR level)

File handlers are skipped when ``LOG_TO_FILE`` is disabled (tests).
"""

import logging
import logging.config

from configs.config import get_config

cfg = get_config()


def setup_logging() -> None:
    """Configure logging once at application startup."""
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "default",
        },
    }
    if cfg.LOG_TO_FILE:
        handlers["app_log_handler"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "default",
            "filename": cfg.LOG_FILE_APP,
            "maxBytes": cfg.LOG_MAX_BYTES,
            "backupCount": cfg.LOG_BACKUP_COUNT,
            "encoding": "utf8",
        }
        handlers["error_log_handler"] = {
            "class": "logging.FileHandler",
            "level": "ERROR",
            "formatter": "default",
            "filename": cfg.LOG_FILE_ERRORS,
            "encoding": "utf8",
        }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": handlers,
        "root": {
            "level": "DEBUG",
            "handlers": list(handlers),
        },
    }

    logging.config.dictConfig(logging_config)
    logging.info("Logging configured successfully.")
