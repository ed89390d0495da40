from __future__ import annotations

import logging.config

_CONFIGURED = False


def configure_logging(*, level: str = "INFO") -> None:
    """Configure stdlib logging once (console handler)."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "verbose": {
                    "format": "{levelname} {asctime} {name} {message}",
                    "style": "{",
                },
                "simple": {
                    "format": "{levelname} {message}",
                    "style": "{",
                },
            },
            "handlers": {
                "console": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "verbose",
                },
            },
            "root": {
                "handlers": ["console"],
                "level": "WARNING",
            },
            "loggers": {
                "condo_system": {
                    "handlers": ["console"],
                    "level": level,
                    "propagate": False,
                },
                "src.condo_system": {
                    "handlers": ["console"],
                    "level": level,
                    "propagate": False,
                },
            },
        }
    )
    _CONFIGURED = True
