"""
Logging configuration for the Klok bot.

Console output for normal runs, optional rotating files, JSON lines
on request. Every handler redacts credentials.
"""

import copy
import logging
import logging.config
from typing import Optional


DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "redact_credentials": {
            "()": "klok.utils.structured_logging.CredentialRedactionFilter"
        }
    },
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "detailed": {
            "format": (
                "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d "
                "- %(message)s (%(funcName)s)"
            ),
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "json": {
            "()": "klok.utils.structured_logging.StructuredFormatter"
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "standard",
            "filters": ["redact_credentials"],
            "stream": "ext://sys.stdout"
        }
    },
    "loggers": {
        "klok": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        }
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"]
    }
}


def _file_handler(filename: str, level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filters": ["redact_credentials"],
        "filename": filename,
        "maxBytes": 10485760,  # 10MB
        "backupCount": 5
    }


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_format: bool = False
) -> dict:
    """
    Setup logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path; errors also go to <name>_errors.log
        json_format: Use JSON formatting

    Returns:
        The applied dictConfig
    """
    config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)

    if level:
        config["loggers"]["klok"]["level"] = level.upper()

    if log_file:
        error_file = log_file[:-4] + "_errors.log" if log_file.endswith(".log") else log_file + ".errors"
        config["handlers"]["file"] = _file_handler(log_file, "DEBUG")
        config["handlers"]["error_file"] = _file_handler(error_file, "ERROR")
        config["loggers"]["klok"]["handlers"] += ["file", "error_file"]

    if json_format:
        for handler in config["handlers"].values():
            handler["formatter"] = "json"

    logging.config.dictConfig(config)
    return config


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance under the klok namespace.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(f"klok.{name}")
