"""Centralized logging configuration."""

import logging


def configure_logging(level: str = "INFO"):
    """
    Configure a consistent logging format for the relay and the client.

    Args:
        level: Log level name applied to the root and framework loggers
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Framework loggers get the same format and don't propagate
    loggers_to_configure = [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "fastapi",
    ]

    for logger_name in loggers_to_configure:
        logger = logging.getLogger(logger_name)
        # httpx logs request URLs at INFO and those carry the appid
        logger.setLevel(max(log_level, logging.WARNING) if logger_name == "httpx" else log_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        logger.propagate = False

        handler = logging.StreamHandler()
        handler.setLevel(log_level)
        handler.setFormatter(formatter)

        logger.addHandler(handler)
