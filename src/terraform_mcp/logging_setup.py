"""Logging configuration for the server process."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the ``terraform_mcp`` logger to write to stderr.

    stdout is reserved for the stdio transport. Calling this again only
    updates the level.

    Raises:
        ValueError: If ``level`` is not a logging level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    package_logger = logging.getLogger("terraform_mcp")
    package_logger.setLevel(numeric_level)

    if not any(getattr(h, "_terraform_mcp", False) for h in package_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._terraform_mcp = True
        package_logger.addHandler(handler)
