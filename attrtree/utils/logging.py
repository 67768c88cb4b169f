"""
Logging Utilities

Helpers for configuring the standard library loggers used throughout
attrtree. The core modules only ever emit debug messages; the CLI decides
where they go.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the specified name

    Args:
        name: Logger name (usually module or component name)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_logging(level: str = "WARNING", format_string: Optional[str] = None) -> None:
    """
    Configure logging for attrtree components

    Log records go to stderr so command output on stdout stays clean.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string or DEFAULT_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )
