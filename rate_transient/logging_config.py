"""Logging configuration for the rate_transient package.

Handlers are attached to the ``rate_transient`` package logger only, so an
application embedding the analysis keeps control of the root logger.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "rate_transient"


def configure_logging(
    level: int = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
    log_file: Optional[str | Path] = None,
) -> logging.Logger:
    """Configure logging for rate transient analysis runs.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Logging level (default: WARNING)
        format_string: Custom format string (default: standard format)
        stream: Output stream (default: stderr)
        log_file: Optional path to log file (logs to both console and file if provided)

    Returns:
        The configured package logger

    Example:
        >>> from rate_transient.logging_config import configure_logging
        >>> import logging
        >>> logger = configure_logging(level=logging.INFO)
        >>> logger.name
        'rate_transient'
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(format_string)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (typically called with ``__name__``).

    Names outside the package are nested under it, so they share the
    handlers installed by :func:`configure_logging`.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
