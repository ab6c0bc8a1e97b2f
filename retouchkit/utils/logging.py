"""
Logging utilities for RetouchKit
Provides console logging setup and pass timing
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional, TextIO

import colorlog

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_HANDLER_NAME = "retouchkit-console"


def setup_console_logging(level: str = "INFO", color: bool = True,
                          fmt: Optional[str] = None,
                          stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Setup console logging with optional color support

    Args:
        level: Logging level name
        color: Whether to use colored output when stdout is a terminal
        fmt: Log record format, defaults to DEFAULT_FORMAT
        stream: Output stream, defaults to stdout

    Returns:
        The installed handler
    """
    fmt = fmt or DEFAULT_FORMAT
    stream = stream or sys.stdout
    root_logger = logging.getLogger()

    # Replace a handler from an earlier call instead of stacking another
    for handler in list(root_logger.handlers):
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.set_name(CONSOLE_HANDLER_NAME)

    if color and stream.isatty():
        formatter = colorlog.ColoredFormatter(
            '%(log_color)s' + fmt + '%(reset)s',
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            }
        )
    else:
        formatter = logging.Formatter(fmt)

    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)
    return console_handler


def setup_logging_from_config(config: Dict[str, Any], color: bool = True,
                              stream: Optional[TextIO] = None) -> logging.Handler:
    """Install console logging using the ``logging`` section of a config dict."""
    section = config.get('logging', {}) if config else {}
    return setup_console_logging(
        level=section.get('level', 'INFO'),
        color=color,
        fmt=section.get('format'),
        stream=stream,
    )


@contextmanager
def log_timing(logger: logging.Logger, label: str):
    """Log the wall time of the wrapped block at debug level."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug(f"{label} took {elapsed_ms:.1f}ms")
