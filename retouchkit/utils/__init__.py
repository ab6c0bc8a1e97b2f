"""
RetouchKit utilities module.
"""

from .logging import setup_console_logging, setup_logging_from_config, log_timing

__all__ = [
    'setup_console_logging',
    'setup_logging_from_config',
    'log_timing',
]
