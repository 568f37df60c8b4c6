"""
Runtime Configuration Module

Provides configuration loading for hash selection and logging.
"""

from .runtime import HashConfig, LoggingConfig, RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "HashConfig",
    "LoggingConfig",
]
