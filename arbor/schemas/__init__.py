"""
Schemas

Purpose: Export the error taxonomy shared by the crypto, merkle and
config packages.
"""

from .errors import (
    ArborError,
    ArborException,
    ConfigurationError,
    EmptyInputError,
    ErrorCodes,
    HashConfigurationError,
    IndexOutOfRangeError,
)

__all__ = [
    "ErrorCodes",
    "ArborError",
    "ArborException",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "HashConfigurationError",
    "ConfigurationError",
]
