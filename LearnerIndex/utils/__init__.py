"""Utilities for LearnerIndex."""

from .logger import setup_logging, get_logger, set_level
from .errors import (
    LearnerIndexError,
    ConfigurationError,
    ValidationError,
    RegistryError,
    UnknownLearnerError,
    MissingPackageError,
    LearnerConstructionError,
    MissingPackagesWarning,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_level",
    "LearnerIndexError",
    "ConfigurationError",
    "ValidationError",
    "RegistryError",
    "UnknownLearnerError",
    "MissingPackageError",
    "LearnerConstructionError",
    "MissingPackagesWarning",
]
