"""Custom exceptions and warnings used across LearnerIndex."""


class LearnerIndexError(Exception):
    """Base exception for library errors."""


class ConfigurationError(LearnerIndexError):
    """Raised when configuration cannot be loaded or validated."""


class ValidationError(LearnerIndexError, ValueError):
    """Raised when arguments fail validation."""


class RegistryError(LearnerIndexError):
    """Raised for invalid or conflicting learner registrations."""


class UnknownLearnerError(RegistryError, KeyError):
    """Raised when a learner id is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class MissingPackageError(LearnerIndexError):
    """Raised when a learner's required packages are not installed."""

    def __init__(self, cl: str, packages):
        self.cl = cl
        self.packages = list(packages)
        super().__init__(
            f"For learner {cl} please install the following packages: {','.join(self.packages)}"
        )


class LearnerConstructionError(LearnerIndexError):
    """Raised when a learner's constructor fails."""


class MissingPackagesWarning(UserWarning):
    """Emitted when registered learners cannot be constructed."""
