"""Custom exceptions for critpath."""


class CritpathError(Exception):
    """Base exception for all critpath errors."""

    pass


class ValidationError(CritpathError):
    """Raised when input data fails schema or reference validation."""

    pass


class CircularDependencyError(ValidationError):
    """Raised when a circular dependency is detected."""

    pass


class MissingReferenceError(ValidationError):
    """Raised when a referenced ID does not exist."""

    pass


class ParseError(CritpathError):
    """Raised when YAML parsing fails."""

    pass


class InfeasibleScheduleError(CritpathError):
    """Raised in strict mode when the schedule has negative float."""

    def __init__(self, message: str, task_ids: list[str]):
        super().__init__(message)
        self.task_ids = task_ids
