"""loadwork exception hierarchy."""

from __future__ import annotations


class LoadworkError(Exception):
    """Base exception for all loadwork errors."""


class StepError(LoadworkError):
    """A classified step failure.

    ``retryable`` decides whether the work is recorded as FailRetryable or
    FailPermanent. It is fixed where the error is raised and never recomputed.
    """

    def __init__(self, message: str, retryable: bool = False) -> None:
        self.message = message
        self.retryable = retryable
        super().__init__(message)

    @property
    def permanent(self) -> bool:
        return not self.retryable


class StoreError(StepError):
    """Workflow record store operation failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class ObjectStoreError(LoadworkError):
    """Object store (S3) operation failed."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(message)


class RequiredValueError(LoadworkError):
    """A required configuration value is missing."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is not set")
