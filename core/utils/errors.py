"""Custom exceptions for core logic."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when caller-supplied configuration cannot be used at all."""

    def __init__(self, message: str, *, field: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class InvariantViolation(AssertionError):
    """Raised when tracked positions and their reference text no longer agree.

    This is a precondition failure on the caller's side; it is never corrected.
    """

    def __init__(
        self,
        message: str,
        *,
        annotation_id: str | None = None,
        position: int | None = None,
        text_length: int | None = None,
    ) -> None:
        super().__init__(message)
        self.annotation_id = annotation_id
        self.position = position
        self.text_length = text_length
