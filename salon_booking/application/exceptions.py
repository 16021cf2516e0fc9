from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    INVALID_STATE = "invalid_state"
    NO_AVAILABILITY = "no_availability"
    SLOT_CONFLICT = "slot_conflict"
    VALIDATION = "validation"
    NETWORK = "network"
    SERVER = "server"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"


class BookingError(RuntimeError):
    """Base class for classified booking failures."""

    kind: FailureKind = FailureKind.SERVER

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class InvalidSelectionState(BookingError):
    """Raised when a selection transition is attempted out of order."""

    kind = FailureKind.INVALID_STATE


class SelectionValidationError(BookingError):
    """Raised when a selection input is rejected locally (unknown option, non-startable time)."""

    kind = FailureKind.VALIDATION


class SlotConflict(BookingError):
    """Raised when another booking claimed an overlapping slot before submission."""

    kind = FailureKind.SLOT_CONFLICT


class NetworkError(BookingError):
    """Raised on transport failures (timeouts, connection errors)."""

    kind = FailureKind.NETWORK


class ServerError(BookingError):
    """Raised when the API fails or answers with a body we cannot use."""

    kind = FailureKind.SERVER


class UnauthorizedError(BookingError):
    kind = FailureKind.UNAUTHORIZED


class NotFoundError(BookingError):
    kind = FailureKind.NOT_FOUND


@dataclass(frozen=True)
class BookingFailure:
    kind: FailureKind
    message: str
    error_code: str | None = None

    @property
    def retryable(self) -> bool:
        return self.kind in (FailureKind.NETWORK, FailureKind.SERVER)

    @classmethod
    def from_error(cls, error: BookingError) -> "BookingFailure":
        return cls(kind=error.kind, message=error.message, error_code=error.error_code)
