"""Single tagged error type for every failure the client surfaces."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    UNAVAILABLE = "unavailable"
    INSUFFICIENT_PAYMENT = "insufficient_payment"
    PERMISSION = "permission"
    CONFIGURATION = "configuration"
    NETWORK = "network"


class SNSError(Exception):
    """Raised by every public operation; ``kind`` says what went wrong."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"SNSError({self.kind.value}, {self.message!r})"


# Revert substrings → error kind. Checked in order, case-insensitive.
REVERT_PATTERNS: list[tuple[str, ErrorKind]] = [
    ("name taken", ErrorKind.UNAVAILABLE),
    ("already registered", ErrorKind.UNAVAILABLE),
    ("incorrect payment", ErrorKind.INSUFFICIENT_PAYMENT),
    ("insufficient payment", ErrorKind.INSUFFICIENT_PAYMENT),
    ("domain not found", ErrorKind.NOT_FOUND),
    ("invalid name", ErrorKind.VALIDATION),
    ("not owner", ErrorKind.PERMISSION),
]


def classify_message(message: str) -> ErrorKind | None:
    lowered = message.lower()
    for needle, kind in REVERT_PATTERNS:
        if needle in lowered:
            return kind
    return None


def translate_remote_error(exc: BaseException, label: str, action: str) -> SNSError:
    """Map a transport/contract failure onto an SNSError.

    SNSError instances pass through untouched. Known revert reasons become
    their specific kind; everything else is NETWORK with the cause attached.
    """
    if isinstance(exc, SNSError):
        return exc
    message = str(exc) or exc.__class__.__name__
    details: dict[str, Any] = {"domain": label, "cause": exc}
    kind = classify_message(message)
    if kind is ErrorKind.UNAVAILABLE:
        details["reason"] = "already registered"
        return SNSError(kind, f"Domain '{label}' is not available: already registered", details)
    if kind is ErrorKind.INSUFFICIENT_PAYMENT:
        return SNSError(kind, f"Payment rejected while trying to {action} '{label}'", details)
    if kind is ErrorKind.NOT_FOUND:
        return SNSError(kind, f"Domain '{label}' not found", details)
    if kind is ErrorKind.VALIDATION:
        return SNSError(kind, f"Domain name '{label}' is invalid", details)
    if kind is ErrorKind.PERMISSION:
        return SNSError(kind, f"Not authorized to {action} '{label}'", details)
    return SNSError(ErrorKind.NETWORK, f"Failed to {action} {label}: {message}", details)


def validation_error(what: str, errors: list[str]) -> SNSError:
    return SNSError(
        ErrorKind.VALIDATION,
        f"Invalid {what}: {', '.join(errors)}",
        {"errors": list(errors)},
    )


def not_found(label: str, reason: str | None = None) -> SNSError:
    details: dict[str, Any] = {"domain": label}
    if reason:
        details["reason"] = reason
        return SNSError(ErrorKind.NOT_FOUND, f"Domain '{label}': {reason}", details)
    return SNSError(ErrorKind.NOT_FOUND, f"Domain '{label}' not found", details)


def expired(label: str, expiry_time: int) -> SNSError:
    return SNSError(
        ErrorKind.EXPIRED,
        f"Domain '{label}' has expired",
        {"domain": label, "expiry_time": expiry_time},
    )
