"""Name normalization and input validators.

Validators return a ValidationResult listing every violated rule instead of
raising, so callers can show all problems at once. ``ensure_valid`` turns a
failed result into an SNSError at the service boundary.
"""

from __future__ import annotations

import re
import time

from sns_client.api.models import ValidationResult
from sns_client.errors import validation_error

TLD = ".s"
MIN_LENGTH = 3
MAX_LENGTH = 64
MAX_REGISTRATION_YEARS = 5
MAX_TEXT_KEY_LENGTH = 64
GRACE_PERIOD = 30 * 24 * 60 * 60

_VALID_CHARS = re.compile(r"^[a-z0-9-]+$")
_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")
_TEXT_KEY = re.compile(r"^[a-zA-Z0-9.-]+$")
_HEX = re.compile(r"^0x[a-fA-F0-9]+$")


def normalize(name: object) -> str:
    """Lowercase and strip a trailing TLD. Non-strings normalize to ''."""
    if not isinstance(name, str) or not name:
        return ""
    label = name.lower()
    while label.endswith(TLD):
        label = label[: -len(TLD)]
    return label


def add_suffix(name: str) -> str:
    return f"{normalize(name)}{TLD}"


def validate_domain_name(name: object) -> ValidationResult:
    label = normalize(name)
    if not label:
        return ValidationResult(valid=False, errors=["Domain name must be a non-empty string"])

    errors: list[str] = []
    if len(label) < MIN_LENGTH:
        errors.append(f"Domain name must be at least {MIN_LENGTH} characters long")
    if len(label) > MAX_LENGTH:
        errors.append(f"Domain name cannot exceed {MAX_LENGTH} characters")
    if not _VALID_CHARS.match(label):
        errors.append("Domain name can only contain lowercase letters, numbers, and hyphens")
    if "--" in label:
        errors.append("Domain name cannot contain consecutive hyphens")
    if not ("a" <= label[0] <= "z"):
        errors.append("Domain name must start with a letter")
    if not ("a" <= label[-1] <= "z" or "0" <= label[-1] <= "9"):
        errors.append("Domain name must end with a letter or number")
    return ValidationResult(valid=not errors, errors=errors)


def validate_address(address: object) -> ValidationResult:
    if not isinstance(address, str) or not address:
        return ValidationResult(valid=False, errors=["Address must be a non-empty string"])
    errors: list[str] = []
    if not _ADDRESS.match(address):
        errors.append("Invalid address format")
    return ValidationResult(valid=not errors, errors=errors)


def validate_years(years: object, max_years: int = MAX_REGISTRATION_YEARS) -> ValidationResult:
    errors: list[str] = []
    if isinstance(years, bool) or not isinstance(years, int) or years <= 0:
        errors.append("Years must be a positive integer")
    elif years > max_years:
        errors.append(f"Cannot register for more than {max_years} years")
    return ValidationResult(valid=not errors, errors=errors)


def validate_text_key(key: object) -> ValidationResult:
    if not isinstance(key, str) or not key:
        return ValidationResult(valid=False, errors=["Text record key must be a non-empty string"])
    errors: list[str] = []
    if len(key) > MAX_TEXT_KEY_LENGTH:
        errors.append(f"Text record key cannot exceed {MAX_TEXT_KEY_LENGTH} characters")
    if not _TEXT_KEY.match(key):
        errors.append("Text record key can only contain letters, numbers, dots, and hyphens")
    return ValidationResult(valid=not errors, errors=errors)


def is_valid_hex(value: str) -> bool:
    return bool(_HEX.match(value))


def ensure_valid(result: ValidationResult, what: str) -> None:
    """Raise a validation SNSError when ``result`` failed."""
    if not result.valid:
        raise validation_error(what, result.errors)


def require_label(name: object) -> str:
    """Normalize and validate a domain name, returning the label."""
    ensure_valid(validate_domain_name(name), "domain name")
    return normalize(name)


# ── Expiry helpers ──


def is_domain_expired(
    expiry_time: int, grace: int = GRACE_PERIOD, now: float | None = None,
) -> bool:
    """True once the grace period after ``expiry_time`` has fully elapsed."""
    current = int(time.time() if now is None else now)
    return expiry_time + grace <= current


def time_until_expiry(expiry_time: int, now: float | None = None) -> int:
    current = int(time.time() if now is None else now)
    return max(0, expiry_time - current)


def format_duration(seconds: int) -> str:
    if seconds <= 0:
        return "Expired"
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    if days > 0:
        return f"{days} day{'s' if days != 1 else ''}"
    if hours > 0:
        return f"{hours} hour{'s' if hours != 1 else ''}"
    return f"{minutes} minute{'s' if minutes != 1 else ''}"
