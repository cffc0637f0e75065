"""Password strength checks matching the server's account rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

MIN_LENGTH = 14
STRONG_LENGTH = 18

_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (
        re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]"),
        "Password must contain at least one special character",
    ),
)

PasswordStrength = Literal["weak", "medium", "strong"]


@dataclass(slots=True)
class PasswordValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_password_strength(password: str) -> PasswordValidation:
    """Check length, upper/lower case, digit and special character rules."""
    errors: list[str] = []
    if len(password) < MIN_LENGTH:
        errors.append(f"Password must be at least {MIN_LENGTH} characters long")
    for pattern, message in _RULES:
        if not pattern.search(password):
            errors.append(message)
    return PasswordValidation(valid=not errors, errors=errors)


def get_password_strength(password: str) -> PasswordStrength:
    """Strength level for a visual indicator."""
    validation = validate_password_strength(password)
    if validation.valid:
        return "strong" if len(password) >= STRONG_LENGTH else "medium"

    met = 1 + len(_RULES) - len(validation.errors)
    return "medium" if met >= 3 else "weak"


__all__ = [
    "MIN_LENGTH",
    "PasswordStrength",
    "PasswordValidation",
    "get_password_strength",
    "validate_password_strength",
]
