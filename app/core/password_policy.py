"""
Credential format rules shared by registration, reset and change-password.
"""

import re
from typing import List, Tuple

from app.core.exceptions import ValidationFailed

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_一-龥]+$")


class PasswordPolicy:
    """At least six characters with one letter and one digit."""

    MIN_LENGTH = 6
    # bcrypt only accepts 72 bytes of input
    MAX_BYTES = 72

    @classmethod
    def validate(cls, password: str) -> Tuple[bool, List[str]]:
        errors = []
        password = password or ""

        if len(password) < cls.MIN_LENGTH:
            errors.append(f"Password must be at least {cls.MIN_LENGTH} characters")
        if len(password.encode("utf-8")) > cls.MAX_BYTES:
            errors.append(f"Password must be at most {cls.MAX_BYTES} bytes long")
        if not re.search(r"[a-zA-Z]", password) or not re.search(r"\d", password):
            errors.append("Password must contain at least one letter and one digit")

        return len(errors) == 0, errors

    @classmethod
    def enforce(cls, password: str, field: str = "password") -> None:
        ok, errors = cls.validate(password)
        if not ok:
            raise ValidationFailed(
                errors[0], errors=[{"field": field, "message": m} for m in errors]
            )


def validate_username(username: str) -> List[str]:
    errors = []
    username = username or ""
    if not 3 <= len(username) <= 20:
        errors.append("Username must be 3-20 characters")
    if username and not USERNAME_RE.match(username):
        errors.append(
            "Username may only contain letters, digits, underscores or Chinese characters"
        )
    return errors


def enforce_username(username: str) -> None:
    errors = validate_username(username)
    if errors:
        raise ValidationFailed(
            errors[0], errors=[{"field": "username", "message": m} for m in errors]
        )
