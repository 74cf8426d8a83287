"""Contact form field validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

REQUIRED_FIELDS = ("name", "email", "message")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]+$")

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 2000

SERVICE_OPTIONS = {
    "": "Select a service (optional)",
    "web-design": "Web Design",
    "consulting": "Consulting",
    "ongoing-support": "Ongoing Support",
    "other": "Something Else",
}


def _validate_name(value: str) -> Optional[str]:
    if not value.strip():
        return "Name is required"
    if len(value) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(value) > NAME_MAX_LENGTH:
        return f"Name must be less than {NAME_MAX_LENGTH} characters"
    if not NAME_PATTERN.fullmatch(value):
        return "Please enter a valid name"
    return None


def _validate_email(value: str) -> Optional[str]:
    if not value.strip():
        return "Email is required"
    # fullmatch so a trailing newline cannot slip past "$"
    if not EMAIL_PATTERN.fullmatch(value):
        return "Please enter a valid email address"
    return None


def _validate_message(value: str) -> Optional[str]:
    if not value.strip():
        return "Message is required"
    if len(value) < MESSAGE_MIN_LENGTH:
        return f"Message must be at least {MESSAGE_MIN_LENGTH} characters"
    if len(value) > MESSAGE_MAX_LENGTH:
        return f"Message must be less than {MESSAGE_MAX_LENGTH} characters"
    return None


_VALIDATORS = {
    "name": _validate_name,
    "email": _validate_email,
    "message": _validate_message,
}


def validate_field(field_name: str, value: str) -> Optional[str]:
    """Return a human-readable error for the field, or None when it is valid."""
    validator = _VALIDATORS.get(field_name)
    if validator is None:
        return None
    return validator(value)


def validate_form(data: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Validate every required field independently."""
    return {name: validate_field(name, data.get(name, "")) for name in REQUIRED_FIELDS}


def count_errors(errors: Mapping[str, Optional[str]]) -> int:
    return sum(1 for message in errors.values() if message)


def error_announcement(count: int) -> str:
    """Screen-reader summary for a blocked submission."""
    if count == 1:
        return "There is 1 error in the form. Please correct it before submitting."
    return (
        f"There are {count} errors in the form. "
        "Please correct them before submitting."
    )


@dataclass
class CharacterCounter:
    """Tracks message length thresholds so each one is announced only once."""

    limit: int = MESSAGE_MAX_LENGTH
    _last_threshold: Optional[str] = field(default=None, repr=False)

    def update(self, count: int) -> Optional[str]:
        """Return an announcement when a new threshold is crossed."""
        percent = count / self.limit * 100

        threshold = None
        if percent >= 100:
            threshold = "exceeded"
        elif percent >= 95:
            threshold = "95"
        elif percent >= 90:
            threshold = "90"

        announcement = None
        if threshold and threshold != self._last_threshold:
            if threshold == "exceeded":
                announcement = (
                    f"Character limit exceeded. You have used {count} of "
                    f"{self.limit} characters. Please shorten your message."
                )
            else:
                announcement = (
                    f"Approaching character limit. {count} of {self.limit} "
                    "characters used."
                )
            self._last_threshold = threshold

        if percent < 90:
            self._last_threshold = None

        return announcement
