"""
Field validation for submitted book records.

Rules are checked in a fixed order and the first failure wins, so the
reason returned always names a single field.
"""

import re
from datetime import date
from typing import Any

from .value_objects import BookDraft, ValidationResult

_NAME_RE = re.compile(r"^[A-Za-z\s.-]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\Z", re.ASCII)
_ISBN10_RE = re.compile(r"^(?:\d{9}X|\d{10})\Z", re.ASCII)
_ISBN13_RE = re.compile(r"^\d{13}\Z", re.ASCII)
_INT_RE = re.compile(r"^\d+\Z", re.ASCII)


def is_valid_name(value: Any) -> bool:
    """Letters, whitespace, dots and hyphens only."""
    return isinstance(value, str) and bool(_NAME_RE.match(value))


def is_valid_date(value: Any) -> bool:
    """A ``YYYY-MM-DD`` string (or a date) naming a real calendar day."""
    if isinstance(value, date):
        return True
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_isbn(value: Any) -> bool:
    """ISBN-10 or ISBN-13 shape; check digits are not verified."""
    if not isinstance(value, str):
        return False
    return bool(_ISBN10_RE.match(value) or _ISBN13_RE.match(value))


def is_valid_stock(value: Any) -> bool:
    """Non-negative integer, given as an int or a string of digits."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, str):
        return bool(_INT_RE.match(value.strip()))
    return False


def validate_book(draft: BookDraft) -> ValidationResult:
    """
    Validate every field of a draft.

    Args:
        draft: The record to check

    Returns:
        ValidationResult.success() or a failure naming the first bad field
    """
    if not is_valid_name(draft.title):
        return ValidationResult.failure("Invalid title")
    if not is_valid_name(draft.author):
        return ValidationResult.failure("Invalid author")
    if not is_valid_name(draft.genre):
        return ValidationResult.failure("Invalid genre")
    if not is_valid_date(draft.publication_date):
        return ValidationResult.failure("Invalid publication date")
    if not is_valid_isbn(draft.isbn):
        return ValidationResult.failure("Invalid ISBN")
    if not is_valid_stock(draft.stock):
        return ValidationResult.failure("Invalid stock")
    return ValidationResult.success()
