"""
Ordered Guard Checks

Each store operation is a list of (code, predicate) pairs evaluated in
order. The first predicate that does not hold decides the error code and
nothing after it is evaluated. Predicates never raise: malformed input
simply fails the check.
"""

from typing import Any, Callable, Collection, Iterable, Optional, Tuple

from .errors import ErrorCode
from .models import (
    HASH_LENGTH,
    MAX_CATEGORY_LENGTH,
    MAX_CONTACT_INFO_LENGTH,
)

Check = Tuple[ErrorCode, Callable[[], bool]]


def first_failure(checks: Iterable[Check]) -> Optional[ErrorCode]:
    """Return the code of the first failing check, or None if all pass."""
    for code, holds in checks:
        if not holds():
            return code
    return None


def is_valid_hash(value: Any) -> bool:
    """A hash must be exactly HASH_LENGTH raw bytes."""
    return isinstance(value, (bytes, bytearray)) and len(value) == HASH_LENGTH


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def in_range(value: Any, low: int, high: int) -> bool:
    return is_int(value) and low <= value <= high


def is_one_of(value: Any, allowed: Collection[str]) -> bool:
    return isinstance(value, str) and value in allowed


def is_valid_category(category: Any) -> bool:
    return isinstance(category, str) and 0 < len(category) <= MAX_CATEGORY_LENGTH


def is_valid_contact_info(contact_info: Optional[str]) -> bool:
    # Absent or empty contact info is accepted.
    if contact_info is None or contact_info == "":
        return True
    return isinstance(contact_info, str) and len(contact_info) <= MAX_CONTACT_INFO_LENGTH

