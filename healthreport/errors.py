"""
Health Report Registry Error Codes

Every precondition violation maps to exactly one numeric code. Store
operations return these codes inside a Result; they are never raised.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(IntEnum):
    """Numeric failure codes returned by the report store."""
    NOT_AUTHORIZED = 100
    INVALID_SYMPTOM_HASH = 101
    INVALID_LOCATION_HASH = 102
    INVALID_TIMESTAMP = 103
    REPORT_ALREADY_EXISTS = 104
    INVALID_STATUS = 105
    REPORTER_BANNED = 106
    INVALID_REPORT_ID = 107
    INVALID_PRIVACY_LEVEL = 108
    INVALID_SEVERITY = 109
    INVALID_CATEGORY = 110
    MAX_REPORTS_EXCEEDED = 111
    INVALID_UPDATE_PARAM = 112
    UPDATE_NOT_ALLOWED = 113
    AUTHORITY_NOT_VERIFIED = 114
    INVALID_ANONYMITY_LEVEL = 115
    INVALID_AGE_GROUP = 116
    INVALID_GENDER = 117
    INVALID_CONTACT_INFO = 118
    AUTHORITY_ALREADY_SET = 119
    INVALID_REPORT_TYPE = 120


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a store operation.

    On success ``ok`` is True and ``value`` holds the payload. On failure
    ``ok`` is False and ``error`` holds the code of the first failed check.
    """
    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorCode] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: ErrorCode) -> "Result[Any]":
        return cls(ok=False, error=code)

    def failed(self) -> bool:
        return not self.ok

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "error": int(self.error), "error_name": self.error.name}
