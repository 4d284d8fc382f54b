"""
Health Report Data Model

Reports are frozen records. The store replaces a report with an amended
copy instead of mutating it in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


HASH_LENGTH = 32

MIN_PRIVACY_LEVEL = 0
MAX_PRIVACY_LEVEL = 5
MIN_SEVERITY = 1
MAX_SEVERITY = 10
MAX_CATEGORY_LENGTH = 50
MIN_ANONYMITY_LEVEL = 0
MAX_ANONYMITY_LEVEL = 3
MAX_CONTACT_INFO_LENGTH = 100


class ReportStatus(str, Enum):
    """Review state of a report."""
    PENDING = "pending"
    VALIDATED = "validated"
    REJECTED = "rejected"


class AgeGroup(str, Enum):
    UNDER_19 = "0-18"
    FROM_19_TO_35 = "19-35"
    FROM_36_TO_60 = "36-60"
    OVER_60 = "60+"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ReportType(str, Enum):
    SYMPTOM = "symptom"
    OUTBREAK = "outbreak"
    TEST_RESULT = "test-result"


def enum_values(enum_cls) -> frozenset:
    return frozenset(member.value for member in enum_cls)


STATUS_VALUES = enum_values(ReportStatus)
AGE_GROUP_VALUES = enum_values(AgeGroup)
GENDER_VALUES = enum_values(Gender)
REPORT_TYPE_VALUES = enum_values(ReportType)


@dataclass(frozen=True)
class Report:
    """
    A submitted health report.

    Only ``status`` (authority) and the two hashes plus ``timestamp``
    (reporter, while pending) ever change after submission.
    """
    reporter: str
    symptom_hash: bytes
    location_hash: bytes
    timestamp: int
    status: str
    privacy_level: int
    severity: int
    category: str
    anonymity_level: int
    age_group: str
    gender: str
    contact_info: Optional[str]
    verification_status: bool
    report_type: str

    def is_pending(self) -> bool:
        return self.status == ReportStatus.PENDING.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reporter": self.reporter,
            "symptom_hash": self.symptom_hash.hex(),
            "location_hash": self.location_hash.hex(),
            "timestamp": self.timestamp,
            "status": self.status,
            "privacy_level": self.privacy_level,
            "severity": self.severity,
            "category": self.category,
            "anonymity_level": self.anonymity_level,
            "age_group": self.age_group,
            "gender": self.gender,
            "contact_info": self.contact_info,
            "verification_status": self.verification_status,
            "report_type": self.report_type,
        }


@dataclass(frozen=True)
class ReportUpdate:
    """Last hash revision of a report. Overwritten on every update."""
    update_symptom_hash: bytes
    update_location_hash: bytes
    update_timestamp: int
    updater: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "update_symptom_hash": self.update_symptom_hash.hex(),
            "update_location_hash": self.update_location_hash.hex(),
            "update_timestamp": self.update_timestamp,
            "updater": self.updater,
        }


@dataclass(frozen=True)
class FeeTransfer:
    """Submission fee moved from a reporter to the authority."""
    amount: int
    sender: str
    recipient: str

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "sender": self.sender, "recipient": self.recipient}
