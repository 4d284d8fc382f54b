"""
Health Report Registry

Version: 1.0.0

Validates and stores health reports (symptom and location hashes,
severity, review status) submitted by reporters. A single authority,
bound once, reviews reports and bans abusive reporters.

Every entry point is an ordered list of guard checks followed by a
write. Failures are returned as numeric error codes, never raised:

    result = store.submit_report(...)
    result.ok      -> True, result.value is the new report id
    result.ok      -> False, result.error is the first failing ErrorCode

Usage:
    from healthreport import ReportStore, symptom_hash, location_hash

    store = ReportStore()
    store.set_authority_contract("health-authority")

    result = store.submit_report(
        "reporter-1",
        symptom_hash("fever, dry cough"),
        location_hash(52.52, 13.40),
        privacy_level=2,
        severity=5,
        category="respiratory",
        anonymity_level=1,
        age_group="19-35",
        gender="female",
        contact_info=None,
        report_type="symptom",
    )

    store.set_report_status("health-authority", result.value, "validated")
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

from .errors import ErrorCode, Result

from .models import (
    HASH_LENGTH,
    AgeGroup,
    FeeTransfer,
    Gender,
    Report,
    ReportStatus,
    ReportType,
    ReportUpdate,
)

from .hashing import (
    canonicalize,
    canonicalize_str,
    location_hash,
    sha256_digest,
    symptom_hash,
)

from .ledger import FeeLedger, InMemoryFeeLedger

from .store import ReportStore


__all__ = [
    "__version__",

    # Errors
    "ErrorCode",
    "Result",

    # Model
    "HASH_LENGTH",
    "AgeGroup",
    "FeeTransfer",
    "Gender",
    "Report",
    "ReportStatus",
    "ReportType",
    "ReportUpdate",

    # Hashing
    "canonicalize",
    "canonicalize_str",
    "location_hash",
    "sha256_digest",
    "symptom_hash",

    # Ledger
    "FeeLedger",
    "InMemoryFeeLedger",

    # Store
    "ReportStore",
]
