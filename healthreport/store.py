"""
Health Report Store

The registry's single state holder. Every mutating entry point is an
ordered list of guard checks followed by a write:

    checks pass  -> state changes, Result.success(value)
    any fails    -> no state change, Result.failure(first failing code)

Codes are returned, never raised. Each call holds the store lock for its
whole duration, so calls behave as atomic, serialized transactions.
"""

import dataclasses
import threading
from typing import Dict, List, Optional, Set

from .checks import (
    first_failure,
    in_range,
    is_int,
    is_one_of,
    is_valid_category,
    is_valid_contact_info,
    is_valid_hash,
)
from .config import DEFAULT_MAX_REPORTS, DEFAULT_SUBMISSION_FEE, StoreSettings
from .errors import ErrorCode, Result
from .ledger import FeeLedger, InMemoryFeeLedger
from .logging_config import audit_log
from .models import (
    AGE_GROUP_VALUES,
    GENDER_VALUES,
    MAX_ANONYMITY_LEVEL,
    MAX_PRIVACY_LEVEL,
    MAX_SEVERITY,
    MIN_ANONYMITY_LEVEL,
    MIN_PRIVACY_LEVEL,
    MIN_SEVERITY,
    REPORT_TYPE_VALUES,
    STATUS_VALUES,
    Report,
    ReportStatus,
    ReportUpdate,
)


class ReportStore:
    """
    In-memory registry of health reports.

    Usage:
        store = ReportStore()
        store.set_authority_contract("health-authority")
        result = store.submit_report("reporter-1", symptom, location, ...)
        if result.ok:
            report = store.get_report(result.value)
    """

    def __init__(
        self,
        ledger: Optional[FeeLedger] = None,
        max_reports: int = DEFAULT_MAX_REPORTS,
        submission_fee: int = DEFAULT_SUBMISSION_FEE
    ):
        self.ledger = ledger or InMemoryFeeLedger()
        self._max_reports = max_reports
        self._submission_fee = submission_fee
        self._authority: Optional[str] = None
        self._next_report_id = 0
        self._block_height = 0
        self._banned: Set[str] = set()
        self._reports: Dict[int, Report] = {}
        self._reports_by_reporter: Dict[str, List[int]] = {}
        self._report_updates: Dict[int, ReportUpdate] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        settings: StoreSettings,
        ledger: Optional[FeeLedger] = None
    ) -> "ReportStore":
        """Build a store from configuration, binding the authority if one is set."""
        store = cls(
            ledger=ledger,
            max_reports=settings.max_reports,
            submission_fee=settings.submission_fee,
        )
        if settings.authority:
            store.set_authority_contract(settings.authority)
        return store

    # ------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------

    @property
    def authority(self) -> Optional[str]:
        return self._authority

    @property
    def max_reports(self) -> int:
        return self._max_reports

    @property
    def submission_fee(self) -> int:
        return self._submission_fee

    @property
    def block_height(self) -> int:
        return self._block_height

    def advance_block(self, blocks: int = 1) -> int:
        """Move the logical clock forward. Returns the new height."""
        if not is_int(blocks) or blocks < 0:
            raise ValueError(f"blocks must be a non-negative integer, got {blocks!r}")
        with self._lock:
            self._block_height += blocks
            return self._block_height

    # ------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------

    def set_authority_contract(self, principal: str) -> Result[bool]:
        """Bind the authority. Succeeds once; later calls fail."""
        with self._lock:
            if self._authority is not None:
                return self._reject("set_authority_contract", ErrorCode.AUTHORITY_ALREADY_SET)
            self._authority = principal
        audit_log.authority_bound(principal)
        return Result.success(True)

    def set_max_reports(self, new_max: int) -> Result[bool]:
        with self._lock:
            code = first_failure([
                (ErrorCode.INVALID_UPDATE_PARAM, lambda: is_int(new_max) and new_max > 0),
                (ErrorCode.AUTHORITY_NOT_VERIFIED, lambda: self._authority is not None),
            ])
            if code is not None:
                return self._reject("set_max_reports", code)
            old = self._max_reports
            self._max_reports = new_max
        audit_log.config_changed("max_reports", old, new_max)
        return Result.success(True)

    def set_submission_fee(self, new_fee: int) -> Result[bool]:
        with self._lock:
            code = first_failure([
                (ErrorCode.INVALID_UPDATE_PARAM, lambda: is_int(new_fee) and new_fee >= 0),
                (ErrorCode.AUTHORITY_NOT_VERIFIED, lambda: self._authority is not None),
            ])
            if code is not None:
                return self._reject("set_submission_fee", code)
            old = self._submission_fee
            self._submission_fee = new_fee
        audit_log.config_changed("submission_fee", old, new_fee)
        return Result.success(True)

    def ban_reporter(self, caller: str, reporter: str) -> Result[bool]:
        """Add ``reporter`` to the ban list. Authority only; idempotent."""
        with self._lock:
            if caller != self._authority or self._authority is None:
                return self._reject("ban_reporter", ErrorCode.NOT_AUTHORIZED, caller)
            self._banned.add(reporter)
        audit_log.reporter_banned(caller, reporter)
        return Result.success(True)

    def is_reporter_banned(self, reporter: str) -> bool:
        with self._lock:
            return reporter in self._banned

    # ------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------

    def submit_report(
        self,
        caller: str,
        symptom_hash: bytes,
        location_hash: bytes,
        privacy_level: int,
        severity: int,
        category: str,
        anonymity_level: int,
        age_group: str,
        gender: str,
        contact_info: Optional[str],
        report_type: str
    ) -> Result[int]:
        """
        Validate and store a new report. Returns its id.

        Checks run in a fixed order and the first failure is returned.
        On success the current fee is charged from the caller to the
        authority and the report is stored as pending.
        """
        with self._lock:
            code = first_failure([
                (ErrorCode.MAX_REPORTS_EXCEEDED, lambda: self._next_report_id < self._max_reports),
                (ErrorCode.REPORTER_BANNED, lambda: caller not in self._banned),
                (ErrorCode.INVALID_SYMPTOM_HASH, lambda: is_valid_hash(symptom_hash)),
                (ErrorCode.INVALID_LOCATION_HASH, lambda: is_valid_hash(location_hash)),
                (ErrorCode.INVALID_PRIVACY_LEVEL,
                 lambda: in_range(privacy_level, MIN_PRIVACY_LEVEL, MAX_PRIVACY_LEVEL)),
                (ErrorCode.INVALID_SEVERITY, lambda: in_range(severity, MIN_SEVERITY, MAX_SEVERITY)),
                (ErrorCode.INVALID_CATEGORY, lambda: is_valid_category(category)),
                (ErrorCode.INVALID_ANONYMITY_LEVEL,
                 lambda: in_range(anonymity_level, MIN_ANONYMITY_LEVEL, MAX_ANONYMITY_LEVEL)),
                (ErrorCode.INVALID_AGE_GROUP, lambda: is_one_of(age_group, AGE_GROUP_VALUES)),
                (ErrorCode.INVALID_GENDER, lambda: is_one_of(gender, GENDER_VALUES)),
                (ErrorCode.INVALID_CONTACT_INFO, lambda: is_valid_contact_info(contact_info)),
                (ErrorCode.INVALID_REPORT_TYPE, lambda: is_one_of(report_type, REPORT_TYPE_VALUES)),
                (ErrorCode.AUTHORITY_NOT_VERIFIED, lambda: self._authority is not None),
            ])
            if code is not None:
                return self._reject("submit_report", code, caller)

            fee = self._submission_fee
            self.ledger.transfer(fee, caller, self._authority)

            report_id = self._next_report_id
            self._reports[report_id] = Report(
                reporter=caller,
                symptom_hash=bytes(symptom_hash),
                location_hash=bytes(location_hash),
                timestamp=self._block_height,
                status=ReportStatus.PENDING.value,
                privacy_level=privacy_level,
                severity=severity,
                category=category,
                anonymity_level=anonymity_level,
                age_group=age_group,
                gender=gender,
                contact_info=contact_info,
                verification_status=False,
                report_type=report_type,
            )
            self._reports_by_reporter.setdefault(caller, []).append(report_id)
            self._next_report_id += 1
            authority = self._authority

        audit_log.fee_charged(fee, caller, authority)
        audit_log.report_submitted(report_id, caller, report_type, severity, category)
        return Result.success(report_id)

    def update_report(
        self,
        caller: str,
        report_id: int,
        update_symptom_hash: bytes,
        update_location_hash: bytes
    ) -> Result[bool]:
        """Revise the hashes of a pending report. Original reporter only."""
        with self._lock:
            report = self._reports.get(report_id)
            code = first_failure([
                (ErrorCode.INVALID_REPORT_ID, lambda: report is not None),
                (ErrorCode.NOT_AUTHORIZED, lambda: report.reporter == caller),
                (ErrorCode.UPDATE_NOT_ALLOWED, lambda: report.is_pending()),
                (ErrorCode.INVALID_SYMPTOM_HASH, lambda: is_valid_hash(update_symptom_hash)),
                (ErrorCode.INVALID_LOCATION_HASH, lambda: is_valid_hash(update_location_hash)),
            ])
            if code is not None:
                return self._reject("update_report", code, caller)

            now = self._block_height
            self._reports[report_id] = dataclasses.replace(
                report,
                symptom_hash=bytes(update_symptom_hash),
                location_hash=bytes(update_location_hash),
                timestamp=now,
            )
            self._report_updates[report_id] = ReportUpdate(
                update_symptom_hash=bytes(update_symptom_hash),
                update_location_hash=bytes(update_location_hash),
                update_timestamp=now,
                updater=caller,
            )

        audit_log.report_updated(report_id, caller, now)
        return Result.success(True)

    def set_report_status(self, caller: str, report_id: int, new_status: str) -> Result[bool]:
        """
        Overwrite a report's status. Authority only.

        Any of the three statuses may be set from any other, including
        moving a reviewed report back to pending.
        """
        with self._lock:
            code = first_failure([
                (ErrorCode.NOT_AUTHORIZED,
                 lambda: self._authority is not None and caller == self._authority),
                (ErrorCode.INVALID_STATUS, lambda: is_one_of(new_status, STATUS_VALUES)),
                (ErrorCode.INVALID_REPORT_ID, lambda: report_id in self._reports),
            ])
            if code is not None:
                return self._reject("set_report_status", code, caller)

            report = self._reports[report_id]
            self._reports[report_id] = dataclasses.replace(report, status=new_status)

        audit_log.report_status_changed(report_id, report.status, new_status, caller)
        return Result.success(True)

    def get_report(self, report_id: int) -> Optional[Report]:
        with self._lock:
            return self._reports.get(report_id)

    def get_report_count(self) -> Result[int]:
        with self._lock:
            return Result.success(self._next_report_id)

    def get_report_update(self, report_id: int) -> Optional[ReportUpdate]:
        with self._lock:
            return self._report_updates.get(report_id)

    def get_reports_by_reporter(self, reporter: str) -> List[int]:
        with self._lock:
            return list(self._reports_by_reporter.get(reporter, []))

    def _reject(self, operation: str, code: ErrorCode, caller: Optional[str] = None) -> Result:
        audit_log.request_rejected(operation, int(code), code.name, caller)
        return Result.failure(code)
