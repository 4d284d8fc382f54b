#!/usr/bin/env python3
"""
Health Report Registry - End-to-End Review Flow

A clinic reporter submits symptom reports, amends one while it is still
pending, and the health authority validates one report, rejects another
and bans a reporter who floods the registry.

Run with: python examples/outbreak_reporting_example.py
"""

import json

from healthreport import ReportStore, location_hash, symptom_hash
from healthreport.logging_config import configure_logging

AUTHORITY = "health-authority"
CLINIC = "clinic-reporter"
SPAMMER = "spam-reporter"


def print_step(title: str, payload) -> None:
    print(f"\n=== {title} ===")
    print(json.dumps(payload, indent=2))


def main():
    configure_logging(level="WARNING", json_format=False)

    store = ReportStore()
    store.set_authority_contract(AUTHORITY)
    store.set_submission_fee(25)

    first = store.submit_report(
        CLINIC,
        symptom_hash({"symptoms": ["fever", "dry cough"], "onset_days": 3}),
        location_hash(52.5200, 13.4050),
        privacy_level=3,
        severity=6,
        category="respiratory",
        anonymity_level=2,
        age_group="36-60",
        gender="female",
        contact_info=None,
        report_type="symptom",
    )
    print_step("Submitted report", first.to_dict())

    # The reporter corrects the location before review.
    store.advance_block()
    amended = store.update_report(
        CLINIC,
        first.value,
        symptom_hash({"symptoms": ["fever", "dry cough"], "onset_days": 3}),
        location_hash(52.5310, 13.3849),
    )
    print_step("Amended report", amended.to_dict())

    second = store.submit_report(
        CLINIC,
        symptom_hash("diarrhoea"),
        location_hash(52.5200, 13.4050),
        privacy_level=1,
        severity=8,
        category="gastrointestinal",
        anonymity_level=0,
        age_group="0-18",
        gender="male",
        contact_info="ward-3@clinic.example",
        report_type="outbreak",
    )

    store.advance_block()
    store.set_report_status(AUTHORITY, first.value, "validated")
    store.set_report_status(AUTHORITY, second.value, "rejected")

    late_edit = store.update_report(CLINIC, first.value, symptom_hash("none"), location_hash(0, 0))
    print_step("Edit after validation", late_edit.to_dict())

    store.ban_reporter(AUTHORITY, SPAMMER)
    blocked = store.submit_report(
        SPAMMER,
        symptom_hash("fever"),
        location_hash(0, 0),
        privacy_level=0,
        severity=10,
        category="fever",
        anonymity_level=3,
        age_group="60+",
        gender="other",
        contact_info=None,
        report_type="symptom",
    )
    print_step("Banned reporter submission", blocked.to_dict())

    print_step("Reports", {
        report_id: store.get_report(report_id).to_dict()
        for report_id in store.get_reports_by_reporter(CLINIC)
    })
    print_step("Fee transfers", [t.to_dict() for t in store.ledger.transfers()])
    print_step("Authority revenue", store.ledger.total_received(AUTHORITY))


if __name__ == "__main__":
    main()
