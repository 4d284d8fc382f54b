"""
Configuration module for the Health Report Registry.

Centralizes all configuration with environment variable support.
"""

import os
from dataclasses import dataclass
from typing import Optional

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("HEALTHREPORT_ENV", "dev")  # dev|stage|prod

# Store defaults
DEFAULT_MAX_REPORTS = 10000
DEFAULT_SUBMISSION_FEE = 100

MAX_REPORTS = int(os.getenv("HEALTHREPORT_MAX_REPORTS", str(DEFAULT_MAX_REPORTS)))
SUBMISSION_FEE = int(os.getenv("HEALTHREPORT_SUBMISSION_FEE", str(DEFAULT_SUBMISSION_FEE)))

# Authority bound when the HTTP API creates its store (optional)
AUTHORITY = os.getenv("HEALTHREPORT_AUTHORITY") or None

# Rate limits (requests per minute, per principal)
SUBMIT_RPM = int(os.getenv("SUBMIT_RPM", "120"))

# Logging
LOG_LEVEL = os.getenv("HEALTHREPORT_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("HEALTHREPORT_LOG_JSON", "1").lower() in ("1", "true", "yes")
LOG_FILE = os.getenv("HEALTHREPORT_LOG_FILE") or None


@dataclass(frozen=True)
class StoreSettings:
    """Initial values for a new report store."""
    max_reports: int = DEFAULT_MAX_REPORTS
    submission_fee: int = DEFAULT_SUBMISSION_FEE
    authority: Optional[str] = None


def load_store_settings() -> StoreSettings:
    """Store settings from the environment."""
    if MAX_REPORTS <= 0:
        raise ValueError(f"HEALTHREPORT_MAX_REPORTS must be positive, got {MAX_REPORTS}")
    if SUBMISSION_FEE < 0:
        raise ValueError(f"HEALTHREPORT_SUBMISSION_FEE must not be negative, got {SUBMISSION_FEE}")
    return StoreSettings(
        max_reports=MAX_REPORTS,
        submission_fee=SUBMISSION_FEE,
        authority=AUTHORITY,
    )


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("HEALTHREPORT_DEBUG", "").lower() in ("1", "true", "yes")
