"""
HTTP API for the Health Report Registry.

Thin FastAPI layer over a single ReportStore. The calling principal is
taken from the ``X-Principal`` header. Hashes travel as hex strings.
Store error codes become HTTP errors whose detail carries the numeric
code and its name.
"""

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request

from .api_models import (
    AuthorityRequest,
    BanRequest,
    StatusRequest,
    SubmitReportRequest,
    UpdateReportRequest,
    ValueRequest,
)
from .config import SUBMIT_RPM, load_store_settings
from .errors import ErrorCode, Result
from .logging_config import audit_log, set_request_id
from .rate_limit import RateLimiter
from .store import ReportStore

app = FastAPI(title="Health Report Registry")

HTTP_STATUS_FOR_CODE: Dict[ErrorCode, int] = {
    ErrorCode.NOT_AUTHORIZED: 403,
    ErrorCode.REPORTER_BANNED: 403,
    ErrorCode.INVALID_REPORT_ID: 404,
    ErrorCode.MAX_REPORTS_EXCEEDED: 409,
    ErrorCode.UPDATE_NOT_ALLOWED: 409,
    ErrorCode.AUTHORITY_ALREADY_SET: 409,
    ErrorCode.AUTHORITY_NOT_VERIFIED: 409,
}

submit_limiter = RateLimiter(SUBMIT_RPM)
_store: Optional[ReportStore] = None


def get_store() -> ReportStore:
    global _store
    if _store is None:
        _store = ReportStore.from_settings(load_store_settings())
    return _store


def reset_store(store: Optional[ReportStore] = None) -> ReportStore:
    """Replace the served store (a fresh one from settings by default)."""
    global _store
    _store = store or ReportStore.from_settings(load_store_settings())
    submit_limiter.reset()
    return _store


def unwrap(result: Result) -> Dict[str, Any]:
    if result.ok:
        return result.to_dict()
    raise HTTPException(
        HTTP_STATUS_FOR_CODE.get(result.error, 400),
        {"code": int(result.error), "error": result.error.name},
    )


@app.middleware("http")
async def _request_context(request: Request, call_next):
    request_id = set_request_id(request.headers.get("X-Request-ID"))
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.post("/authority")
def bind_authority(req: AuthorityRequest, store: ReportStore = Depends(get_store)):
    return unwrap(store.set_authority_contract(req.principal))


@app.post("/admin/max-reports")
def set_max_reports(req: ValueRequest, store: ReportStore = Depends(get_store)):
    return unwrap(store.set_max_reports(req.value))


@app.post("/admin/submission-fee")
def set_submission_fee(req: ValueRequest, store: ReportStore = Depends(get_store)):
    return unwrap(store.set_submission_fee(req.value))


@app.post("/bans")
def ban_reporter(
    req: BanRequest,
    x_principal: str = Header(...),
    store: ReportStore = Depends(get_store)
):
    return unwrap(store.ban_reporter(x_principal, req.reporter))


@app.get("/bans/{principal}")
def is_banned(principal: str, store: ReportStore = Depends(get_store)):
    return {"reporter": principal, "banned": store.is_reporter_banned(principal)}


@app.post("/reports")
def submit_report(
    req: SubmitReportRequest,
    x_principal: str = Header(...),
    store: ReportStore = Depends(get_store)
):
    if not submit_limiter.allow(x_principal):
        audit_log.rate_limit_exceeded(x_principal, "/reports")
        raise HTTPException(429, "RATE_LIMIT")
    return unwrap(store.submit_report(
        x_principal,
        req.symptom_hash,
        req.location_hash,
        req.privacy_level,
        req.severity,
        req.category,
        req.anonymity_level,
        req.age_group,
        req.gender,
        req.contact_info,
        req.report_type,
    ))


@app.get("/reports/count")
def report_count(store: ReportStore = Depends(get_store)):
    return unwrap(store.get_report_count())


@app.get("/reports/{report_id}")
def get_report(report_id: int, store: ReportStore = Depends(get_store)):
    report = store.get_report(report_id)
    if report is None:
        raise HTTPException(404, "NOT_FOUND")
    return {"report_id": report_id, **report.to_dict()}


@app.put("/reports/{report_id}")
def update_report(
    report_id: int,
    req: UpdateReportRequest,
    x_principal: str = Header(...),
    store: ReportStore = Depends(get_store)
):
    return unwrap(store.update_report(x_principal, report_id, req.symptom_hash, req.location_hash))


@app.get("/reports/{report_id}/update")
def get_report_update(report_id: int, store: ReportStore = Depends(get_store)):
    update = store.get_report_update(report_id)
    if update is None:
        raise HTTPException(404, "NOT_FOUND")
    return update.to_dict()


@app.post("/reports/{report_id}/status")
def set_report_status(
    report_id: int,
    req: StatusRequest,
    x_principal: str = Header(...),
    store: ReportStore = Depends(get_store)
):
    return unwrap(store.set_report_status(x_principal, report_id, req.status))


@app.get("/reporters/{principal}/reports")
def reports_by_reporter(principal: str, store: ReportStore = Depends(get_store)) -> Dict[str, Any]:
    return {"reporter": principal, "report_ids": store.get_reports_by_reporter(principal)}


@app.get("/ledger/transfers")
def fee_transfers(store: ReportStore = Depends(get_store)) -> List[Dict[str, Any]]:
    return [t.to_dict() for t in store.ledger.transfers()]
