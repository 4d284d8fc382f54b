from typing import Optional

from pydantic import BaseModel, field_validator

from .hashing import from_hex


def _decode_hex(value: str) -> bytes:
    try:
        return from_hex(value)
    except ValueError as e:
        raise ValueError(f"hash must be hex encoded: {e}") from e


class AuthorityRequest(BaseModel):
    principal: str


class ValueRequest(BaseModel):
    value: int


class BanRequest(BaseModel):
    reporter: str


class SubmitReportRequest(BaseModel):
    symptom_hash: bytes
    location_hash: bytes
    privacy_level: int
    severity: int
    category: str
    anonymity_level: int
    age_group: str
    gender: str
    contact_info: Optional[str] = None
    report_type: str

    @field_validator("symptom_hash", "location_hash", mode="before")
    @classmethod
    def _hex_hash(cls, v):
        if isinstance(v, str):
            return _decode_hex(v)
        return v


class UpdateReportRequest(BaseModel):
    symptom_hash: bytes
    location_hash: bytes

    @field_validator("symptom_hash", "location_hash", mode="before")
    @classmethod
    def _hex_hash(cls, v):
        if isinstance(v, str):
            return _decode_hex(v)
        return v


class StatusRequest(BaseModel):
    status: str
