"""
Report Hashing

Reports never carry raw symptom or location data, only 32-byte SHA-256
digests of them. Structured inputs are hashed over their canonical JSON
encoding so that semantically identical payloads give identical digests:

- Object keys sorted lexicographically
- No whitespace between tokens
- UTF-8 encoding
- Arrays keep their order
"""

import hashlib
import json
from typing import Any, Dict, List, Union


def canonicalize(obj: Any) -> bytes:
    """Convert an object to canonical JSON bytes."""
    canonical = _canonicalize_value(obj)
    return json.dumps(canonical, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def canonicalize_str(obj: Any) -> str:
    """Return canonical JSON as string."""
    return canonicalize(obj).decode('utf-8')


def _canonicalize_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    elif isinstance(value, dict):
        return {k: _canonicalize_value(value[k]) for k in sorted(value.keys())}
    elif isinstance(value, (list, tuple)):
        return [_canonicalize_value(item) for item in value]
    else:
        raise ValueError(f"Cannot canonicalize type: {type(value)}")


def sha256_digest(data: Union[bytes, str]) -> bytes:
    """Raw 32-byte SHA-256 digest."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).digest()


def symptom_hash(symptoms: Union[str, Dict[str, Any], List[Any]]) -> bytes:
    """
    Digest of a symptom description.

    Free text is hashed after trimming and lower-casing so that
    "Fever " and "fever" collide; structured descriptions are hashed
    over their canonical encoding.
    """
    if isinstance(symptoms, str):
        return sha256_digest(symptoms.strip().lower())
    return sha256_digest(canonicalize(symptoms))


def location_hash(latitude: float, longitude: float, precision: int = 2) -> bytes:
    """
    Digest of a coarse location.

    Coordinates are rounded to ``precision`` decimal places before hashing
    (two places is roughly a 1 km cell).
    """
    cell = {
        "lat": f"{round(latitude, precision):.{precision}f}",
        "lon": f"{round(longitude, precision):.{precision}f}",
    }
    return sha256_digest(canonicalize(cell))


def to_hex(digest: bytes) -> str:
    return digest.hex()


def from_hex(value: str) -> bytes:
    """Decode a hex string. Raises ValueError on malformed input."""
    value = value.strip()
    if value.startswith("0x"):
        value = value[2:]
    return bytes.fromhex(value)
