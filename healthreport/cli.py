#!/usr/bin/env python3
"""
Health Report Registry Command Line Interface

Usage:
    healthreport hash --text <symptoms> | --file <json> | --location <lat> <lon>
    healthreport replay --script <file> [--output <file>]
    healthreport serve [--host <host>] [--port <port>]
"""

import argparse
import inspect
import json
import sys
from typing import Any, Dict, List, Optional

from .config import LOG_FILE, LOG_JSON, LOG_LEVEL, load_store_settings
from .errors import Result
from .hashing import canonicalize, from_hex, location_hash, sha256_digest, symptom_hash, to_hex
from .logging_config import configure_logging
from .store import ReportStore

# Operations a replay script may call, and whether they take a caller.
REPLAY_OPERATIONS = {
    "set_authority_contract": False,
    "set_max_reports": False,
    "set_submission_fee": False,
    "ban_reporter": True,
    "submit_report": True,
    "update_report": True,
    "set_report_status": True,
    "get_report": False,
    "get_report_count": False,
    "get_report_update": False,
    "get_reports_by_reporter": False,
    "is_reporter_banned": False,
    "advance_block": False,
}

HASH_ARGUMENTS = {"symptom_hash", "location_hash", "update_symptom_hash", "update_location_hash"}


def load_json(path: str) -> Any:
    """Load JSON from file."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json(data: Any, path: str):
    """Save JSON to file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def _render(value: Any) -> Any:
    if isinstance(value, Result):
        return value.to_dict()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def run_calls(store: ReportStore, calls: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Execute scripted calls against ``store`` in order.

    Each call is ``{"op": name, "caller": principal, "args": {...}}``.
    Hash arguments are hex strings. Raises ValueError for a malformed
    script; store rejections are reported in the output, not raised.
    """
    outputs = []
    for index, call in enumerate(calls):
        if not isinstance(call, dict):
            raise ValueError(f"call {index}: expected an object, got {type(call).__name__}")
        op = call.get("op")
        if op not in REPLAY_OPERATIONS:
            raise ValueError(f"call {index}: unknown operation {op!r}")

        args = call.get("args", {})
        if not isinstance(args, dict):
            raise ValueError(f"call {index}: args must be an object")
        args = dict(args)
        for name in HASH_ARGUMENTS & args.keys():
            if not isinstance(args[name], str):
                raise ValueError(f"call {index}: {name} must be a hex string")
            try:
                args[name] = from_hex(args[name])
            except ValueError as e:
                raise ValueError(f"call {index}: {name}: {e}") from e

        if REPLAY_OPERATIONS[op]:
            caller = call.get("caller")
            if not caller:
                raise ValueError(f"call {index}: {op} requires a caller")
            args["caller"] = caller

        method = getattr(store, op)
        try:
            inspect.signature(method).bind(**args)
        except TypeError as e:
            raise ValueError(f"call {index}: {e}") from e
        value = method(**args)
        outputs.append({"op": op, "result": _render(value)})
    return outputs


def cmd_hash(args):
    """Compute report hashes."""
    if args.text is not None:
        digest = symptom_hash(args.text)
    elif args.location is not None:
        lat, lon = args.location
        digest = location_hash(lat, lon, args.precision)
    else:
        digest = sha256_digest(canonicalize(load_json(args.file)))
    print(to_hex(digest))
    return 0


def cmd_replay(args):
    """Replay a script of calls against a fresh store."""
    script = load_json(args.script)
    calls = script.get("calls") if isinstance(script, dict) else script
    if not isinstance(calls, list):
        raise ValueError(f"{args.script}: expected a list of calls or an object with a \"calls\" list")

    store = ReportStore.from_settings(load_store_settings())
    outputs = run_calls(store, calls)

    if args.output:
        save_json(outputs, args.output)
        print(f"Results saved to: {args.output}")
    else:
        print(json.dumps(outputs, indent=2))

    rejected = [o for o in outputs if isinstance(o["result"], dict) and o["result"].get("ok") is False]
    for o in rejected:
        print(f"  - {o['op']}: {o['result']['error_name']}", file=sys.stderr)
    return 1 if rejected else 0


def cmd_serve(args):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("healthreport.api:app", host=args.host, port=args.port, log_config=None)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="healthreport",
        description="Health Report Registry tools"
    )
    parser.add_argument("--log-level", default=LOG_LEVEL)
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_hash = subparsers.add_parser("hash", help="Compute a 32-byte report hash")
    source = p_hash.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Symptom description")
    source.add_argument("--file", help="JSON file hashed over its canonical encoding")
    source.add_argument("--location", nargs=2, type=float, metavar=("LAT", "LON"))
    p_hash.add_argument("--precision", type=int, default=2)
    p_hash.set_defaults(func=cmd_hash)

    p_replay = subparsers.add_parser("replay", help="Replay scripted store calls")
    p_replay.add_argument("--script", required=True)
    p_replay.add_argument("--output")
    p_replay.set_defaults(func=cmd_replay)

    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, json_format=LOG_JSON, log_file=LOG_FILE)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
