"""Hashing, ledger and guard-check tests."""

import hashlib
import unittest

from healthreport import (
    HASH_LENGTH,
    ErrorCode,
    InMemoryFeeLedger,
    canonicalize_str,
    location_hash,
    symptom_hash,
)
from healthreport.checks import first_failure, in_range, is_valid_contact_info, is_valid_hash
from healthreport.hashing import canonicalize, from_hex, sha256_digest, to_hex
from healthreport.rate_limit import RateLimiter


class TestCanonicalization(unittest.TestCase):

    def test_key_ordering(self):
        a = {"severity": 5, "symptoms": ["fever", "cough"], "onset": {"day": 2, "hour": 8}}
        b = {"onset": {"hour": 8, "day": 2}, "symptoms": ["fever", "cough"], "severity": 5}
        self.assertEqual(canonicalize_str(a), canonicalize_str(b))
        self.assertEqual(canonicalize_str(a),
                         '{"onset":{"day":2,"hour":8},"severity":5,"symptoms":["fever","cough"]}')

    def test_arrays_keep_order(self):
        self.assertNotEqual(canonicalize_str(["a", "b"]), canonicalize_str(["b", "a"]))

    def test_unsupported_type(self):
        with self.assertRaises(ValueError):
            canonicalize({"when": object()})


class TestReportHashes(unittest.TestCase):

    def test_digest_length(self):
        self.assertEqual(len(sha256_digest("x")), HASH_LENGTH)
        self.assertEqual(len(symptom_hash("fever")), HASH_LENGTH)
        self.assertEqual(len(location_hash(1.0, 2.0)), HASH_LENGTH)

    def test_text_symptoms_normalized(self):
        self.assertEqual(symptom_hash("  Fever "), symptom_hash("fever"))
        self.assertEqual(symptom_hash("fever"), hashlib.sha256(b"fever").digest())

    def test_structured_symptoms(self):
        self.assertEqual(symptom_hash({"b": 1, "a": 2}), symptom_hash({"a": 2, "b": 1}))

    def test_location_rounding(self):
        self.assertEqual(location_hash(52.5201, 13.4049), location_hash(52.5199, 13.4001))
        self.assertNotEqual(location_hash(52.52, 13.40), location_hash(52.53, 13.40))
        self.assertNotEqual(location_hash(52.5201, 13.4049, precision=4),
                            location_hash(52.5199, 13.4001, precision=4))

    def test_hex_roundtrip_and_prefix(self):
        digest = symptom_hash("cough")
        self.assertEqual(from_hex(to_hex(digest)), digest)
        self.assertEqual(from_hex("0x" + to_hex(digest)), digest)
        with self.assertRaises(ValueError):
            from_hex("zz")


class TestChecks(unittest.TestCase):

    def test_first_failure_stops_at_first(self):
        evaluated = []

        def check(name, result):
            def holds():
                evaluated.append(name)
                return result
            return holds

        code = first_failure([
            (ErrorCode.INVALID_SEVERITY, check("a", True)),
            (ErrorCode.INVALID_CATEGORY, check("b", False)),
            (ErrorCode.INVALID_GENDER, check("c", False)),
        ])
        self.assertEqual(code, ErrorCode.INVALID_CATEGORY)
        self.assertEqual(evaluated, ["a", "b"])

    def test_all_pass(self):
        self.assertIsNone(first_failure([(ErrorCode.INVALID_STATUS, lambda: True)]))

    def test_predicates(self):
        self.assertTrue(is_valid_hash(bytes(32)))
        self.assertFalse(is_valid_hash(None))
        self.assertFalse(in_range(True, 0, 5))
        self.assertFalse(in_range("3", 0, 5))
        self.assertTrue(in_range(3, 0, 5))
        self.assertTrue(is_valid_contact_info(None))
        self.assertFalse(is_valid_contact_info("x" * 101))


class TestFeeLedger(unittest.TestCase):

    def test_records_in_order(self):
        ledger = InMemoryFeeLedger()
        ledger.transfer(100, "alice", "authority")
        ledger.transfer(50, "bob", "authority")
        self.assertEqual([t.sender for t in ledger.transfers()], ["alice", "bob"])
        self.assertEqual(ledger.total_received("authority"), 150)
        self.assertEqual(ledger.total_paid("alice"), 100)

    def test_transfers_returns_copy(self):
        ledger = InMemoryFeeLedger()
        ledger.transfer(1, "a", "b")
        ledger.transfers().clear()
        self.assertEqual(len(ledger.transfers()), 1)
        ledger.clear()
        self.assertEqual(ledger.transfers(), [])


class TestRateLimiter(unittest.TestCase):

    def test_sliding_window(self):
        now = [1000.0]
        limiter = RateLimiter(2, window_seconds=60, clock=lambda: now[0])
        self.assertTrue(limiter.allow("alice"))
        self.assertTrue(limiter.allow("alice"))
        result = limiter.check("alice")
        self.assertFalse(result.allowed)
        self.assertEqual(result.retry_after, 60.0)
        self.assertTrue(limiter.allow("bob"))

        now[0] += 61
        self.assertTrue(limiter.allow("alice"))

    def test_reset(self):
        limiter = RateLimiter(1)
        self.assertTrue(limiter.allow("k"))
        self.assertFalse(limiter.allow("k"))
        limiter.reset("k")
        self.assertTrue(limiter.allow("k"))


if __name__ == "__main__":
    unittest.main()
