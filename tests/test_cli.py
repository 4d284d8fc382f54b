"""CLI tests: hashing and scripted replay."""

import json
import os
import tempfile
import unittest
from argparse import Namespace
from contextlib import redirect_stdout
from io import StringIO
from unittest import mock

from healthreport import ErrorCode, ReportStore, symptom_hash
from healthreport.cli import cmd_replay, main, run_calls

SYMPTOM_HEX = "01" * 32
LOCATION_HEX = "02" * 32


def submit_call(caller="ST1TEST", **overrides):
    args = {
        "symptom_hash": SYMPTOM_HEX,
        "location_hash": LOCATION_HEX,
        "privacy_level": 2,
        "severity": 5,
        "category": "fever",
        "anonymity_level": 1,
        "age_group": "19-35",
        "gender": "male",
        "contact_info": None,
        "report_type": "symptom",
    }
    args.update(overrides)
    return {"op": "submit_report", "caller": caller, "args": args}


REVIEW_SCRIPT = [
    {"op": "set_authority_contract", "args": {"principal": "ST2TEST"}},
    submit_call(),
    {"op": "advance_block", "args": {"blocks": 2}},
    {"op": "set_report_status", "caller": "ST2TEST", "args": {"report_id": 0, "new_status": "validated"}},
    {"op": "update_report", "caller": "ST1TEST",
     "args": {"report_id": 0, "update_symptom_hash": "03" * 32, "update_location_hash": "04" * 32}},
    {"op": "get_report", "args": {"report_id": 0}},
    {"op": "get_report_count"},
]


class TestRunCalls(unittest.TestCase):

    def test_review_script(self):
        store = ReportStore()
        outputs = run_calls(store, REVIEW_SCRIPT)

        self.assertEqual(outputs[0]["result"], {"ok": True, "value": True})
        self.assertEqual(outputs[1]["result"], {"ok": True, "value": 0})
        self.assertEqual(outputs[2]["result"], 2)
        self.assertEqual(outputs[3]["result"], {"ok": True, "value": True})
        self.assertEqual(outputs[4]["result"]["error"], int(ErrorCode.UPDATE_NOT_ALLOWED))
        self.assertEqual(outputs[5]["result"]["status"], "validated")
        self.assertEqual(outputs[5]["result"]["symptom_hash"], SYMPTOM_HEX)
        self.assertEqual(outputs[6]["result"], {"ok": True, "value": 1})

    def test_unknown_operation(self):
        with self.assertRaises(ValueError):
            run_calls(ReportStore(), [{"op": "delete_report", "args": {}}])

    def test_missing_caller(self):
        call = submit_call()
        del call["caller"]
        with self.assertRaises(ValueError):
            run_calls(ReportStore(), [call])

    def test_wrong_argument_name(self):
        with self.assertRaises(ValueError) as ctx:
            run_calls(ReportStore(), [{"op": "get_report", "args": {"id": 0}}])
        self.assertIn("call 0", str(ctx.exception))

    def test_hash_argument_must_be_hex_string(self):
        for value in (5, None, "zz" * 32):
            with self.subTest(value=value), self.assertRaises(ValueError):
                run_calls(ReportStore(), [submit_call(symptom_hash=value)])

    def test_malformed_call_shape(self):
        for call in (["submit_report"], {"op": "get_report_count", "args": [1]}):
            with self.subTest(call=call), self.assertRaises(ValueError):
                run_calls(ReportStore(), [call])


class TestCommands(unittest.TestCase):

    def write_script(self, tmp, script):
        path = os.path.join(tmp, "script.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(script, f)
        return path

    def test_replay_rejects_script_without_calls(self):
        for script in ({"steps": REVIEW_SCRIPT}, {"calls": {"op": "get_report_count"}}, "calls"):
            with self.subTest(script=script), tempfile.TemporaryDirectory() as tmp:
                path = self.write_script(tmp, script)
                with self.assertRaises(ValueError):
                    cmd_replay(Namespace(script=path, output=None))

    def test_hash_text(self):
        out = StringIO()
        with mock.patch("healthreport.cli.configure_logging"), redirect_stdout(out):
            code = main(["hash", "--text", "Fever"])
        self.assertEqual(code, 0)
        self.assertEqual(out.getvalue().strip(), symptom_hash("fever").hex())

    def test_replay_exit_code(self):
        with tempfile.TemporaryDirectory() as tmp:
            script_path = os.path.join(tmp, "script.json")
            output_path = os.path.join(tmp, "out.json")
            with open(script_path, "w", encoding="utf-8") as f:
                json.dump({"calls": REVIEW_SCRIPT}, f)

            with mock.patch("healthreport.cli.load_store_settings", return_value=mock.Mock(
                    max_reports=10000, submission_fee=100, authority=None)), \
                    redirect_stdout(StringIO()):
                code = cmd_replay(Namespace(script=script_path, output=output_path))

            # The update of a validated report is rejected.
            self.assertEqual(code, 1)
            with open(output_path, encoding="utf-8") as f:
                self.assertEqual(len(json.load(f)), len(REVIEW_SCRIPT))


if __name__ == "__main__":
    unittest.main()
