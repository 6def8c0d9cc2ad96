"""
Configuration and logging tests.
"""

import json
import logging
import os
import subprocess
import sys
import tempfile
import unittest
from unittest import mock

from pydantic import ValidationError

from proofspec import ErrorKind, validate_proof_spec
from proofspec.config import (
    ENV_LOG_LEVEL,
    ENV_SCOPE_NYM_ALIAS,
    ENV_STRICT_RANGES,
    ValidatorSettings,
    load_settings,
    reload_settings,
    settings_from_env,
)
from proofspec.logging_config import (
    StructuredFormatter,
    ValidationAuditLogger,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)

INVERTED = {
    "attributeCount": 1,
    "clauses": [{"type": "interval", "clauseData": {"attrs": [0], "pk": "k", "min": 9, "max": 1}}]
}


class TestSettings(unittest.TestCase):

    def tearDown(self):
        load_settings.cache_clear()

    def test_defaults(self):
        settings = settings_from_env({})
        self.assertTrue(settings.strict_ranges)
        self.assertEqual(settings.scope_nym_alias, "reject")
        self.assertFalse(settings.reject_unknown_fields)
        self.assertEqual(settings.log_level, "INFO")

    def test_from_env(self):
        settings = settings_from_env({
            ENV_STRICT_RANGES: "false",
            ENV_SCOPE_NYM_ALIAS: "Accept",
            ENV_LOG_LEVEL: "debug",
        })
        self.assertFalse(settings.strict_ranges)
        self.assertEqual(settings.scope_nym_alias, "accept")
        self.assertEqual(settings.log_level, "DEBUG")

    def test_empty_values_ignored(self):
        self.assertTrue(settings_from_env({ENV_STRICT_RANGES: ""}).strict_ranges)

    def test_invalid_values(self):
        with self.assertRaises(ValidationError):
            settings_from_env({ENV_SCOPE_NYM_ALIAS: "normalize"})
        with self.assertRaises(ValidationError):
            settings_from_env({ENV_LOG_LEVEL: "LOUD"})

    def test_settings_frozen(self):
        with self.assertRaises(ValidationError):
            ValidatorSettings().strict_ranges = False

    def test_load_settings_cached_until_reload(self):
        with mock.patch.dict(os.environ, {ENV_STRICT_RANGES: "true"}):
            first = reload_settings()
        with mock.patch.dict(os.environ, {ENV_STRICT_RANGES: "false"}):
            self.assertIs(load_settings(), first)
            self.assertFalse(reload_settings().strict_ranges)

    def test_environment_controls_default_validation(self):
        with mock.patch.dict(os.environ, {ENV_STRICT_RANGES: "false"}):
            reload_settings()
            self.assertTrue(validate_proof_spec(INVERTED).valid())
        with mock.patch.dict(os.environ, {ENV_STRICT_RANGES: "true"}):
            reload_settings()
            result = validate_proof_spec(INVERTED)
            self.assertEqual([i.kind for i in result.issues], [ErrorKind.INVERTED_RANGE])


class TestLogging(unittest.TestCase):

    def test_structured_formatter(self):
        record = logging.LogRecord("proofspec.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        record.extra_fields = {"event_type": "X"}
        data = json.loads(StructuredFormatter().format(record))
        self.assertEqual(data["message"], "hello world")
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["event_type"], "X")

    def test_correlation_id(self):
        cid = set_correlation_id("req-1")
        self.assertEqual(cid, "req-1")
        self.assertEqual(get_correlation_id(), "req-1")
        self.assertTrue(set_correlation_id())

    def test_audit_events(self):
        audit = ValidationAuditLogger("proofspec.audit.test")
        with self.assertLogs("proofspec.audit.test", level="INFO") as logs:
            audit.spec_validated("sha256:00", 2, 4)
            audit.spec_rejected(["MissingField", "MissingField"], ["clauses[0]", "clauses[1]"])

        self.assertEqual(logs.records[0].extra_fields["event_type"], "SPEC_VALIDATED")
        rejected = logs.records[1]
        self.assertEqual(rejected.levelno, logging.WARNING)
        self.assertEqual(rejected.extra_fields["issue_kinds"], ["MissingField"])
        self.assertEqual(rejected.extra_fields["issue_count"], 2)

    def test_parser_emits_audit_events(self):
        with self.assertLogs("proofspec.audit", level="INFO") as logs:
            validate_proof_spec({"attributeCount": 1, "clauses": []}, ValidatorSettings())
        self.assertIn("SPEC_REJECTED", logs.output[0])

    def test_library_logger_has_null_handler(self):
        handlers = logging.getLogger("proofspec").handlers
        self.assertTrue(any(isinstance(h, logging.NullHandler) for h in handlers))

    def test_rejection_silent_without_host_logging(self):
        # Fresh interpreter: no root handlers, so only lastResort could print
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        code = (
            "from proofspec import validate_proof_spec\n"
            "result = validate_proof_spec({'attributeCount': 1, 'clauses': []})\n"
            "assert not result.valid()\n"
        )
        proc = subprocess.run(
            [sys.executable, "-c", code],
            cwd=root,
            capture_output=True,
            text=True
        )
        self.assertEqual(proc.returncode, 0, proc.stderr)
        self.assertEqual(proc.stderr, "")


class TestConfigureLogging(unittest.TestCase):

    def setUp(self):
        self.root = logging.getLogger()
        self.saved_handlers = self.root.handlers[:]
        self.saved_level = self.root.level

    def tearDown(self):
        for handler in self.root.handlers[:]:
            if handler not in self.saved_handlers:
                handler.close()
            self.root.removeHandler(handler)
        for handler in self.saved_handlers:
            self.root.addHandler(handler)
        self.root.setLevel(self.saved_level)

    def test_structured_handler_from_settings(self):
        configure_logging(settings=ValidatorSettings(log_level="DEBUG", log_json=True))
        self.assertEqual(self.root.level, logging.DEBUG)
        self.assertEqual(len(self.root.handlers), 1)
        handler = self.root.handlers[0]
        self.assertIsInstance(handler, logging.StreamHandler)
        self.assertIs(handler.stream, sys.stdout)
        self.assertIsInstance(handler.formatter, StructuredFormatter)

    def test_plain_format(self):
        configure_logging(level="WARNING", json_format=False)
        self.assertEqual(self.root.level, logging.WARNING)
        self.assertEqual(len(self.root.handlers), 1)
        formatter = self.root.handlers[0].formatter
        self.assertIsInstance(formatter, logging.Formatter)
        self.assertNotIsInstance(formatter, StructuredFormatter)

    def test_replaces_existing_handlers(self):
        stale = logging.NullHandler()
        self.root.addHandler(stale)
        configure_logging(level="INFO")
        self.assertNotIn(stale, self.root.handlers)

    def test_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "proofspec.log")
            configure_logging(level="INFO", json_format=True, log_file=path)
            file_handlers = [h for h in self.root.handlers if isinstance(h, logging.FileHandler)]
            self.assertEqual(len(file_handlers), 1)
            self.assertIsInstance(file_handlers[0].formatter, StructuredFormatter)

            logging.getLogger("proofspec.test").info("written")
            file_handlers[0].flush()
            with open(path) as f:
                self.assertEqual(json.loads(f.readline())["message"], "written")

            file_handlers[0].close()
            self.root.removeHandler(file_handlers[0])


if __name__ == "__main__":
    unittest.main()
