"""Tests for the diagnostic channel and logging context."""

import logging
import os
import tempfile
import unittest
from pathlib import Path

from core.diagnostics import ERROR, NOTICE, WARNING, DiagnosticChannel
from core.structured_logging import (
    _PassContextFilter,
    configure_structured_logging,
    get_pass_id,
    get_phase,
    pass_scope,
    phase_scope,
    start_pass,
)


class TestDiagnosticChannel(unittest.TestCase):
    def test_records_and_counts(self) -> None:
        channel = DiagnosticChannel()
        channel.notice("Generating a/B.stapler")
        channel.warning("p.T#m is not a constructor", location="T.java")
        channel.error("Failed to write x")

        self.assertEqual(channel.count(NOTICE), 1)
        self.assertEqual(channel.count(WARNING), 1)
        self.assertEqual(channel.count(ERROR), 1)
        self.assertTrue(channel.has_errors)
        self.assertEqual(channel.records[1].location, "T.java")

    def test_no_errors(self) -> None:
        channel = DiagnosticChannel()
        channel.warning("only a warning")
        self.assertFalse(channel.has_errors)

    def test_phase_recorded(self) -> None:
        channel = DiagnosticChannel()
        with phase_scope("constructors"):
            channel.warning("inside")
        channel.warning("outside")
        self.assertEqual([r.phase for r in channel.records], ["constructors", "-"])

    def test_mirrored_to_logging(self) -> None:
        channel = DiagnosticChannel()
        with self.assertLogs("stapler.diagnostics", level="INFO") as captured:
            channel.notice("Generating x")
            channel.error("broken", location="Y.java")
        self.assertEqual(
            captured.output,
            [
                "INFO:stapler.diagnostics:Generating x",
                "ERROR:stapler.diagnostics:broken (Y.java)",
            ],
        )

    def test_to_list(self) -> None:
        channel = DiagnosticChannel()
        channel.error("broken")
        self.assertEqual(
            channel.to_list(),
            [{"severity": "error", "message": "broken", "location": None, "phase": "-"}],
        )


class TestPassContext(unittest.TestCase):
    def test_start_pass_generates_id(self) -> None:
        pass_id = start_pass()
        self.assertEqual(len(pass_id), 12)
        self.assertEqual(get_pass_id(), pass_id)

    def test_explicit_pass_id(self) -> None:
        self.assertEqual(start_pass("fixed"), "fixed")
        self.assertEqual(get_pass_id(), "fixed")

    def test_pass_scope_restores(self) -> None:
        start_pass("outer")
        with pass_scope("inner") as pass_id:
            self.assertEqual(pass_id, "inner")
            self.assertEqual(get_pass_id(), "inner")
        self.assertEqual(get_pass_id(), "outer")

    def test_pass_scope_generates_id(self) -> None:
        with pass_scope() as pass_id:
            self.assertEqual(len(pass_id), 12)
            self.assertEqual(get_pass_id(), pass_id)

    def test_phase_scope_restores(self) -> None:
        with phase_scope("scan"):
            self.assertEqual(get_phase(), "scan")
            with phase_scope("registry-merge"):
                self.assertEqual(get_phase(), "registry-merge")
            self.assertEqual(get_phase(), "scan")
        self.assertEqual(get_phase(), "-")

    def test_log_file_receives_records(self) -> None:
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = os.path.join(tmpdir, "logs", "stapler.log")
            configure_structured_logging(logging.INFO, log_file=log_file)
            added = [h for h in root.handlers if h not in before]
            try:
                start_pass("filepass")
                with phase_scope("scan"):
                    logging.getLogger("stapler.test").info("hello")
                for handler in added:
                    handler.flush()
                text = Path(log_file).read_text(encoding="utf-8")
            finally:
                for handler in added:
                    root.removeHandler(handler)
                    handler.close()
                root.setLevel(level)
        self.assertEqual(
            len([h for h in added if isinstance(h, logging.FileHandler)]), 1
        )
        self.assertIn("pass=filepass | phase=scan | stapler.test | hello", text)

    def test_filter_injects_fields(self) -> None:
        start_pass("abc")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        with phase_scope("scan"):
            self.assertTrue(_PassContextFilter().filter(record))
        self.assertEqual(record.pass_id, "abc")
        self.assertEqual(record.phase, "scan")


if __name__ == "__main__":
    unittest.main()
