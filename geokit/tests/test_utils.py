"""
Test suite for geokit/utils.py and geokit/logging_utils.py
"""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from geokit.logging_utils import configureLogger, getLogLevelByStr, initLogging
from geokit.utils import formatDecimal, formatFixed, load_dotenv, parseDecimal


class TestNumberFormatting(unittest.TestCase):

    def test_format_decimal_strips_trailing_zeros(self):
        self.assertEqual(formatDecimal(51.2371), "51.2371")
        self.assertEqual(formatDecimal(-0.589669), "-0.589669")
        self.assertEqual(formatDecimal(5.0), "5")
        self.assertEqual(formatDecimal(0.1234567), "0.123457")

    def test_format_decimal_negative_zero(self):
        self.assertEqual(formatDecimal(-0.0), "0")
        self.assertEqual(formatDecimal(-0.0000001), "0")

    def test_format_fixed(self):
        self.assertEqual(formatFixed(51.2371), "51.237100")
        self.assertEqual(formatFixed(-22.97673), "-22.976730")

    def test_parse_decimal(self):
        self.assertEqual(parseDecimal("51.2371"), 51.2371)
        self.assertEqual(parseDecimal(-43), -43.0)
        self.assertEqual(parseDecimal(" 1.5 "), 1.5)

    def test_parse_decimal_rejects_junk(self):
        for value in (None, "", "abc", True, "nan", "inf", [], {}):
            self.assertIsNone(parseDecimal(value), value)


class TestDotEnv(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / ".env"

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_missing_file(self):
        self.assertEqual(load_dotenv(str(self.path)), {})

    def test_parse_lines(self):
        self.path.write_text('# comment\n\nGEOKIT_A=1\nGEOKIT_B = "two words"\nbroken line\n')
        with patch.dict(os.environ, {}, clear=True):
            ret = load_dotenv(str(self.path))
            self.assertEqual(ret, {"GEOKIT_A": "1", "GEOKIT_B": "two words"})
            self.assertEqual(os.environ["GEOKIT_B"], "two words")

    def test_existing_environment_is_kept(self):
        self.path.write_text("GEOKIT_A=from-file\n")
        with patch.dict(os.environ, {"GEOKIT_A": "from-env"}, clear=True):
            load_dotenv(str(self.path))
            self.assertEqual(os.environ["GEOKIT_A"], "from-env")

    def test_no_populate(self):
        self.path.write_text("GEOKIT_A=1\n")
        with patch.dict(os.environ, {}, clear=True):
            load_dotenv(str(self.path), populateEnv=False)
            self.assertNotIn("GEOKIT_A", os.environ)


class TestLogging(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.logger = logging.getLogger("geokit.tests.logging")

    def tearDown(self):
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)
        self.tmpdir.cleanup()

    def test_log_level_by_str(self):
        self.assertEqual(getLogLevelByStr("debug"), logging.DEBUG)
        self.assertEqual(getLogLevelByStr("WARNING"), logging.WARNING)
        self.assertIsNone(getLogLevelByStr("loud"))
        self.assertEqual(getLogLevelByStr("loud", logging.INFO), logging.INFO)

    def test_configure_console_and_file(self):
        logFile = Path(self.tmpdir.name) / "logs" / "geokit.log"
        configureLogger(
            self.logger,
            {"level": "debug", "console": True, "file": str(logFile), "file-level": "warning", "propagate": False},
        )

        self.assertEqual(self.logger.level, logging.DEBUG)
        self.assertFalse(self.logger.propagate)
        self.assertEqual(len(self.logger.handlers), 2)
        fileHandler = [h for h in self.logger.handlers if isinstance(h, logging.FileHandler)][0]
        self.assertEqual(fileHandler.level, logging.WARNING)

        self.logger.warning("written, dood!")
        self.logger.info("filtered")
        fileHandler.flush()
        content = logFile.read_text()
        self.assertIn("written, dood!", content)
        self.assertNotIn("filtered", content)

    def test_reconfigure_replaces_handlers(self):
        configureLogger(self.logger, {"console": True})
        configureLogger(self.logger, {"console": True})
        self.assertEqual(len(self.logger.handlers), 1)

    def test_init_logging_quiets_httpx(self):
        rootLogger = logging.getLogger()
        savedLevel = rootLogger.level
        savedHandlers = rootLogger.handlers[:]
        try:
            initLogging({"level": "debug", "logger": {"geokit.tests.logging": {"level": "error"}}})
            self.assertEqual(logging.getLogger("httpx").level, logging.WARNING)
            self.assertEqual(self.logger.level, logging.ERROR)
        finally:
            rootLogger.setLevel(savedLevel)
            for handler in savedHandlers:
                if handler not in rootLogger.handlers:
                    rootLogger.addHandler(handler)


if __name__ == "__main__":
    unittest.main()
