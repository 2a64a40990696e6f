"""Tests for logging setup."""

import logging
import logging.handlers
import os
import shutil
import tempfile
import unittest

from AssetMill.core import setup_logging


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.mill_logger = logging.getLogger("asset_mill")
        self.saved_handlers = list(self.mill_logger.handlers)
        self.saved_level = self.mill_logger.level

    def tearDown(self):
        for handler in self.mill_logger.handlers:
            if handler not in self.saved_handlers:
                handler.close()
        self.mill_logger.handlers = self.saved_handlers
        self.mill_logger.setLevel(self.saved_level)
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_embedded_mode_adds_file_handler_once(self):
        root = logging.getLogger()
        sentinel = logging.NullHandler()
        root.addHandler(sentinel)
        try:
            log_file = os.path.join(self.tmpdir, "logs", "build.log")
            setup_logging("DEBUG", log_file)
            setup_logging("DEBUG", log_file)
            file_handlers = [
                h for h in self.mill_logger.handlers
                if isinstance(h, logging.FileHandler)
            ]
            self.assertEqual(len(file_handlers), 1)
            self.assertEqual(self.mill_logger.level, logging.DEBUG)
            self.assertTrue(os.path.isdir(os.path.join(self.tmpdir, "logs")))
        finally:
            root.removeHandler(sentinel)

    def test_invalid_level_falls_back_to_info(self):
        root = logging.getLogger()
        sentinel = logging.NullHandler()
        root.addHandler(sentinel)
        try:
            with self.assertLogs("asset_mill", level="WARNING") as cm:
                setup_logging("CHATTY")
                self.assertEqual(self.mill_logger.level, logging.INFO)
            self.assertTrue(any("CHATTY" in msg for msg in cm.output))
        finally:
            root.removeHandler(sentinel)

    def test_forced_setup_replaces_root_handlers(self):
        root = logging.getLogger()
        saved_root = list(root.handlers)
        saved_root_level = root.level
        try:
            log_file = os.path.join(self.tmpdir, "root.log")
            setup_logging("WARNING", log_file, force=True)
            kinds = {type(h) for h in root.handlers}
            self.assertIn(logging.StreamHandler, kinds)
            self.assertIn(logging.handlers.RotatingFileHandler, kinds)
            self.assertEqual(root.level, logging.WARNING)
        finally:
            for handler in root.handlers:
                if handler not in saved_root:
                    handler.close()
            root.handlers = saved_root
            root.setLevel(saved_root_level)


if __name__ == "__main__":
    unittest.main(verbosity=2)
