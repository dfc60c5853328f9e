import os
import unittest
from unittest import mock

from pydantic import ValidationError

from request_error.core.config import Settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            s = Settings(_env_file=None)
        self.assertEqual(s.LOG_LEVEL, "INFO")
        self.assertTrue(s.EXPOSE_DETAILS)
        self.assertTrue(s.LOG_CLIENT_ERRORS)
        self.assertEqual(s.CORS_ORIGINS, ["*"])

    def test_cors_origins_comma_separated(self):
        s = Settings(_env_file=None, CORS_ORIGINS="http://a, http://b")
        self.assertEqual(s.CORS_ORIGINS, ["http://a", "http://b"])

    def test_log_level_normalized(self):
        self.assertEqual(Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")

    def test_unknown_log_level_rejected(self):
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="loud")
