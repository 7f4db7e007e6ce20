import os
import tempfile
import unittest
from unittest.mock import patch

from rec_invoice import config


class EnvHelperTests(unittest.TestCase):
    def test_env_int_falls_back_on_missing_invalid_or_small_values(self) -> None:
        with patch.dict(os.environ, {"INVOICE_TEST_INT": "abc"}):
            self.assertEqual(config.env_int("INVOICE_TEST_INT", 7), 7)
        with patch.dict(os.environ, {"INVOICE_TEST_INT": "0"}):
            self.assertEqual(config.env_int("INVOICE_TEST_INT", 7, minimum=1), 7)
        with patch.dict(os.environ, {"INVOICE_TEST_INT": "12"}):
            self.assertEqual(config.env_int("INVOICE_TEST_INT", 7), 12)
        self.assertEqual(config.env_int("INVOICE_TEST_UNSET", 3), 3)

    def test_env_str_treats_blank_as_unset(self) -> None:
        with patch.dict(os.environ, {"S3_BUCKET_NAME": "   "}):
            self.assertIsNone(config.s3_bucket())
        with patch.dict(os.environ, {"S3_BUCKET_NAME": " invoices "}):
            self.assertEqual(config.s3_bucket(), "invoices")

    def test_logo_path_requires_existing_file(self) -> None:
        with patch.dict(os.environ, {"INVOICE_LOGO_PATH": "/nonexistent/logo.png"}):
            self.assertIsNone(config.logo_path())
        with tempfile.NamedTemporaryFile(suffix=".png") as handle:
            with patch.dict(os.environ, {"INVOICE_LOGO_PATH": handle.name}):
                self.assertEqual(config.logo_path(), handle.name)


if __name__ == "__main__":
    unittest.main()
