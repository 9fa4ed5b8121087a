import os
import unittest
from unittest import mock

from dltsync.config import DEFAULT_LIMITS, DEFAULT_RELAYS, load_from_environment


class ConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_from_environment()

        self.assertEqual(settings.scraper.relays, DEFAULT_RELAYS)
        self.assertEqual(settings.scraper.limits, DEFAULT_LIMITS)
        self.assertEqual(settings.scraper.timeout_seconds, 20)
        self.assertEqual(settings.scraper.min_records, 5)
        self.assertEqual(settings.trend.window, 30)
        self.assertEqual(settings.trend.default_sum, 90)
        self.assertTrue(settings.dataset_path.endswith("history.csv"))

    def test_environment_overrides(self) -> None:
        env = {
            "SCRAPER__RELAYS": "https://a.test/?u=, https://b.test/?u=",
            "SCRAPER__LIMITS": "300,50",
            "SCRAPER__MIN_RECORDS": "10",
            "TREND__WINDOW": "50",
            "HISTORY_FILE": "/tmp/dlt.csv",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_from_environment()

        self.assertEqual(settings.scraper.relays, ("https://a.test/?u=", "https://b.test/?u="))
        self.assertEqual(settings.scraper.limits, (300, 50))
        self.assertEqual(settings.scraper.min_records, 10)
        self.assertEqual(settings.trend.window, 50)
        self.assertEqual(settings.history_file, "/tmp/dlt.csv")


if __name__ == "__main__":
    unittest.main()
