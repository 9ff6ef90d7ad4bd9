import os
import unittest
from unittest import mock

from pydantic import ValidationError

from video_aggregator.config import Settings


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.fetch_timeout, 30.0)
        self.assertEqual(settings.history_max_entries, 20)
        self.assertEqual(settings.related_results_cap, 20)
        self.assertGreaterEqual(settings.fetch_concurrency, 4)
        self.assertEqual(settings.disabled_source_names, set())

    def test_prefixed_overrides(self):
        env = {
            "VA_FETCH_TIMEOUT": "12.5",
            "VA_HISTORY_MAX_ENTRIES": "5",
            "VA_DISABLED_SOURCES": " JPdmv, ppp ,",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.fetch_timeout, 12.5)
        self.assertEqual(settings.history_max_entries, 5)
        self.assertEqual(settings.disabled_source_names, {"jpdmv", "ppp"})

    def test_malformed_values_fail_loudly(self):
        for env in [
            {"VA_FETCH_TIMEOUT": "thirty"},
            {"VA_HISTORY_MAX_ENTRIES": "2O"},
            {"VA_TITLE_SIMILARITY": "1.5"},
            {"VA_PORT": "0"},
        ]:
            with mock.patch.dict(os.environ, env, clear=True):
                with self.assertRaises(ValidationError):
                    Settings(_env_file=None)


if __name__ == '__main__':
    unittest.main()
