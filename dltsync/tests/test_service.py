import asyncio
import contextlib
import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import dltsync.config as config_module
from dltsync.service import parse_args, run

DATASET = "id,date,f1,f2,f3,f4,f5,b1,b2\n24002,2024-01-03,1,8,15,22,30,5,11\n24001,2024-01-01,1,2,3,4,5,1,2\n"


class ServiceCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        tmp = Path(self._tmpdir.name)
        dataset = tmp / "history.csv"
        dataset.write_text(DATASET, encoding="utf-8")
        env = {"DATASET_PATH": str(dataset), "HISTORY_FILE": str(tmp / "store.csv")}
        self._env = mock.patch.dict(os.environ, env, clear=True)
        self._env.start()
        config_module.load_config.cache_clear()

    def tearDown(self) -> None:
        config_module.load_config.cache_clear()
        self._env.stop()
        self._tmpdir.cleanup()

    def _run(self, argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = asyncio.run(run(parse_args(argv)))
        return code, out.getvalue()

    def test_backtest_all_tiers_lists_zero_counts(self) -> None:
        code, output = self._run(["backtest", "--all-tiers", "1", "2", "3", "4", "5", "1", "2"])

        self.assertEqual(code, 0)
        rows = [line.split("\t") for line in output.splitlines() if "\t" in line]
        self.assertEqual(len(rows), 9)
        self.assertEqual(rows[0], ["1", "First Prize", "1"])
        self.assertEqual(rows[6], ["7", "Seventh Prize", "0"])

    def test_backtest_rejects_invalid_combination(self) -> None:
        code, _ = self._run(["backtest", "1", "2", "3", "4", "40", "1", "2"])

        self.assertEqual(code, 2)

    def test_recommend_prints_default_and_its_hits(self) -> None:
        with self.assertLogs("dltsync.analysis", level="ERROR"):
            code, output = self._run(["recommend"])

        self.assertEqual(code, 0)
        self.assertIn("recommendation: 1 8 15 22 30 + 5 10", output)
        self.assertIn("2\tSecond Prize\t1", output)


if __name__ == "__main__":
    unittest.main()
