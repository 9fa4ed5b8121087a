import asyncio
import unittest
from unittest import mock

import requests

from dltsync.config import ScraperSettings
from dltsync.datasource.live_scraper import LiveScraperSource, build_ladder, parse_report
from dltsync.errors import SyncExhaustedError
from dltsync.types import AttemptOutcome

RELAY_A = "https://relay-a.test/raw?url="
RELAY_B = "https://relay-b.test/?"


def _row(draw_id: int, date: str = "2024-01-01") -> str:
    cells = [str(draw_id), "01", "08", "15", "22", "30", "05", "10", "1,234,567", date, "2"]
    return '<tr class="t_tr1">' + "".join(f"<td>{c}</td>" for c in cells) + "</tr>"


def _report(count: int) -> str:
    rows = "".join(_row(24000 + i) for i in range(1, count + 1))
    return f"<html><body><table><tbody id='tdata'>{rows}</tbody></table></body></html>"


class ParseReportTests(unittest.TestCase):
    def test_extracts_id_numbers_and_trailing_date(self) -> None:
        html = "<table>" + _row(24051, date="2024-05-06") + "</table>"

        records = parse_report(html)

        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record.id, "24051")
        self.assertEqual(record.front, (1, 8, 15, 22, 30))
        self.assertEqual(record.back, (5, 10))
        self.assertEqual(record.date, "2024-05-06")

    def test_skips_unmarked_short_and_dateless_rows(self) -> None:
        html = (
            "<table>"
            "<tr><td>24001</td><td>1</td><td>2</td><td>3</td><td>4</td><td>5</td>"
            "<td>1</td><td>2</td><td>2024-01-01</td></tr>"
            '<tr class="t_tr1"><td>24002</td><td>1</td><td>2</td></tr>'
            '<tr class="t_tr1"><td>24003</td><td>1</td><td>2</td><td>3</td><td>4</td>'
            "<td>5</td><td>1</td><td>2</td><td>n/a</td></tr>"
            + _row(24004)
            + "</table>"
        )

        self.assertEqual([r.id for r in parse_report(html)], ["24004"])

    def test_discards_out_of_range_rows(self) -> None:
        html = (
            '<table><tr class="t_tr1"><td>24001</td><td>1</td><td>2</td><td>3</td>'
            "<td>4</td><td>36</td><td>1</td><td>2</td><td>2024-01-01</td></tr></table>"
        )

        self.assertEqual(parse_report(html), [])


class LadderTests(unittest.TestCase):
    def _settings(self) -> ScraperSettings:
        return ScraperSettings(relays=(RELAY_A, RELAY_B), limits=(2000, 1000, 500, 100))

    def test_ladder_is_relay_major(self) -> None:
        ladder = build_ladder(["a", "b"], [10, 5])

        self.assertEqual(
            [(s.relay, s.limit) for s in ladder], [("a", 10), ("a", 5), ("b", 10), ("b", 5)]
        )

    def test_relay_url_wraps_encoded_target(self) -> None:
        source = LiveScraperSource(self._settings())

        url = source.relay_url(source.ladder[0])

        self.assertTrue(url.startswith(RELAY_A))
        self.assertIn("limit%3D2000", url)
        self.assertNotIn("?limit=", url)

    def test_first_accepted_attempt_wins(self) -> None:
        source = LiveScraperSource(self._settings())
        side_effect = [requests.Timeout("slow relay"), _report(3), _report(120)]

        with mock.patch.object(LiveScraperSource, "_download", side_effect=side_effect) as download:
            records = asyncio.run(source.fetch_records())

        self.assertEqual(len(records), 120)
        self.assertEqual(download.call_count, 3)
        urls = [call.args[0] for call in download.call_args_list]
        self.assertTrue(all(url.startswith(RELAY_A) for url in urls))
        self.assertIn("limit%3D500", urls[-1])
        self.assertEqual(
            [a.outcome for a in source.last_attempts],
            [AttemptOutcome.TIMEOUT, AttemptOutcome.TOO_FEW_RECORDS, AttemptOutcome.ACCEPTED],
        )
        self.assertEqual(source.last_attempts[-1].size_limit, 500)

    def test_exhaustion_reports_last_error(self) -> None:
        source = LiveScraperSource(self._settings())
        errors = [requests.ConnectionError(f"down {i}") for i in range(8)]

        with mock.patch.object(LiveScraperSource, "_download", side_effect=errors):
            with self.assertRaises(SyncExhaustedError) as ctx:
                asyncio.run(source.fetch_records())

        self.assertIs(ctx.exception.last_error, errors[-1])
        self.assertEqual(str(ctx.exception), "down 7")
        self.assertEqual(len(ctx.exception.attempts), 8)
        self.assertEqual(ctx.exception.attempts[-1].endpoint, RELAY_B)
        self.assertEqual(ctx.exception.attempts[-1].size_limit, 100)

    def test_exactly_min_records_is_rejected(self) -> None:
        settings = ScraperSettings(relays=(RELAY_A,), limits=(100,), min_records=5)
        source = LiveScraperSource(settings)

        with mock.patch.object(LiveScraperSource, "_download", return_value=_report(5)):
            with self.assertRaises(SyncExhaustedError) as ctx:
                asyncio.run(source.fetch_records())

        self.assertEqual(ctx.exception.attempts[0].outcome, AttemptOutcome.TOO_FEW_RECORDS)
        self.assertEqual(ctx.exception.attempts[0].record_count, 5)



class DownloadTests(unittest.TestCase):
    def test_each_request_carries_the_attempt_timeout(self) -> None:
        settings = ScraperSettings(relays=(RELAY_A,), limits=(100,), timeout_seconds=7)
        source = LiveScraperSource(settings)
        response = mock.Mock(text=_report(10))

        with mock.patch("dltsync.datasource.live_scraper.requests.get", return_value=response) as get:
            records = asyncio.run(source.fetch_records())

        self.assertEqual(len(records), 10)
        get.assert_called_once()
        self.assertEqual(get.call_args.kwargs["timeout"], 7)
        self.assertEqual(get.call_args.kwargs["headers"]["User-Agent"], settings.user_agent)
        response.raise_for_status.assert_called_once_with()

    def test_request_timeout_advances_the_ladder(self) -> None:
        settings = ScraperSettings(relays=(RELAY_A, RELAY_B), limits=(100,))
        source = LiveScraperSource(settings)
        side_effect = [requests.Timeout("read timed out"), mock.Mock(text=_report(8))]

        with mock.patch("dltsync.datasource.live_scraper.requests.get", side_effect=side_effect) as get:
            records = asyncio.run(source.fetch_records())

        self.assertEqual(len(records), 8)
        self.assertEqual(get.call_count, 2)
        self.assertTrue(get.call_args.args[0].startswith(RELAY_B))
        self.assertEqual(
            [a.outcome for a in source.last_attempts],
            [AttemptOutcome.TIMEOUT, AttemptOutcome.ACCEPTED],
        )


if __name__ == "__main__":
    unittest.main()
