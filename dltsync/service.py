from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .analysis import recommend
from .config import EngineSettings, load_config
from .datasource import LiveScraperSource, StaticFileSource
from .errors import SyncExhaustedError
from .prizes import backtest, prize_table, validate_combination
from .reconciler import FileHistoryStore, Reconciler
from .synchronizer import HistorySynchronizer
from .trend import predict_sum, sum_window


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def build_reconciler(settings: EngineSettings) -> Reconciler:
    return Reconciler(FileHistoryStore(settings.history_file))


async def load_history(settings: EngineSettings, reconciler: Reconciler) -> None:
    await reconciler.bootstrap(StaticFileSource(settings.dataset_path))


async def run(args: argparse.Namespace) -> int:
    configure_logging(args.verbose)
    settings = load_config(args.env_file)
    logger = logging.getLogger("dltsync")

    reconciler = build_reconciler(settings)
    await load_history(settings, reconciler)

    if args.command == "backtest":
        front, back = args.numbers[:5], args.numbers[5:]
        try:
            validate_combination(front, back)
        except ValueError as exc:
            print(f"Invalid combination: {exc}", file=sys.stderr)
            return 2
        results = backtest(front, back, reconciler.history)
        if args.all_tiers:
            results = prize_table(results)
        elif not results:
            print("No historical prize hits for this combination.")
        for result in results:
            print(f"{result.tier}\t{result.name}\t{result.count}")
        return 0

    if args.command == "trend":
        trend = settings.trend
        predicted = predict_sum(reconciler.history, window=trend.window, default=trend.default_sum)
        low, high = sum_window(predicted, trend.spread)
        print(f"predicted front sum: {predicted} (range {low}-{high})")
        return 0

    if args.command == "recommend":
        trend = settings.trend
        result = await recommend(
            reconciler.history, None, window=trend.window, default_sum=trend.default_sum, spread=trend.spread
        )
        numbers = " ".join(str(n) for n in result.summary.front) + " + " + " ".join(
            str(n) for n in result.summary.back
        )
        print(f"recommendation: {numbers}")
        print(result.summary.explanation)
        for tier in result.backtest:
            print(f"{tier.tier}\t{tier.name}\t{tier.count}")
        return 0

    source = LiveScraperSource(settings.scraper)
    synchronizer = HistorySynchronizer(
        reconciler, source, poll_interval_seconds=settings.poll_interval_seconds
    )

    if args.command == "watch":
        await synchronizer.run_forever()
        return 0

    try:
        result = await synchronizer.sync_once()
    except SyncExhaustedError as exc:
        logger.error("Live sync failed after %s attempts: %s", len(exc.attempts), exc)
        return 1
    finally:
        await source.close()
    if result:
        logger.info("Synced %s records; history holds %s", result.fetched, result.total)
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Draw history sync and backtest tool")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with settings")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("sync", help="Fetch the live history once and merge it.")
    sub.add_parser("watch", help="Keep syncing on the configured poll interval.")
    sub.add_parser("trend", help="Print the predicted front-number sum.")
    bt = sub.add_parser("backtest", help="Count historical prize tiers for a 5+2 combination.")
    bt.add_argument("numbers", type=int, nargs=7, metavar="N", help="5 front numbers then 2 back numbers")
    bt.add_argument("--all-tiers", action="store_true", help="List every tier, including zero counts.")
    sub.add_parser("recommend", help="Print the fallback recommendation and its tier hits.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        print("Sync stopped by user.")


if __name__ == "__main__":
    main()
