from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from typing import Sequence

from news_ingest.core.config import INGEST_INTERVAL_MINUTES, INGEST_RUN_ON_START, SOCIAL_MAX_ITEMS

logger = logging.getLogger("news_ingest")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="news-ingest", description="Multi-source news ingestion")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("run-once", help="run one ingestion cycle and print the result")

    serve = sub.add_parser("serve", help="run ingestion on a fixed interval")
    serve.add_argument("--interval", type=int, default=INGEST_INTERVAL_MINUTES, help="minutes between cycles")
    serve.add_argument("--no-initial-run", action="store_true", help="wait for the first interval before running")

    account = sub.add_parser("account", help="ingest the latest posts of one social account")
    account.add_argument("handle")
    account.add_argument("--max", dest="max_items", type=int, default=SOCIAL_MAX_ITEMS)

    scrape = sub.add_parser("scrape", help="scrape article blocks from one page")
    scrape.add_argument("url")
    return parser


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from news_ingest.processing.pipeline import build_default_pipeline

    pipeline = build_default_pipeline()

    if args.command == "run-once":
        result = pipeline.run_ingestion_cycle()
        _print_json(result.to_dict())
        return 1 if result.error else 0

    if args.command == "account":
        account_result = pipeline.ingest_from_account(args.handle, args.max_items)
        _print_json(account_result.to_dict())
        return 1 if account_result.error else 0

    if args.command == "scrape":
        result = pipeline.scrape_page(args.url)
        _print_json(result.to_dict())
        return 1 if result.error else 0

    from news_ingest.processing.scheduler import IngestionScheduler

    scheduler = IngestionScheduler(
        run_cycle=pipeline.run_ingestion_cycle,
        interval_minutes=args.interval,
        run_on_start=INGEST_RUN_ON_START and not args.no_initial_run,
    )

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, stopping", signum)
        scheduler.stop()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)
    scheduler.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
