#!/usr/bin/env python3
"""Scrape one platform listing and write merged records as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dotenv import load_dotenv

load_dotenv()

import config
from scrape_content import (
    WEEKLY,
    describe_route,
    resolve_crawler,
    scrape_contents,
    scrape_weekly_contents,
    supported_platforms,
)
from services.html_fetcher import HtmlFetcher, RetryingHtmlFetcher, create_session
from utils.errors import NetworkError, RateLimitError, UnsupportedRoutingError

LOGGER = logging.getLogger("scrape_contents")

EXIT_OK = 0
EXIT_NETWORK_ERROR = 1
EXIT_ROUTING_ERROR = 2
EXIT_RATE_LIMITED = 3


def _setup_logging(level: str) -> None:
    numeric = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _make_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape webtoon listings and detail pages into merged JSON records.")
    parser.add_argument(
        "--platform",
        default="naver",
        help=f"Content platform. Supported: {','.join(supported_platforms())}",
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--update-day",
        help=f"Update day code: {','.join(config.UPDATE_DAY_CODES)}",
    )
    group.add_argument("--weekly", action="store_true", help="Scrape all seven weekday listings and union them.")
    parser.add_argument("--output", default=None, help="Write JSON to this file instead of stdout.")
    parser.add_argument(
        "--retry-attempts",
        type=int,
        default=config.CRAWLER_FETCH_RETRY_ATTEMPTS,
        help="Attempts per page fetch on transient network errors (1 disables retry).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the listing URL that would be fetched and exit.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    return parser


async def _async_main(args: argparse.Namespace):
    crawler = resolve_crawler(args.platform)
    if crawler is None:
        raise UnsupportedRoutingError(args.platform, WEEKLY if args.weekly else args.update_day)
    async with create_session() as session:
        fetcher = HtmlFetcher(session, headers=crawler.headers)
        if args.retry_attempts > 1:
            fetcher = RetryingHtmlFetcher(fetcher, attempts=args.retry_attempts)
        if args.weekly:
            return await scrape_weekly_contents(args.platform, fetcher=fetcher)
        return await scrape_contents(args.platform, args.update_day, fetcher=fetcher)


def _write_output(payload: dict, output: Optional[str]) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if not output:
        print(text)
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    LOGGER.info("Wrote %s records to %s", payload.get("count"), path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _make_arg_parser().parse_args(argv)
    _setup_logging(args.log_level)

    try:
        if args.dry_run:
            days = config.WEEKDAY_CODES if args.weekly else (args.update_day,)
            for day in days:
                print(f"{day}: {describe_route(args.platform, day) or 'not supported yet'}")
            return EXIT_OK
        result = asyncio.run(_async_main(args))
    except UnsupportedRoutingError as exc:
        LOGGER.error("%s", exc)
        return EXIT_ROUTING_ERROR
    except RateLimitError as exc:
        LOGGER.error("Rate limited: %s", exc)
        return EXIT_RATE_LIMITED
    except NetworkError as exc:
        LOGGER.error("Network failure: %s", exc)
        return EXIT_NETWORK_ERROR

    _write_output(result.to_dict(), args.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
