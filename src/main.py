"""
main.py
-------
Entry point for the scheduled Telegram digests.

Run:
$ python src/main.py run news
$ python src/main.py auto            # weekday routing (day-a / day-b / day-c)
$ python src/main.py auto --news     # the morning news slot
$ python src/main.py run day-b --dry-run
"""

from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
from functools import partial
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from agents.digest_runner import DAY_TYPES, DigestServices, digest_for, run_digest
from data_processing.nansen_client import NansenClient
from data_processing.news_fetcher import fetch_latest_news
from execution.telegram_bot import TelegramPoster
from llm.claude_api import ClaudeClient
from utils.settings import Settings

logger = logging.getLogger("digest")


def _print_post(text: str) -> List[int]:
    print(text)
    return []


def build_services(
    settings: Settings, day_type: str, dry_run: bool = False
) -> DigestServices:
    """Wire real clients from ``settings``; the analytics client only when needed."""
    llm = ClaudeClient(
        settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.llm_max_tokens,
    )
    if dry_run:
        post = _print_post
    else:
        post = TelegramPoster(
            settings.telegram_bot_token,
            settings.telegram_chat_id,
            parse_mode=settings.telegram_parse_mode or None,
        )
    nansen = None
    if day_type != "news":
        nansen = NansenClient(
            settings.nansen_api_key, max_retries=settings.nansen_max_retries
        )
    return DigestServices(
        generate=llm.generate_content,
        post=post,
        fetch_news=partial(
            fetch_latest_news,
            hours_back=settings.news_lookback_hours,
            limit=settings.news_fetch_limit,
        ),
        nansen=nansen,
        top_headlines=settings.news_top_headlines,
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and post onchain / news digests")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="produce one specific digest")
    run.add_argument("day_type", choices=DAY_TYPES)

    auto = sub.add_parser("auto", help="pick the digest for the current UTC day")
    auto.add_argument("--news", action="store_true", help="morning news slot")

    for p in (run, auto):
        p.add_argument("--dry-run", action="store_true", help="print instead of posting")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = _parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if args.command == "auto":
        day_type = digest_for(dt.datetime.now(dt.UTC), news_slot=args.news)
    else:
        day_type = args.day_type
    logger.info("Running %s digest", day_type)

    try:
        services = build_services(settings, day_type, dry_run=args.dry_run)
    except RuntimeError as err:
        logger.error("Configuration error: %s", err)
        return 1

    response = run_digest(day_type, services)
    if not response.success:
        logger.error("%s digest failed: %s", day_type, response.error)
        return 1

    result = response.result
    logger.info(
        "%s digest posted (%d chars, message ids %s)",
        day_type,
        len(result.content),
        result.telegram_message_ids,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
