"""
digest_runner.py
----------------
One function per scheduled post: gather data, build the prompt, generate the
text, append the academy footer and post it.

All collaborators arrive through :class:`DigestServices` so tests (and the
CLI's dry-run mode) can swap in fakes. Failures never escape
:func:`run_digest`; they come back as ``GenerateResponse(success=False)``.
"""

from __future__ import annotations

import datetime as dt
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from agents import memecoin_digest, news_digest, smart_money_digest, weekly_roundup
from agents.academy_articles import AcademyArticle, format_article_footer, get_random_articles
from analysis.headline_ranking import rank_headlines
from data_processing.models import Article
from utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)

DAY_TYPES = ("day-a", "day-b", "day-c", "news")
FOOTER_ARTICLES = 3

# Monday=0 … Sunday=6
WEEKDAY_DIGEST = {
    0: "day-a",
    1: "day-b",
    2: "day-a",
    3: "day-b",
    4: "day-c",
    5: "day-b",
    6: "day-a",
}


@dataclass
class DigestServices:
    """Handles every digest needs. ``nansen`` may be ``None`` for news-only runs."""

    generate: Callable[[str, str], str]
    post: Callable[[str], List[int]]
    fetch_news: Callable[[], List[Article]]
    nansen: Any = None
    top_headlines: int = news_digest.TOP_HEADLINES
    rng: random.Random = field(default_factory=random.Random)


@dataclass(frozen=True)
class GenerationResult:
    content: str
    telegram_message_ids: List[int]
    articles_appended: List[AcademyArticle]
    generated_at: str


@dataclass(frozen=True)
class GenerateResponse:
    success: bool
    result: Optional[GenerationResult] = None
    error: Optional[str] = None


def digest_for(moment: dt.datetime, news_slot: bool = False) -> str:
    """Which digest a scheduled trigger at ``moment`` (UTC) should produce."""
    if news_slot:
        return "news"
    return WEEKDAY_DIGEST[moment.astimezone(dt.UTC).weekday()]


# ────────────────────────────────────────────────────────────────────────────
# Prompt builders per day type
# ────────────────────────────────────────────────────────────────────────────
def _gather(calls: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
    """Run the data fetches in parallel; a failed fetch yields an empty list."""
    results: Dict[str, Any] = {}
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = {name: pool.submit(fn) for name, fn in calls.items()}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except Exception as exc:  # noqa: BLE001
                logger.error("%s fetch failed: %s", name, exc)
                results[name] = []
    return results


def _require_nansen(services: DigestServices):
    if services.nansen is None:
        raise RuntimeError("NANSEN_API_KEY not configured")
    return services.nansen


def _news_prompt(services: DigestServices) -> Tuple[str, str]:
    articles = services.fetch_news()
    headlines = rank_headlines(articles)
    logger.info(
        "[news] Fetched: %d articles, %d unique stories, top story covered by %d articles",
        len(articles),
        len(headlines),
        headlines[0].coverage_count if headlines else 0,
    )
    user = news_digest.build_user_prompt(headlines, top_n=services.top_headlines)
    return news_digest.SYSTEM_PROMPT, user


def _day_a_prompt(services: DigestServices) -> Tuple[str, str]:
    client = _require_nansen(services)
    data = _gather(
        {
            "dex_trades": lambda: client.get_smart_money_dex_trades(min_usd=1000, limit=50),
            "transfers": lambda: client.get_high_conviction_transfers(min_usd=100_000, limit=30),
            "flow_intelligence": client.get_multi_token_flow_intelligence,
        }
    )
    logger.info(
        "[day-a] Fetched: %d DEX trades, %d transfers, %d flow entries",
        len(data["dex_trades"]),
        len(data["transfers"]),
        len(data["flow_intelligence"]),
    )
    return smart_money_digest.SYSTEM_PROMPT, smart_money_digest.build_user_prompt(**data)


def _day_b_prompt(services: DigestServices) -> Tuple[str, str]:
    client = _require_nansen(services)
    data = _gather(
        {
            "memecoin_trades": lambda: client.get_memecoin_dex_trades(min_usd=500, limit=50),
            "perp_trades": lambda: client.get_smart_money_perp_trades(limit=25),
            "screener_data": lambda: client.get_token_screener(
                timeframe="24h",
                min_volume=50_000,
                min_liquidity=10_000,
                only_smart_money=True,
                limit=25,
            ),
        }
    )
    logger.info(
        "[day-b] Fetched: %d memecoin trades, %d perp trades, %d screener tokens",
        len(data["memecoin_trades"]),
        len(data["perp_trades"]),
        len(data["screener_data"]),
    )
    return memecoin_digest.SYSTEM_PROMPT, memecoin_digest.build_user_prompt(**data)


def _day_c_prompt(services: DigestServices) -> Tuple[str, str]:
    client = _require_nansen(services)
    data = _gather(
        {
            "weekly_trades": lambda: client.get_weekly_dex_trades(min_usd=5000, limit=100),
            "weekly_flows": client.get_weekly_flow_intelligence,
        }
    )
    logger.info(
        "[day-c] Fetched: %d weekly trades, %d flow entries",
        len(data["weekly_trades"]),
        len(data["weekly_flows"]),
    )
    return weekly_roundup.SYSTEM_PROMPT, weekly_roundup.build_user_prompt(**data)


PROMPT_BUILDERS: Dict[str, Callable[[DigestServices], Tuple[str, str]]] = {
    "news": _news_prompt,
    "day-a": _day_a_prompt,
    "day-b": _day_b_prompt,
    "day-c": _day_c_prompt,
}


# Public one-shot helper ------------------------------------------------------
def run_digest(day_type: str, services: DigestServices) -> GenerateResponse:
    """Produce and post the ``day_type`` digest; never raises."""
    if day_type not in PROMPT_BUILDERS:
        return GenerateResponse(success=False, error=f"Unknown digest type: {day_type}")

    try:
        system_prompt, user_prompt = PROMPT_BUILDERS[day_type](services)
        generated = services.generate(system_prompt, user_prompt)

        footer_articles = get_random_articles(day_type, FOOTER_ARTICLES, rng=services.rng)
        content = generated + format_article_footer(footer_articles)

        message_ids = services.post(content)
    except Exception as exc:  # noqa: BLE001
        logger.exception("[%s] Error", day_type)
        return GenerateResponse(success=False, error=str(exc) or type(exc).__name__)

    return GenerateResponse(
        success=True,
        result=GenerationResult(
            content=content,
            telegram_message_ids=list(message_ids),
            articles_appended=footer_articles,
            generated_at=utc_now_iso(),
        ),
    )
