"""
academy_articles.py
-------------------
Catalogue of Nansen Academy guides appended as a "learn more" footer to every
post. Each day type draws from the categories that match its content.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


@dataclass(frozen=True)
class AcademyArticle:
    title: str
    url: str
    category: str


_CATALOGUE = [
    ("Smart Money 101", "https://academy.nansen.ai/en/articles/2132837-smart-money-101", "smart-money"),
    ("Finding Consistent Winners with Smart Money Leaderboard", "https://academy.nansen.ai/en/articles/9672038-finding-consistent-winners-with-smart-money-leaderboard", "smart-money"),
    ("High-Conviction Entry Signal via Smart Money Live Trades", "https://academy.nansen.ai/en/articles/9297913-high-conviction-entry-signal-via-smart-money-live-trades", "smart-money"),
    ("Tracking Smart Money Soaking Up Supply", "https://academy.nansen.ai/en/articles/0752627-tracking-smart-money-soaking-up-supply", "smart-money"),
    ("Track Smart Money Accumulation Early Using Token God Mode", "https://academy.nansen.ai/en/articles/6611574-track-smart-money-accumulation-early-using-token-god-mode-profiler", "smart-money"),
    ("Monitor Onchain Moves with Smart Alerts", "https://academy.nansen.ai/en/articles/2912237-monitor-onchain-moves-with-smart-alerts", "alerts"),
    ("Setting Up Smart Money Alerts", "https://academy.nansen.ai/en/articles/9591962-setting-up-smart-money-alerts", "alerts"),
    ("Portfolio Defense: Exit Triggers Using Smart Alerts", "https://academy.nansen.ai/en/articles/6329340-portfolio-defense-exit-triggers-using-smart-alerts-on-top-holders", "alerts"),
    ("Automating Token Discovery with Smart Alerts", "https://academy.nansen.ai/en/articles/1310547-automating-token-discovery-with-smart-alerts", "alerts"),
    ("AI Smart Alerts 101", "https://academy.nansen.ai/en/articles/6239622-ai-smart-alerts-101", "alerts"),
    ("Token Screener 101", "https://academy.nansen.ai/en/articles/6974360-token-screener-101", "token-screener"),
    ("Finding High-Potential Tokens with Token Screener", "https://academy.nansen.ai/en/articles/2643723-finding-high-potential-tokens-with-token-screener", "token-screener"),
    ("Discovering Fresh Memecoins with Token Screener", "https://academy.nansen.ai/en/articles/5534599-discovering-fresh-memecoins-with-token-screener", "token-screener"),
    ("Identifying High-Signal Tokens with Token Screener", "https://academy.nansen.ai/en/articles/2429283-identifying-high-signal-tokens-with-token-screener", "token-screener"),
    ("Daily Token Discovery Using Nansen Homepage", "https://academy.nansen.ai/en/articles/5116740-daily-token-discovery-using-nansen-homepage", "token-screener"),
    ("Nansen Trading 101", "https://academy.nansen.ai/en/articles/3306593-nansen-trading-101", "trading"),
    ("About Nansen Trading", "https://academy.nansen.ai/en/articles/0162796-about-nansen-trading", "trading"),
    ("Get Started with Nansen Trading", "https://academy.nansen.ai/en/articles/9215495-get-started-with-nansen-trading", "trading"),
    ("Crypto Trading for Beginners", "https://academy.nansen.ai/en/articles/6851806-crypto-trading-for-beginners", "trading"),
    ("Buying/Selling Crypto for Beginners", "https://academy.nansen.ai/en/articles/6857553-buyingselling-crypto-for-beginners", "trading"),
    ("Token God Mode 101", "https://academy.nansen.ai/en/articles/3874203-token-god-mode-101", "playbook"),
    ("Layered Due Diligence with Token God Mode", "https://academy.nansen.ai/en/articles/3081640-layered-due-diligence-with-token-god-mode", "playbook"),
    ("How to Use Token God Mode to Compare Holder Distribution", "https://academy.nansen.ai/en/articles/0479852-how-to-use-token-god-mode-to-compare-holder-distribution", "playbook"),
    ("Detecting Accumulation Patterns in Token God Mode", "https://academy.nansen.ai/en/articles/1129448-detecting-accumulation-patterns-in-token-god-mode", "playbook"),
    ("Using Balance Divergences in Token God Mode", "https://academy.nansen.ai/en/articles/7583890-using-balance-divergences-in-token-god-mode", "playbook"),
    ("Using Token God Mode's Top Holders Tab to Spot Exit", "https://academy.nansen.ai/en/articles/9054931-using-token-god-modes-top-holders-tab-to-spot-exit", "playbook"),
    ("Using AI Signals to Filter High-Signal Tokens", "https://academy.nansen.ai/en/articles/0412066-using-ai-signals-to-filter-high-signal-tokens", "playbook"),
    ("Smart Segments: Build Your Own Alpha Wallet Tracker", "https://academy.nansen.ai/en/articles/3746755-smart-segments-build-your-own-alpha-wallet-tracker", "playbook"),
    ("Building Watchlists with Smart Segments", "https://academy.nansen.ai/en/articles/7953263-building-watchlists-with-smart-segments", "playbook"),
    ("Use Smart Segments to Filter for New Narratives", "https://academy.nansen.ai/en/articles/9658122-use-smart-segments-to-filter-for-new-narratives", "playbook"),
    ("Using Hot Contracts for Token Discovery", "https://academy.nansen.ai/en/articles/5206357-using-hot-contracts-for-token-discovery", "playbook"),
    ("Monitoring Your Portfolio and Exporting Data", "https://academy.nansen.ai/en/articles/1437225-monitoring-your-portfolio-and-exporting-data", "playbook"),
    ("Nansen Profiler 101", "https://academy.nansen.ai/en/articles/0002013-nansen-profiler-101", "profiler"),
    ("Track Individual Wallets Over Time with Profiler", "https://academy.nansen.ai/en/articles/7644156-track-individual-wallets-over-time-with-profiler", "profiler"),
    ("Evaluating Wallet Conviction Using Profiler PnL Analysis", "https://academy.nansen.ai/en/articles/5835705-evaluating-wallet-conviction-using-profiler-pnl-analysis", "profiler"),
    ("Confirm Conviction by Identifying Holding Patterns", "https://academy.nansen.ai/en/articles/0252026-how-to-confirm-conviction-by-identifying-holding-patterns-with-profiler", "profiler"),
    ("Use Transaction History and Reverse-Engineer Entry Points", "https://academy.nansen.ai/en/articles/8002716-use-transaction-history-and-reverse-engineer-entry-points", "profiler"),
    ("About Nansen", "https://academy.nansen.ai/en/articles/9113359-about-nansen", "101"),
    ("Who is Nansen For?", "https://academy.nansen.ai/en/articles/0560433-who-is-nansen-for", "101"),
    ("Nansen AI 101", "https://academy.nansen.ai/en/articles/4676097-nansen-ai-101", "101"),
    ("Nansen Points 101", "https://academy.nansen.ai/en/articles/3715302-nansen-points-101", "101"),
    ("Nansen Staking 101", "https://academy.nansen.ai/en/articles/4748110-nansen-staking-101", "101"),
    ("Nansen Portfolio 101", "https://academy.nansen.ai/en/articles/8816201-nansen-portfolio-101", "101"),
    ("AI Signals 101", "https://academy.nansen.ai/en/articles/0601583-ai-signals-101", "101"),
    ("Deep Research 101", "https://academy.nansen.ai/en/articles/1725366-deep-research-101", "101"),
    ("Nansen API/MCP 101", "https://academy.nansen.ai/en/articles/8404875-nansen-apimcp-101", "101"),
    ("Labels & Watchlists 101", "https://academy.nansen.ai/en/articles/2149924-labels-and-watchlists-101", "101"),
    ("Chains Growth 101", "https://academy.nansen.ai/en/articles/1025513-chains-growth-101", "101"),
    ("Playbook Levels", "https://academy.nansen.ai/en/articles/3704489-playbook-levels", "101"),
    ("Onchain Glossary for Beginners", "https://academy.nansen.ai/en/articles/4406510-onchain-glossary-for-beginners", "general"),
    ("Onchain Explained", "https://academy.nansen.ai/en/articles/1243861-onchain-explained", "general"),
    ("Crypto Investing for Beginners", "https://academy.nansen.ai/en/articles/6068483-crypto-investing-for-beginners", "general"),
    ("Staking Crypto for Beginners", "https://academy.nansen.ai/en/articles/2174127-staking-crypto-for-beginners", "general"),
]

ACADEMY_ARTICLES: List[AcademyArticle] = [AcademyArticle(*row) for row in _CATALOGUE]

DAY_CATEGORY_MAP: Dict[str, tuple[str, ...]] = {
    "day-a": ("smart-money", "alerts", "profiler"),
    "day-b": ("token-screener", "trading", "playbook"),
    "day-c": ("playbook", "101", "profiler", "smart-money"),
    "news": ("101", "general", "playbook", "smart-money"),
}


def get_random_articles(
    day_type: str, count: int = 3, rng: Optional[random.Random] = None
) -> List[AcademyArticle]:
    """Pick ``count`` distinct articles relevant to ``day_type``.

    Falls back to the whole catalogue when no category matches.
    """
    rng = rng or random.Random()
    categories = DAY_CATEGORY_MAP.get(day_type, ())
    pool = [a for a in ACADEMY_ARTICLES if a.category in categories] or ACADEMY_ARTICLES
    return rng.sample(pool, min(count, len(pool)))


def format_article_footer(articles: Sequence[AcademyArticle]) -> str:
    if not articles:
        return ""
    if len(articles) == 1:
        return f"\n\n---\nLearn more: {articles[0].title}\n{articles[0].url}"
    lines = "\n".join(f"• {a.title}\n{a.url}" for a in articles)
    return f"\n\n---\n📚 Learn more:\n{lines}"
