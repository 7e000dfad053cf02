"""
headline_ranking.py
-------------------
Collapse near-duplicate headlines from several RSS sources into stories and
rank them by how many articles cover each one.

Pipeline
========
• normalize      title -> significant keywords
• cluster        greedy first-fit grouping on keyword overlap (>= 2 shared)
• rank           coverage desc, then recency of the cluster's first article
• rank_headlines rank(cluster(articles))

Everything here is pure: no I/O, no shared state between calls.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from data_processing.models import Article, RankedHeadline, StoryCluster

# ---------------------------------------------------------------------------
MIN_SHARED_KEYWORDS = 2
MIN_KEYWORD_LENGTH = 4

STOP_WORDS = frozenset(
    {
        "that", "with", "about", "which", "here", "this", "from", "have",
        "been", "will", "would", "could", "should", "their", "there", "they",
        "what", "when", "where", "while", "into", "over", "after", "before",
        "than", "then", "them", "these", "those", "just", "more", "most",
        "some", "such", "only", "also", "very", "your", "were", "says",
        "said", "amid",
    }
)

_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")


# ────────────────────────────────────────────────────────────────────────────
# 1. Text normalisation
# ────────────────────────────────────────────────────────────────────────────
def normalize(title: str) -> List[str]:
    """Return the significant keywords of ``title`` in their original order.

    Lowercases, strips everything except ``[a-z0-9]`` and whitespace, then
    drops tokens of three characters or fewer and stop-words. Duplicates are
    kept; callers compare against sets so only presence matters.
    """
    cleaned = _NON_WORD_RE.sub("", title.lower())
    return [
        tok
        for tok in cleaned.split()
        if len(tok) >= MIN_KEYWORD_LENGTH and tok not in STOP_WORDS
    ]


# ────────────────────────────────────────────────────────────────────────────
# 2. Story clustering
# ────────────────────────────────────────────────────────────────────────────
def cluster(articles: Iterable[Article]) -> List[StoryCluster]:
    """Group ``articles`` into story clusters, first-fit in input order.

    An article joins the earliest cluster sharing at least
    ``MIN_SHARED_KEYWORDS`` keywords with it, even when a later cluster would
    overlap more. Articles whose titles yield no keywords are skipped.
    """
    clusters: list[StoryCluster] = []

    for article in articles:
        keywords = set(normalize(article.title))
        if not keywords:
            continue

        for story in clusters:
            if len(keywords & story.keywords) >= MIN_SHARED_KEYWORDS:
                story.articles.append(article)
                story.keywords |= keywords
                break
        else:
            clusters.append(StoryCluster(articles=[article], keywords=keywords))

    return clusters


# ────────────────────────────────────────────────────────────────────────────
# 3. Coverage ranking
# ────────────────────────────────────────────────────────────────────────────
def _description_length(article: Article) -> int:
    return len(article.description or "")


def _representative(story: StoryCluster) -> Article:
    best = story.articles[0]
    for article in story.articles[1:]:
        # strict comparison keeps the first of equally long descriptions
        if _description_length(article) > _description_length(best):
            best = article
    return best


def _distinct_sources(story: StoryCluster) -> tuple[str, ...]:
    return tuple(dict.fromkeys(a.source for a in story.articles))


def rank(clusters: Sequence[StoryCluster]) -> List[RankedHeadline]:
    """Order clusters by coverage then recency and pick one article for each."""
    ordered = sorted(
        clusters,
        key=lambda c: (len(c.articles), c.articles[0].timestamp),
        reverse=True,
    )
    return [
        RankedHeadline(
            article=_representative(story),
            coverage_count=len(story.articles),
            related_sources=_distinct_sources(story),
        )
        for story in ordered
    ]


# Public one-shot helper ------------------------------------------------------
def rank_headlines(articles: Iterable[Article]) -> List[RankedHeadline]:
    """Deduplicate and rank ``articles``; empty input gives an empty list."""
    return rank(cluster(articles))
