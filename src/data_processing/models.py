"""
models.py
---------
Value types shared by the news pipeline.

Articles come out of the RSS collector, story clusters only live for the
duration of one clustering pass, and ranked headlines are what the prompt
builders consume.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import List, Optional, Set


@dataclass(frozen=True)
class Article:
    id: str
    title: str
    source: str
    url: str
    timestamp: dt.datetime
    description: Optional[str] = None


@dataclass
class StoryCluster:
    """Articles judged to report the same event plus their pooled keywords."""

    articles: List[Article] = field(default_factory=list)
    keywords: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class RankedHeadline:
    article: Article
    coverage_count: int
    related_sources: tuple[str, ...]

    @property
    def title(self) -> str:
        return self.article.title

    @property
    def source(self) -> str:
        return self.article.source

    @property
    def url(self) -> str:
        return self.article.url

    @property
    def timestamp(self) -> dt.datetime:
        return self.article.timestamp

    @property
    def description(self) -> Optional[str]:
        return self.article.description
