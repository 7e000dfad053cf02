import datetime as dt
import random

import pytest

from agents import academy_articles, digest_runner
from agents.digest_runner import DigestServices, run_digest
from data_processing.models import Article

NOW = dt.datetime(2025, 6, 1, 12, 0, tzinfo=dt.UTC)


class FakeNansen:
    def __init__(self, fail=False):
        self.fail = fail

    def get_smart_money_dex_trades(self, **kw):
        if self.fail:
            raise RuntimeError("analytics down")
        return [{"token_bought_symbol": "PEPE", "token_sold_symbol": "WETH", "trade_value_usd": 1000, "chain": "ethereum"}]

    def get_high_conviction_transfers(self, **kw):
        return []

    def get_multi_token_flow_intelligence(self):
        return []

    def get_memecoin_dex_trades(self, **kw):
        return []

    def get_smart_money_perp_trades(self, **kw):
        return []

    def get_token_screener(self, **kw):
        return []

    def get_weekly_dex_trades(self, **kw):
        return []

    def get_weekly_flow_intelligence(self):
        return []


def _services(**overrides):
    prompts, posts = [], []

    def generate(system, user):
        prompts.append((system, user))
        return "GENERATED"

    def post(text):
        posts.append(text)
        return [101, 102]

    articles = [
        Article("a-1", "Exchange X hacked for $50 million", "A", "#", NOW),
        Article("b-1", "Hackers drain $50 million from Exchange X", "B", "#", NOW),
    ]
    kwargs = dict(
        generate=generate,
        post=post,
        fetch_news=lambda: articles,
        nansen=FakeNansen(),
        rng=random.Random(7),
    )
    kwargs.update(overrides)
    return DigestServices(**kwargs), prompts, posts


def test_news_digest_end_to_end():
    services, prompts, posts = _services()

    response = run_digest("news", services)

    assert response.success is True
    system, user = prompts[0]
    assert system.startswith("You are a professional crypto news analyst")
    assert "Covered by 2 articles from: A, B" in user
    assert posts[0].startswith("GENERATED\n\n---\n")
    assert response.result.content == posts[0]
    assert response.result.telegram_message_ids == [101, 102]
    assert len(response.result.articles_appended) == 3


def test_news_digest_with_no_articles_still_posts_fallback():
    services, prompts, _ = _services(fetch_news=lambda: [])
    assert run_digest("news", services).success
    assert "temporarily unavailable" in prompts[0][1]


@pytest.mark.parametrize("day_type", ["day-a", "day-b", "day-c"])
def test_analytics_digests(day_type):
    services, prompts, posts = _services()
    response = run_digest(day_type, services)
    assert response.success
    assert len(posts) == 1


def test_failed_analytics_source_does_not_abort_batch():
    services, prompts, _ = _services(nansen=FakeNansen(fail=True))
    response = run_digest("day-a", services)
    assert response.success
    assert "No significant smart money DEX trades detected." in prompts[0][1]


def test_failures_become_tagged_results():
    def broken_generate(system, user):
        raise RuntimeError("model unavailable")

    services, _, posts = _services(generate=broken_generate)
    response = run_digest("news", services)

    assert response.success is False
    assert response.error == "model unavailable"
    assert response.result is None
    assert posts == []


def test_analytics_digest_without_client_fails_cleanly():
    services, _, _ = _services(nansen=None)
    response = run_digest("day-b", services)
    assert not response.success
    assert "NANSEN_API_KEY" in response.error


def test_unknown_day_type():
    services, _, _ = _services()
    assert run_digest("day-z", services).error == "Unknown digest type: day-z"


@pytest.mark.parametrize(
    "day, expected",
    [
        (dt.datetime(2025, 6, 1, 10, tzinfo=dt.UTC), "day-a"),  # Sunday
        (dt.datetime(2025, 6, 2, 10, tzinfo=dt.UTC), "day-a"),  # Monday
        (dt.datetime(2025, 6, 3, 10, tzinfo=dt.UTC), "day-b"),  # Tuesday
        (dt.datetime(2025, 6, 4, 10, tzinfo=dt.UTC), "day-a"),  # Wednesday
        (dt.datetime(2025, 6, 5, 10, tzinfo=dt.UTC), "day-b"),  # Thursday
        (dt.datetime(2025, 6, 6, 10, tzinfo=dt.UTC), "day-c"),  # Friday
        (dt.datetime(2025, 6, 7, 10, tzinfo=dt.UTC), "day-b"),  # Saturday
    ],
)
def test_digest_for_weekday_routing(day, expected):
    assert digest_runner.digest_for(day) == expected
    assert digest_runner.digest_for(day, news_slot=True) == "news"


# ---------------------------------------------------------------------------
# Academy footer
# ---------------------------------------------------------------------------
def test_random_articles_come_from_day_categories():
    picked = academy_articles.get_random_articles("day-b", 3, rng=random.Random(1))
    assert len({a.url for a in picked}) == 3
    assert {a.category for a in picked} <= {"token-screener", "trading", "playbook"}


def test_unknown_day_type_uses_whole_catalogue():
    picked = academy_articles.get_random_articles("other", 100, rng=random.Random(1))
    assert len(picked) == len(academy_articles.ACADEMY_ARTICLES)


def test_footer_formats():
    art = academy_articles.ACADEMY_ARTICLES[0]
    assert academy_articles.format_article_footer([art]) == (
        f"\n\n---\nLearn more: {art.title}\n{art.url}"
    )
    many = academy_articles.format_article_footer(academy_articles.ACADEMY_ARTICLES[:2])
    assert many.startswith("\n\n---\n📚 Learn more:\n• ")
    assert academy_articles.format_article_footer([]) == ""
