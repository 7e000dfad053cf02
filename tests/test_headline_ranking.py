import datetime as dt

from analysis import headline_ranking as hr
from data_processing.models import Article

BASE = dt.datetime(2025, 6, 1, 12, 0, tzinfo=dt.UTC)


def _art(title, source, minutes=0, description=None, idx=None):
    return Article(
        id=f"{source}-{idx if idx is not None else title}",
        title=title,
        source=source,
        url="#",
        timestamp=BASE + dt.timedelta(minutes=minutes),
        description=description,
    )


def test_normalize_filters_punctuation_short_tokens_and_stop_words():
    assert hr.normalize("Bitcoin ETF: Here's What That Means, With $1B!") == [
        "bitcoin",
        "heres",
        "means",
    ]


def test_normalize_keeps_order_and_duplicates_and_does_not_mutate():
    title = "Solana solana SOLANA outage"
    assert hr.normalize(title) == ["solana", "solana", "solana", "outage"]
    assert title == "Solana solana SOLANA outage"
    assert hr.normalize(title) == hr.normalize(title)


def test_stop_word_only_title_never_clusters():
    articles = [
        _art("That is about here with them", "A"),
        _art("Which will have been there", "B"),
    ]
    assert hr.normalize(articles[0].title) == []
    assert hr.cluster(articles) == []
    assert hr.rank_headlines(articles) == []


def test_scenario_a_hack_story_groups_across_sources():
    articles = [
        _art("Exchange X hacked for $50 million", "A", minutes=0),
        _art("Hackers drain $50 million from Exchange X", "B", minutes=5),
        _art("Unrelated: Token Y rallies 20%", "C", minutes=10),
    ]
    clusters = hr.cluster(articles)
    assert len(clusters) == 2

    ranked = hr.rank_headlines(articles)
    assert ranked[0].coverage_count == 2
    assert ranked[0].related_sources == ("A", "B")
    assert ranked[1].coverage_count == 1
    assert ranked[1].title == "Unrelated: Token Y rallies 20%"


def test_hack_and_hacked_share_only_one_keyword():
    articles = [
        _art("Exchange X hacked for $50 million", "A", minutes=10),
        _art("Major hack drains $50M from Exchange X", "B", minutes=5),
        _art("Unrelated: Token Y rallies 20%", "C", minutes=0),
    ]
    assert hr.normalize(articles[0].title) == ["exchange", "hacked", "million"]
    assert hr.normalize(articles[1].title) == ["major", "hack", "drains", "exchange"]

    ranked = hr.rank_headlines(articles)

    assert [(h.coverage_count, h.related_sources) for h in ranked] == [
        (1, ("A",)),
        (1, ("B",)),
        (1, ("C",)),
    ]


def test_scenario_b_single_shared_keyword_does_not_merge():
    articles = [
        _art("Ethereum upgrade ships tomorrow", "A"),
        _art("Ethereum treasury firms expand", "B"),
    ]
    clusters = hr.cluster(articles)
    assert [len(c.articles) for c in clusters] == [1, 1]


def test_scenario_c_empty_input():
    assert hr.cluster([]) == []
    assert hr.rank_headlines([]) == []


def test_scenario_d_repeated_source_listed_once():
    articles = [
        _art("Binance lists pepe futures today", "coindesk", idx=1),
        _art("Binance pepe futures listing confirmed", "coindesk", idx=2),
        _art("Pepe futures arrive on Binance", "decrypt", idx=3),
    ]
    ranked = hr.rank_headlines(articles)
    assert len(ranked) == 1
    assert ranked[0].coverage_count == 3
    assert ranked[0].related_sources == ("coindesk", "decrypt")


def test_first_fit_prefers_earliest_cluster_over_better_match():
    articles = [
        _art("Bitcoin miners sell reserves", "A"),
        _art("Bitcoin price hits record high", "B"),
        # two keywords with the first cluster, four with the second
        _art("Bitcoin miners price record high", "C"),
    ]
    clusters = hr.cluster(articles)
    assert [a.source for a in clusters[0].articles] == ["A", "C"]
    assert [a.source for a in clusters[1].articles] == ["B"]


def test_cluster_keywords_grow_by_union():
    articles = [
        _art("Ripple lawsuit settlement approved", "A"),
        _art("Ripple settlement payout begins", "B"),
        # shares only 'payout' + 'begins' with the second title
        _art("Payout begins for creditors", "C"),
    ]
    clusters = hr.cluster(articles)
    assert len(clusters) == 1
    assert {"ripple", "lawsuit", "settlement", "approved", "payout", "begins"} <= clusters[0].keywords
    assert len(clusters[0].articles) == 3


def test_rank_orders_by_coverage_then_recency_then_creation():
    articles = [
        _art("Solana network outage resolved", "A", minutes=0),
        _art("Cardano governance vote passes", "B", minutes=30),
        _art("Polkadot parachain auction closes", "C", minutes=30),
        _art("Solana outage resolved after hours", "D", minutes=1),
    ]
    ranked = hr.rank_headlines(articles)
    assert [h.coverage_count for h in ranked] == [2, 1, 1]
    # equal coverage and timestamp: creation order is kept
    assert [h.source for h in ranked[1:]] == ["B", "C"]

    for earlier, later in zip(ranked, ranked[1:]):
        assert earlier.coverage_count > later.coverage_count or (
            earlier.coverage_count == later.coverage_count
            and earlier.timestamp >= later.timestamp
        )


def test_recency_uses_first_article_of_cluster():
    articles = [
        _art("Older story about tether reserves", "A", minutes=0),
        _art("Newer story about stablecoin audits", "B", minutes=60),
    ]
    ranked = hr.rank_headlines(articles)
    assert [h.source for h in ranked] == ["B", "A"]


def test_representative_is_longest_description_first_wins():
    articles = [
        _art("Uniswap fee switch vote", "A", description=None),
        _art("Uniswap fee switch approved", "B", description="abcd"),
        _art("Uniswap fee switch live", "C", description="wxyz"),
    ]
    ranked = hr.rank_headlines(articles)
    assert ranked[0].source == "B"
    assert ranked[0].description == "abcd"
    assert ranked[0].related_sources == ("A", "B", "C")


def test_representative_defaults_to_first_when_no_descriptions():
    articles = [
        _art("Aave governance proposal passes", "A"),
        _art("Aave governance proposal approved", "B"),
    ]
    assert hr.rank_headlines(articles)[0].source == "A"


def test_rank_headlines_is_deterministic():
    articles = [
        _art("Exchange X hacked for $50 million", "A", minutes=0),
        _art("Hackers drain $50 million from Exchange X", "B", minutes=5),
        _art("Token Y rallies after listing", "C", minutes=10),
    ]
    assert hr.rank_headlines(articles) == hr.rank_headlines(list(articles))


def test_single_article_input():
    ranked = hr.rank_headlines([_art("Chainlink staking expands", "A")])
    assert len(ranked) == 1
    assert ranked[0].coverage_count == 1
    assert ranked[0].related_sources == ("A",)
