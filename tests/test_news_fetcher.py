import datetime as dt
import logging
import types

from data_processing import news_fetcher


def _entry(title, hours_old=1, summary="<p>Some <b>bold</b> text</p>", guid=None, link="https://x"):
    published = dt.datetime.now(dt.UTC) - dt.timedelta(hours=hours_old)
    e = {"title": title, "summary": summary, "link": link, "published_parsed": published.timetuple()}
    if guid:
        e["id"] = guid
    return e


def _feed(entries, bozo=False):
    return types.SimpleNamespace(entries=entries, bozo=bozo, bozo_exception="bad xml")


def test_parse_feed_builds_articles():
    feed = _feed([_entry("Bitcoin rallies", guid="g1"), _entry("", summary="", link="")])

    items = news_fetcher.parse_feed("u", "decrypt", parse=lambda url: feed)

    assert items[0].id == "decrypt-g1"
    assert items[0].source == "decrypt"
    assert items[0].description == "Some bold text"
    assert items[0].timestamp.tzinfo is not None
    assert items[1].id == "decrypt-1"
    assert items[1].title == "Untitled"
    assert items[1].url == "#"
    assert items[1].description is None


def test_parse_feed_returns_empty_on_error(caplog):
    def boom(url):
        raise OSError("dns failure")

    with caplog.at_level(logging.ERROR):
        assert news_fetcher.parse_feed("u", "theblock", parse=boom) == []
    assert "theblock" in caplog.text


def test_parse_feed_bozo_without_entries(caplog):
    with caplog.at_level(logging.WARNING):
        items = news_fetcher.parse_feed("u", "newsbtc", parse=lambda url: _feed([], bozo=True))
    assert items == []
    assert "newsbtc" in caplog.text


def test_fetch_latest_news_isolates_failed_feeds_and_filters_window():
    feeds = {"good": "https://good", "bad": "https://bad", "other": "https://other"}

    def fake_parse(url):
        if url == "https://bad":
            raise RuntimeError("feed down")
        if url == "https://good":
            return _feed([_entry("fresh good", hours_old=2), _entry("stale", hours_old=48)])
        return _feed([_entry("fresher other", hours_old=1)])

    items = news_fetcher.fetch_latest_news(hours_back=24, limit=10, feeds=feeds, parse=fake_parse)

    assert [a.title for a in items] == ["fresher other", "fresh good"]


def test_fetch_latest_news_respects_limit(monkeypatch):
    feed = _feed([_entry(f"title {i}", hours_old=i + 1) for i in range(5)])
    monkeypatch.setattr(news_fetcher.feedparser, "parse", lambda url: feed)

    items = news_fetcher.fetch_latest_news(hours_back=24, limit=3, feeds={"a": "https://a"})

    assert [a.title for a in items] == ["title 0", "title 1", "title 2"]


def test_fetch_latest_news_empty_feeds():
    assert news_fetcher.fetch_latest_news(feeds={}) == []
