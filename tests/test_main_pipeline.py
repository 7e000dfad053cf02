import pytest

import main as cli
from agents.digest_runner import GenerateResponse, GenerationResult
from utils.settings import Settings


@pytest.fixture
def captured(monkeypatch):
    """Run main() without touching the network."""
    calls = {}

    def fake_build(settings, day_type, dry_run=False):
        calls["build"] = (day_type, dry_run)
        return object()

    def fake_run(day_type, services):
        calls["run"] = day_type
        return calls.get(
            "response",
            GenerateResponse(
                success=True,
                result=GenerationResult("text", [1], [], "2025-06-01T00:00:00Z"),
            ),
        )

    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setattr(cli, "build_services", fake_build)
    monkeypatch.setattr(cli, "run_digest", fake_run)
    return calls


def test_run_command(captured):
    assert cli.main(["run", "news", "--dry-run"]) == 0
    assert captured["build"] == ("news", True)
    assert captured["run"] == "news"


def test_auto_news_slot(captured):
    assert cli.main(["auto", "--news"]) == 0
    assert captured["run"] == "news"


def test_auto_uses_weekday_routing(captured, monkeypatch):
    monkeypatch.setattr(cli, "digest_for", lambda moment, news_slot=False: "day-c")
    assert cli.main(["auto"]) == 0
    assert captured["run"] == "day-c"


def test_failure_sets_exit_code(captured):
    captured["response"] = GenerateResponse(success=False, error="boom")
    assert cli.main(["run", "day-a"]) == 1


def test_configuration_error_sets_exit_code(monkeypatch):
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)

    def broken(settings, day_type, dry_run=False):
        raise RuntimeError("ANTHROPIC_API_KEY not configured")

    monkeypatch.setattr(cli, "build_services", broken)
    assert cli.main(["run", "news"]) == 1


def test_build_services_wires_clients():
    settings = Settings(
        nansen_api_key="n-key",
        anthropic_api_key="a-key",
        telegram_bot_token="t",
        telegram_chat_id="c",
    )
    news_services = cli.build_services(settings, "news", dry_run=True)
    assert news_services.nansen is None
    assert news_services.post("hello") == []

    day_services = cli.build_services(settings, "day-a")
    assert day_services.nansen.api_key == "n-key"
    assert day_services.post.chat_id == "c"
    assert day_services.top_headlines == 15
