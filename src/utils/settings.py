"""Runtime configuration collected from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    nansen_api_key: str = ""
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 4096
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_parse_mode: str = "HTML"
    news_lookback_hours: int = 24
    news_fetch_limit: int = 50
    news_top_headlines: int = 15
    nansen_max_retries: int = 3
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (defaults to ``os.environ``)."""
        env = os.environ if env is None else env
        return cls(
            nansen_api_key=env.get("NANSEN_API_KEY", ""),
            anthropic_api_key=env.get("ANTHROPIC_API_KEY", ""),
            anthropic_model=env.get("ANTHROPIC_MODEL", cls.anthropic_model),
            llm_max_tokens=_int(env, "LLM_MAX_TOKENS", cls.llm_max_tokens),
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN", ""),
            telegram_chat_id=env.get("TELEGRAM_CHAT_ID", ""),
            telegram_parse_mode=env.get("TELEGRAM_PARSE_MODE", cls.telegram_parse_mode),
            news_lookback_hours=_int(env, "NEWS_LOOKBACK_HOURS", cls.news_lookback_hours),
            news_fetch_limit=_int(env, "NEWS_FETCH_LIMIT", cls.news_fetch_limit),
            news_top_headlines=_int(env, "NEWS_TOP_HEADLINES", cls.news_top_headlines),
            nansen_max_retries=_int(env, "NANSEN_MAX_RETRIES", cls.nansen_max_retries),
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
        )
