"""
claude_api.py
-------------
Light-weight wrapper around the Anthropic Messages HTTP API used to turn
prepared prompts into Telegram-ready prose.

API docs: https://docs.anthropic.com/en/api/messages
"""

from __future__ import annotations
import os
import requests
from typing import Dict, Any, Optional

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
ANTHROPIC_HOST = os.getenv("ANTHROPIC_HOST", "https://api.anthropic.com")
MESSAGES_URL = f"{ANTHROPIC_HOST.rstrip('/')}/v1/messages"
API_VERSION = "2023-06-01"

DEFAULT_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
DEFAULT_MAX_TOKENS = 4096

# Requests timeout (seconds)
DEFAULT_TIMEOUT = float(os.getenv("ANTHROPIC_TIMEOUT", "120"))


# -----------------------------------------------------------------------------
# Core helpers
# -----------------------------------------------------------------------------
class ClaudeError(RuntimeError):
    """Raised when the API is unreachable or returns a non-2xx / empty response."""


def _post(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """POST ``payload`` and return the decoded JSON body.

    Network issues, non-2xx statuses and undecodable bodies all surface as
    :class:`ClaudeError` so callers only need to handle one exception type.
    """
    poster = session.post if session is not None else requests.post
    try:
        resp = poster(url, json=payload, headers=headers, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except Exception as exc:  # noqa: BLE001
        raise ClaudeError(f"Claude request failed: {exc}") from exc


def extract_text(data: Dict[str, Any]) -> str:
    """Return the first text block of a Messages API response."""
    for block in data.get("content") or []:
        if block.get("type") == "text" and block.get("text"):
            return block["text"]
    raise ClaudeError("Claude returned no text content")


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
class ClaudeClient:
    """Explicitly constructed text-generation handle.

    Parameters
    ----------
    api_key : str
        Anthropic API key. Empty or placeholder (``your_…``) keys are refused.
    model : str
        Model identifier sent with each request.
    max_tokens : int
        Default completion budget.
    timeout : float
        Request timeout in seconds.
    session : requests.Session | None
        Optional session (connection reuse, tests).
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key or "your_" in api_key:
            raise ClaudeError("ANTHROPIC_API_KEY not configured")
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.session = session

    def generate_content(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
    ) -> str:
        """
        Send a system/user prompt pair and return the generated text.

        Returns
        -------
        str
            The model's first text block.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens or self.max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
            "content-type": "application/json",
        }
        data = _post(
            MESSAGES_URL,
            payload,
            headers,
            timeout=self.timeout,
            session=self.session,
        )
        return extract_text(data)

    __call__ = generate_content


# -----------------------------------------------------------------------------
# Quick standalone test
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    try:
        client = ClaudeClient(os.getenv("ANTHROPIC_API_KEY", ""))
        answer = client.generate_content(
            "You are a terse crypto analyst.", "Describe smart money in one sentence."
        )
        print("✅ Claude responded:\n", answer)
    except ClaudeError as e:
        print("❌", e)
