"""Telegram connector utilities."""
from __future__ import annotations

import logging
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"
MAX_MESSAGE_LENGTH = 4096
# a break point earlier than this fraction of the limit wastes too much space
MIN_SPLIT_RATIO = 0.3


class TelegramError(RuntimeError):
    """Raised when the Bot API rejects a message."""


def _split_index(text: str, max_length: int) -> int:
    floor = max_length * MIN_SPLIT_RATIO
    for sep in ("\n\n", "\n"):
        # separator may start at the limit; it is stripped from the remainder
        idx = text.rfind(sep, 0, max_length + len(sep))
        if idx > 0 and idx >= floor:
            return idx
    return max_length


def split_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Break ``text`` into chunks no longer than ``max_length``.

    Prefers the last paragraph break, then the last line break, then a hard
    cut at the limit. Leading whitespace of each following chunk is dropped.
    """
    if len(text) <= max_length:
        return [text]

    chunks: list[str] = []
    remaining = text
    while remaining:
        if len(remaining) <= max_length:
            chunks.append(remaining)
            break
        idx = _split_index(remaining, max_length)
        chunks.append(remaining[:idx])
        remaining = remaining[idx:].lstrip()
    return chunks


def send_message(
    text: str,
    token: str,
    chat_id: str,
    parse_mode: Optional[str] = "HTML",
    session: Optional[requests.Session] = None,
) -> List[int]:
    """Send ``text`` to ``chat_id`` via the Bot API, chunking when needed.

    Parameters
    ----------
    text: str
        Message content; split at ``MAX_MESSAGE_LENGTH``.
    token, chat_id: str
        Bot credentials and target chat.
    parse_mode: Optional[str]
        ``"HTML"``, ``"MarkdownV2"`` or ``None`` for plain text.

    Returns
    -------
    list[int]
        Telegram message ids, one per chunk.
    """
    poster = session.post if session is not None else requests.post
    url = f"{TELEGRAM_API}/bot{token}/sendMessage"
    message_ids: List[int] = []

    for chunk in split_message(text, MAX_MESSAGE_LENGTH):
        payload = {
            "chat_id": chat_id,
            "text": chunk,
            "disable_web_page_preview": True,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode
        try:
            resp = poster(url, json=payload, timeout=30)
            result = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise TelegramError(f"Telegram request failed: {exc}") from exc

        if not result.get("ok"):
            raise TelegramError(
                f"Telegram API error: {result.get('description') or 'Unknown error'}"
            )
        message_ids.append(result["result"]["message_id"])

    logger.info("Posted %d Telegram message(s) to %s", len(message_ids), chat_id)
    return message_ids


class TelegramPoster:
    """Callable posting handle bound to one bot and chat."""

    def __init__(
        self,
        token: str,
        chat_id: str,
        parse_mode: Optional[str] = "HTML",
        session: Optional[requests.Session] = None,
    ) -> None:
        if not token or not chat_id:
            raise TelegramError("TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID not configured")
        self.token = token
        self.chat_id = chat_id
        self.parse_mode = parse_mode
        self.session = session

    def __call__(self, text: str) -> List[int]:
        return send_message(
            text,
            self.token,
            self.chat_id,
            parse_mode=self.parse_mode,
            session=self.session,
        )
