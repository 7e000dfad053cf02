"""Prompt for the daily crypto news digest."""
from __future__ import annotations

from typing import Sequence

from data_processing.models import RankedHeadline
from utils.helpers import format_timestamp, truncate_text

TOP_HEADLINES = 15
MAX_DESCRIPTION_CHARS = 200

SYSTEM_PROMPT = """
You are a professional crypto news analyst writing a daily news digest for the Nansen community Telegram channel.

Your task is to summarize the most important crypto and onchain news from the past 24 hours into a concise, well-structured Telegram post.

Guidelines:
- Use plain text formatting (no HTML tags). Use emoji sparingly for visual structure.
- Keep the post between 1500-2500 characters
- Lead with the most impactful story; stories are listed by how many outlets covered them
- Group related stories together
- Focus on news relevant to onchain activity, DeFi, token movements, and market-moving events
- Include brief context for why each story matters
- End with a brief market sentiment note
- Do not include URLs in the post body (they will be available in the source articles)
- Be factual and balanced
""".strip()


def build_user_prompt(
    headlines: Sequence[RankedHeadline], top_n: int = TOP_HEADLINES
) -> str:
    """Render the ``top_n`` ranked headlines as the model's user prompt."""
    prompt = (
        "Here are the latest crypto news stories from the past 24 hours, "
        "ranked by how widely they were covered. "
        "Please create a daily news digest Telegram post.\n\n"
    )

    if not headlines:
        prompt += (
            "No recent articles found. Please generate a brief note explaining "
            "that news sources are temporarily unavailable.\n"
        )
        return prompt

    for i, item in enumerate(headlines[:top_n], start=1):
        prompt += f"{i}. [{item.source}] {item.title}\n"
        if item.coverage_count > 1:
            prompt += (
                f"   Covered by {item.coverage_count} articles from: "
                f"{', '.join(item.related_sources)}\n"
            )
        if item.description:
            prompt += f"   {truncate_text(item.description, MAX_DESCRIPTION_CHARS)}\n"
        prompt += f"   Published: {format_timestamp(item.timestamp)}\n\n"

    prompt += (
        "\nPlease create a formatted daily news digest Telegram post "
        "summarizing the most important stories above."
    )
    return prompt
