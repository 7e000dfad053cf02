"""Day C post: the weekly smart-money roundup."""
from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from utils.helpers import format_usd, truncate_address

MAX_TOKENS_LISTED = 20
MAX_BIG_TRADES = 10
UNKNOWN_SYMBOL = "UNKNOWN"

SYSTEM_PROMPT = """
You are a professional crypto analyst writing a weekly roundup Telegram post for the Nansen community channel.

Your task is to create a comprehensive weekly summary of Smart Money activity, highlighting the biggest moves, emerging trends, and key narratives.

Guidelines:
- Use plain text formatting (no HTML tags). Use emoji sparingly for visual structure.
- Keep the post between 2000-3500 characters
- Structure as a clear weekly roundup with sections
- Highlight the week's biggest smart money moves
- Identify accumulation/distribution patterns across the week
- Note any emerging narratives or sector rotations
- Compare this week's activity to general market context
- End with a forward-looking summary
- Be factual and data-driven, avoid speculation
""".strip()


def _trader(trade: Dict[str, Any]) -> str:
    # trades with neither label nor address all count as one "unknown" trader
    return trade.get("trader_label") or truncate_address(trade.get("trader_address"))


def aggregate_token_buys(trades: List[Dict[str, Any]]) -> pd.DataFrame:
    """Buy volume, trade count and unique traders per bought token."""
    if not trades:
        return pd.DataFrame(columns=["total_usd", "trades", "traders"])
    df = pd.DataFrame(
        {
            "symbol": [t.get("token_bought_symbol") or UNKNOWN_SYMBOL for t in trades],
            "value": [float(t.get("trade_value_usd") or 0) for t in trades],
            "trader": [_trader(t) for t in trades],
        }
    )
    agg = df.groupby("symbol", sort=False).agg(
        total_usd=("value", "sum"),
        trades=("value", "size"),
        traders=("trader", "nunique"),
    )
    return agg.sort_values("total_usd", ascending=False, kind="stable")


def build_user_prompt(
    weekly_trades: List[Dict[str, Any]],
    weekly_flows: List[Dict[str, Any]],
) -> str:
    prompt = (
        "Here is this week's onchain data for the weekly roundup. "
        "Please create a comprehensive Telegram post.\n\n"
    )

    prompt += "## Smart Money DEX Trades This Week\n"
    if not weekly_trades:
        prompt += "No significant trades this week.\n\n"
    else:
        prompt += "### Top Tokens by Smart Money Buy Volume\n"
        buys = aggregate_token_buys(weekly_trades).head(MAX_TOKENS_LISTED)
        for symbol, row in buys.iterrows():
            prompt += (
                f"- {symbol}: {format_usd(row['total_usd'])} total buys, "
                f"{int(row['trades'])} trades by {int(row['traders'])} unique traders\n"
            )
        prompt += "\n"

        prompt += "### Biggest Individual Trades\n"
        largest = sorted(
            weekly_trades, key=lambda t: t.get("trade_value_usd") or 0, reverse=True
        )
        for trade in largest[:MAX_BIG_TRADES]:
            prompt += (
                f"- {_trader(trade)} bought {trade.get('token_bought_symbol')} "
                f"({format_usd(trade.get('trade_value_usd'))}) on {trade.get('chain')}\n"
            )
        prompt += "\n"

    prompt += "## Weekly Flow Intelligence\n"
    if not weekly_flows:
        prompt += "No flow intelligence data available for this week.\n\n"
    else:
        for fi in weekly_flows:
            flows = fi["flows"]
            prompt += f"### {fi['chain']} - {fi['symbol']} (7d)\n"
            prompt += (
                f"- Whale net flow: {format_usd(flows.get('whale_net_flow_usd'))} "
                f"({flows.get('whale_wallet_count', 0)} wallets)\n"
            )
            prompt += (
                f"- Smart Trader net flow: {format_usd(flows.get('smart_trader_net_flow_usd'))} "
                f"({flows.get('smart_trader_wallet_count', 0)} wallets)\n"
            )
            prompt += f"- Exchange net flow: {format_usd(flows.get('exchange_net_flow_usd'))}\n\n"

    prompt += (
        "\nPlease create a formatted weekly roundup Telegram post summarizing the key "
        "Smart Money activity this week."
    )
    return prompt
