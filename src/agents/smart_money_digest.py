"""
smart_money_digest.py
---------------------
Day A post: smart-money DEX trades, high-conviction transfers and flow
intelligence for a handful of key tokens.
"""
from __future__ import annotations

from typing import Any, Dict, List

from utils.helpers import format_timestamp, format_usd, truncate_address

MAX_TRADES = 30
MAX_TRANSFERS = 20

SYSTEM_PROMPT = """
You are a professional crypto analyst writing concise, data-driven Telegram posts for the Nansen community channel.

Your task is to analyze Smart Money flows and High Conviction onchain movements, then produce a well-formatted Telegram post.

Guidelines:
- Use plain text formatting (no HTML tags). Use emoji sparingly for visual structure.
- Keep the post between 1500-3000 characters
- Focus on the most significant and interesting movements
- Highlight notable wallet labels, large trades, and unusual patterns
- Group findings by theme (e.g., accumulation signals, rotation patterns, notable exits)
- End with a brief takeaway or sentiment summary
- Be factual and data-driven, avoid speculation
""".strip()


def _flow_block(fi: Dict[str, Any], *, fresh_wallets: bool = True) -> str:
    flows = fi["flows"]
    block = f"### {fi['chain']} - {fi['symbol']}\n"
    block += (
        f"- Whale net flow: {format_usd(flows.get('whale_net_flow_usd'))} "
        f"({flows.get('whale_wallet_count', 0)} wallets)\n"
    )
    block += (
        f"- Smart Trader net flow: {format_usd(flows.get('smart_trader_net_flow_usd'))} "
        f"({flows.get('smart_trader_wallet_count', 0)} wallets)\n"
    )
    block += (
        f"- Exchange net flow: {format_usd(flows.get('exchange_net_flow_usd'))} "
        f"({flows.get('exchange_wallet_count', 0)} wallets)\n"
    )
    if fresh_wallets:
        block += (
            f"- Fresh Wallets net flow: {format_usd(flows.get('fresh_wallets_net_flow_usd'))} "
            f"({flows.get('fresh_wallets_wallet_count', 0)} wallets)\n"
        )
    return block + "\n"


def build_user_prompt(
    dex_trades: List[Dict[str, Any]],
    transfers: List[Dict[str, Any]],
    flow_intelligence: List[Dict[str, Any]],
) -> str:
    prompt = "Here is today's onchain data. Please analyze and create a Telegram post.\n\n"

    prompt += "## Smart Money DEX Trades (Last 24h)\n"
    if not dex_trades:
        prompt += "No significant smart money DEX trades detected.\n\n"
    else:
        for trade in dex_trades[:MAX_TRADES]:
            label = trade.get("trader_label") or truncate_address(trade.get("trader_address"))
            sm_label = f" [{trade['smart_money_label']}]" if trade.get("smart_money_label") else ""
            prompt += (
                f"- {label}{sm_label} bought {trade.get('token_bought_symbol')} "
                f"with {trade.get('token_sold_symbol')} "
                f"({format_usd(trade.get('trade_value_usd'))}) on {trade.get('chain')} "
                f"via {trade.get('dex_name') or 'DEX'} "
                f"at {format_timestamp(trade.get('block_timestamp'))}\n"
            )
        prompt += "\n"

    prompt += "## High Conviction Transfers\n"
    if not transfers:
        prompt += "No high-value transfers detected.\n\n"
    else:
        for t in transfers[:MAX_TRANSFERS]:
            src = t.get("from_address_label") or truncate_address(t.get("from_address"))
            dst = t.get("to_address_label") or truncate_address(t.get("to_address"))
            prompt += (
                f"- {src} -> {dst}: {format_usd(t.get('transfer_value_usd'))} "
                f"{t.get('token_symbol')} on {t.get('chain')} "
                f"at {format_timestamp(t.get('block_timestamp'))}\n"
            )
        prompt += "\n"

    prompt += "## Flow Intelligence Summary\n"
    if not flow_intelligence:
        prompt += "No flow intelligence data available.\n\n"
    else:
        for fi in flow_intelligence:
            prompt += _flow_block(fi)

    prompt += (
        "\nPlease create a formatted Telegram post summarizing the key Smart Money "
        "flows and High Conviction movements for today."
    )
    return prompt
