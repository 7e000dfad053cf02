"""
memecoin_digest.py
------------------
Day B post: smart-money flows into small caps / memecoins plus Hyperliquid
perp positioning. The model is asked for a fixed Telegram-HTML layout, so the
user prompt hands it pre-aggregated tables.
"""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from utils.helpers import format_usd

MAX_TOKENS_LISTED = 15
MAX_PERP_TOKENS = 10
MAX_PERP_TRADES = 15
UNKNOWN_SYMBOL = "UNKNOWN"

# Stablecoins and major L1s; we want small/mid caps and memecoins
EXCLUDED_SYMBOLS = frozenset(
    {
        "BTC", "WBTC", "BTCB", "TBTC",
        "ETH", "WETH", "STETH", "RETH", "CBETH", "WSTETH", "METH", "EETH", "WEETH",
        "SOL", "WSOL", "MSOL", "JITOSOL", "BSOL", "DZSOL",
        "USDC", "USDT", "DAI", "BUSD", "TUSD", "FRAX", "USDP", "GUSD", "PYUSD",
        "USDS", "USDE", "FDUSD", "CRVUSD", "GHO",
        "BNB", "WBNB",
    }
)

SYSTEM_PROMPT = """
You are a marketing content creator for web platforms specializing in crypto/DeFi market analysis. Your ONLY job is to output HTML formatted text for Telegram.

TASK: Analyze smart money memecoin and small-cap token flows plus Hyperliquid perpetual positioning in the past 24 hours.

You will be given pre-fetched data including:
- Smart money DEX trades on small/mid-cap tokens (stablecoins and majors already filtered out)
- Token screener data with market caps, volumes, and net flows
- Hyperliquid smart money perpetual trades sorted by position size

From this data, extract:
1. TOP 5 tokens by smart money flow volume (use whatever tokens appear in the data; these are the LATEST flows, not a fixed list of memecoins)
2. TOP 5 Hyperliquid perpetual positions sorted by HIGHEST total position size

OUTPUT FORMAT (COPY EXACTLY):
Return ONLY this exact HTML as a plain text string:

📈 <b>Daily Onchain Digest</b>

<b>🤓 Smart Money Memecoin Flows</b>
• <b>[TOKEN1]</b> (CHAIN): +$[AMOUNT] | MC: $[MCAP] | Vol: $[VOLUME]
• <b>[TOKEN2]</b> (CHAIN): +$[AMOUNT] | MC: $[MCAP] | Vol: $[VOLUME]
• <b>[TOKEN3]</b> (CHAIN): +$[AMOUNT] | MC: $[MCAP] | Vol: $[VOLUME]
• <b>[TOKEN4]</b> (CHAIN): +$[AMOUNT] | MC: $[MCAP] | Vol: $[VOLUME]
• <b>[TOKEN5]</b> (CHAIN): +$[AMOUNT] | MC: $[MCAP] | Vol: $[VOLUME]

<b>📊 Hyperliquid DEX Perps Positioning</b>
• [TOKEN1]: [X]% long | $[AMOUNT] position
• [TOKEN2]: [X]% long | $[AMOUNT] position
• [TOKEN3]: [X]% long | $[AMOUNT] position
• [TOKEN4]: [X]% long | $[AMOUNT] position
• [TOKEN5]: [X]% long | $[AMOUNT] position

CRITICAL OUTPUT RULES:
- Return as plain text string, NOT as JSON object
- Output the raw HTML string directly
- Use • for bullet points (NOT - or *)
- Replace [brackets] with actual data from the provided dataset
- CHAIN FORMAT: Use (ETH), (SOL), (BSC), (BASE), uppercase in parentheses
- MONEY FORMAT: $999, $15.7K, $1.5M, $1.2B
- Use <b> tags for token symbols in Smart Money Memecoin Flows section
- Hyperliquid section MUST be sorted by position size (descending)
- Ensure all HTML tags are properly closed
- NO additional text before or after the HTML
- Use the ACTUAL tokens from the data; do NOT substitute well-known memecoins
- If fewer than 5 entries exist, show however many are available (minimum 3)
- NEVER fabricate data; only use values from the provided dataset
""".strip()


def is_excluded(symbol: str | None) -> bool:
    """True for stablecoins, majors and their wrapped / liquid-staking variants."""
    if not symbol:
        return True
    upper = symbol.upper()
    if upper in EXCLUDED_SYMBOLS:
        return True
    if upper.startswith("W") and upper[1:] in EXCLUDED_SYMBOLS:
        return True
    if len(upper) > 3 and (upper.endswith("ETH") or upper.endswith("SOL")):
        return True
    return False


def _chain_tag(chain: str | None) -> str:
    return (chain or "").upper().replace("ETHEREUM", "ETH").replace("SOLANA", "SOL")


def aggregate_token_flows(trades: List[Dict[str, Any]]) -> pd.DataFrame:
    """Total USD and trade count per bought token, largest first."""
    rows = [
        {
            "symbol": t.get("token_bought_symbol") or UNKNOWN_SYMBOL,
            "chain": t.get("chain"),
            "value": float(t.get("trade_value_usd") or 0),
        }
        for t in trades
    ]
    if not rows:
        return pd.DataFrame(columns=["total_usd", "chain", "trades"])
    df = pd.DataFrame(rows)
    agg = df.groupby("symbol", sort=False).agg(
        total_usd=("value", "sum"),
        chain=("chain", "first"),
        trades=("value", "size"),
    )
    return agg.sort_values("total_usd", ascending=False, kind="stable")


def aggregate_perp_positions(perp_trades: List[Dict[str, Any]]) -> pd.DataFrame:
    """Long / short / total USD per perp token, largest total first."""
    rows = []
    for t in perp_trades:
        value = float(t.get("value_usd") or 0)
        is_long = str(t.get("side") or "").lower() == "long"
        rows.append(
            {
                "token": t.get("token") or UNKNOWN_SYMBOL,
                "longs": value if is_long else 0.0,
                "shorts": 0.0 if is_long else value,
                "total": value,
            }
        )
    if not rows:
        return pd.DataFrame(columns=["longs", "shorts", "total"])
    agg = pd.DataFrame(rows).groupby("token", sort=False)[["longs", "shorts", "total"]].sum()
    return agg.sort_values("total", ascending=False, kind="stable")


def build_user_prompt(
    memecoin_trades: List[Dict[str, Any]],
    perp_trades: List[Dict[str, Any]],
    screener_data: List[Dict[str, Any]],
) -> str:
    prompt = (
        "Analyze the past 24 hours and generate a smart money small-cap/memecoin "
        "& Hyperliquid positioning digest.\n\nHere is the pre-fetched data:\n\n"
    )

    prompt += "## Token Screener Data (Smart Money Small-Cap/Memecoin Flows)\n"
    screener = [t for t in screener_data if not is_excluded(t.get("symbol"))]
    if screener:
        for token in screener:
            prompt += (
                f"- {token['symbol']} ({_chain_tag(token.get('chain'))}): "
                f"Net Flow {format_usd(token.get('net_flow_usd'))}, "
                f"MC: {format_usd(token.get('market_cap_usd'))}, "
                f"Vol: {format_usd(token.get('volume_usd'))}, "
                f"Price: {float(token.get('price_change_percentage') or 0):.1f}%"
            )
            if token.get("sectors"):
                prompt += f", Sectors: {', '.join(token['sectors'])}"
            prompt += "\n"
    else:
        prompt += "No screener data available; use DEX trades below instead.\n"
    prompt += "\n"

    prompt += "## Smart Money DEX Trades - Small-Cap/Memecoin (Last 24h)\n"
    trades = [t for t in memecoin_trades if not is_excluded(t.get("token_bought_symbol"))]
    if trades:
        flows = aggregate_token_flows(trades).head(MAX_TOKENS_LISTED)
        for symbol, row in flows.iterrows():
            prompt += (
                f"- {symbol} ({row['chain']}): {format_usd(row['total_usd'])} total, "
                f"{int(row['trades'])} trades\n"
            )
    else:
        prompt += "No DEX trades detected; use screener data above for memecoin flow entries.\n"
    prompt += "\n"

    prompt += "## Hyperliquid Smart Money Perp Trades (sorted by position size, largest first)\n"
    if perp_trades:
        positions = aggregate_perp_positions(perp_trades).head(MAX_PERP_TOKENS)
        for token, row in positions.iterrows():
            both = row["longs"] + row["shorts"]
            long_pct = row["longs"] / both * 100 if both > 0 else 0
            prompt += (
                f"- {token}: {long_pct:.0f}% long, "
                f"Total Position: {format_usd(row['total'])}, "
                f"Longs: {format_usd(row['longs'])}, Shorts: {format_usd(row['shorts'])}\n"
            )

        prompt += "\nIndividual trades (largest first):\n"
        largest = sorted(perp_trades, key=lambda t: t.get("value_usd") or 0, reverse=True)
        for trade in largest[:MAX_PERP_TRADES]:
            prompt += (
                f"- {trade.get('trader')} {trade.get('action')} {trade.get('side')} "
                f"{trade.get('token')}: {format_usd(trade.get('value_usd'))} "
                f"at {format_usd(trade.get('price_usd'))}\n"
            )
    else:
        prompt += "No Hyperliquid perp trades detected.\n"
    prompt += "\n"

    prompt += (
        "IMPORTANT: Use the ACTUAL tokens from the data above. Do NOT substitute with "
        "well-known tokens that are not in the data. Sort Hyperliquid perps by LARGEST "
        "position size first.\n"
        "1. Top 5 tokens by smart money net flows - include MC and 24h volume\n"
        "2. Top 5 Hyperliquid perpetual positions sorted by HIGHEST total position size\n"
        "Format as Telegram HTML digest."
    )
    return prompt
