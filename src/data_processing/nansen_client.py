"""
nansen_client.py
----------------
Thin client for the Nansen market-intelligence API (smart-money trades,
token transfers, flow intelligence, perps and the token screener).

Every public fetcher isolates its own failure: the error is logged and an
empty result comes back, so one bad endpoint never sinks a whole digest.
The shared ``_post`` helper retries rate-limited and network-failed requests
with capped exponential backoff.

API docs: https://docs.nansen.ai
"""

from __future__ import annotations

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    wait_exponential,
)

from utils.helpers import hours_ago, utc_now

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
BASE_URL = os.getenv("NANSEN_BASE_URL", "https://api.nansen.ai/api/v1")
BETA_URL = os.getenv("NANSEN_BETA_URL", "https://api.nansen.ai/api/beta")
DEFAULT_TIMEOUT = float(os.getenv("NANSEN_TIMEOUT", "30"))

DEFAULT_CHAINS = ("ethereum", "solana", "base")

CHAIN_MAP = {
    "ethereum": "ethereum",
    "solana": "solana",
    "base": "base",
}

# Key token addresses for flow intelligence / transfer queries
KEY_TOKENS: Dict[str, List[Dict[str, str]]] = {
    "ethereum": [
        {"address": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2", "symbol": "WETH"},
        {"address": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", "symbol": "USDC"},
        {"address": "0xdac17f958d2ee523a2206206994597c13d831ec7", "symbol": "USDT"},
        {"address": "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599", "symbol": "WBTC"},
        {"address": "0x514910771af9ca656af840dff83e8264ecf986ca", "symbol": "LINK"},
    ],
    "solana": [
        {"address": "So11111111111111111111111111111111111111112", "symbol": "SOL"},
        {"address": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", "symbol": "USDC"},
        {"address": "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263", "symbol": "BONK"},
        {"address": "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm", "symbol": "WIF"},
    ],
    "base": [
        {"address": "0x4200000000000000000000000000000000000006", "symbol": "WETH"},
        {"address": "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913", "symbol": "USDC"},
        {"address": "0x940181a94A35A4569E4529A3CDfB74e38FD98631", "symbol": "AERO"},
    ],
}

STABLECOINS = frozenset(
    {"USDC", "USDT", "DAI", "BUSD", "TUSD", "FRAX", "USDP", "GUSD", "PYUSD"}
)
MAJOR_TOKENS = frozenset(
    {"WETH", "ETH", "WBTC", "BTC", "SOL", "WSOL", "LINK", "UNI", "AAVE", "MKR", "CRV"}
)


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
class NansenError(RuntimeError):
    """Raised when the Nansen API returns a non-2xx or malformed response."""


class NansenRateLimitError(NansenError):
    """HTTP 429 from the API."""


class NansenConnectionError(NansenError):
    """The request never got a response (DNS, refused, timeout …)."""


# -----------------------------------------------------------------------------
# Record normalisation (API field names -> aliases the prompts use)
# -----------------------------------------------------------------------------
def normalize_dex_trade(trade: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **trade,
        "trader_label": trade.get("trader_address_label") or trade.get("trader_label"),
    }


def _first_present(record: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return default


def normalize_perp_trade(trade: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **trade,
        "timestamp": trade.get("block_timestamp") or trade.get("timestamp"),
        "token": trade.get("token_symbol") or trade.get("token"),
        "size": _first_present(trade, "token_amount", "size", default=0),
        "trader": trade.get("trader_address_label")
        or trade.get("trader")
        or trade.get("trader_address")
        or "Unknown",
        "tx_hash": trade.get("transaction_hash") or trade.get("tx_hash"),
    }


def normalize_screener_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **item,
        "symbol": item.get("token_symbol") or item.get("symbol"),
        "price_change_percentage": _first_present(
            item, "price_change", "price_change_percentage", default=0
        ),
        "volume_usd": _first_present(item, "volume", "volume_usd", default=0),
        "net_flow_usd": _first_present(item, "netflow", "net_flow_usd", default=0),
        "liquidity_usd": _first_present(item, "liquidity", "liquidity_usd", default=0),
        "buy_volume_usd": _first_present(item, "buy_volume", "buy_volume_usd", default=0),
        "sell_volume_usd": _first_present(item, "sell_volume", "sell_volume_usd", default=0),
        "sectors": item.get("sectors") or [],
    }


def is_memecoin_trade(trade: Dict[str, Any]) -> bool:
    bought = (trade.get("token_bought_symbol") or "").upper()
    sold = (trade.get("token_sold_symbol") or "").upper()
    return (
        bought not in STABLECOINS
        and bought not in MAJOR_TOKENS
        and sold not in STABLECOINS
    )


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------
def _stop_after_client_retries(retry_state) -> bool:
    """Stop once the owning client's ``max_retries`` attempts are used up."""
    client = retry_state.args[0]
    return retry_state.attempt_number >= max(1, client.max_retries)


class NansenClient:
    """Explicitly constructed API handle; pass it to whoever needs data."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = BASE_URL,
        beta_url: str = BETA_URL,
        session: Optional[requests.Session] = None,
        max_retries: int = 3,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not api_key or "your_" in api_key:
            raise NansenError("Invalid Nansen API key")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.beta_url = beta_url.rstrip("/")
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    @retry(
        retry=retry_if_exception_type((NansenRateLimitError, NansenConnectionError)),
        stop=_stop_after_client_retries,
        wait=wait_exponential(multiplier=1, max=30),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def _post(
        self, endpoint: str, body: Dict[str, Any], use_beta: bool = False
    ) -> Dict[str, Any]:
        url = f"{self.beta_url if use_beta else self.base_url}{endpoint}"
        logger.debug("POST %s body: %s", endpoint, json.dumps(body)[:500])
        try:
            resp = self.session.post(
                url,
                json=body,
                headers={"Content-Type": "application/json", "apikey": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NansenConnectionError(f"Nansen request failed: {exc}") from exc

        if resp.status_code == 429:
            raise NansenRateLimitError(f"Rate limited on {endpoint}")
        if not resp.ok:
            raise NansenError(
                f"Nansen API error {resp.status_code} for {endpoint}: {resp.text[:300]}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise NansenError(f"Malformed JSON from {endpoint}") from exc

    def _dex_trades(self, chains: Sequence[str], min_usd: float, limit: int) -> List[Dict[str, Any]]:
        # /smart-money/dex-trades takes no date field; it returns recent trades
        response = self._post(
            "/smart-money/dex-trades",
            {
                "chains": [CHAIN_MAP[c] for c in chains],
                "filters": {"trade_value_usd": {"min": min_usd}},
                "pagination": {"page": 1, "per_page": limit},
            },
        )
        return [normalize_dex_trade(t) for t in response.get("data") or []]

    # ------------------------------------------------------------------
    # Day A: smart money flows + high conviction
    # ------------------------------------------------------------------
    def get_smart_money_dex_trades(
        self,
        chains: Sequence[str] = DEFAULT_CHAINS,
        min_usd: float = 1000,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        try:
            return self._dex_trades(chains, min_usd, limit)
        except NansenError as err:
            logger.error("get_smart_money_dex_trades error: %s", err)
            return []

    def _fetch_token_transfers(
        self, chain: str, token_address: str, min_usd: float, limit: int
    ) -> List[Dict[str, Any]]:
        response = self._post(
            "/tgm/transfers",
            {
                "chain": CHAIN_MAP[chain],
                "token_address": token_address,
                "filters": {"transfer_value_usd": {"min": min_usd}},
                "date": {
                    "from": hours_ago(24).isoformat(),
                    "to": utc_now().isoformat(),
                },
                "pagination": {"page": 1, "per_page": limit},
            },
        )
        return response.get("data") or []

    def get_high_conviction_transfers(
        self,
        chains: Sequence[str] = DEFAULT_CHAINS,
        min_usd: float = 100_000,
        limit: int = 30,
    ) -> List[Dict[str, Any]]:
        """Large transfers of the first three key tokens of each chain."""
        jobs = [
            (chain, token["address"])
            for chain in chains
            for token in KEY_TOKENS[chain][:3]
        ]
        if not jobs:
            return []

        transfers: list[dict] = []
        with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
            futures = [
                (chain, addr, pool.submit(self._fetch_token_transfers, chain, addr, min_usd, limit))
                for chain, addr in jobs
            ]
            for chain, addr, future in futures:
                try:
                    transfers.extend(future.result())
                except NansenError as err:
                    logger.error("fetch_token_transfers error (%s/%s): %s", chain, addr, err)

        transfers.sort(key=lambda t: t.get("transfer_value_usd") or 0, reverse=True)
        return transfers[:limit]

    def get_flow_intelligence(
        self, chain: str, token_address: str, timeframe: str = "1d"
    ) -> Optional[Dict[str, Any]]:
        try:
            response = self._post(
                "/tgm/flow-intelligence",
                {
                    "chain": CHAIN_MAP[chain],
                    "token_address": token_address,
                    "timeframe": timeframe,
                },
            )
        except NansenError as err:
            logger.error("get_flow_intelligence error: %s", err)
            return None
        data = response.get("data") or []
        return data[0] if data else None

    def _flows_for_tokens(
        self, chains: Sequence[str], per_chain: int, timeframe: str
    ) -> List[Dict[str, Any]]:
        results: list[dict] = []
        for chain in chains:
            for token in KEY_TOKENS[chain][:per_chain]:
                flows = self.get_flow_intelligence(chain, token["address"], timeframe)
                if flows:
                    results.append({"chain": chain, "symbol": token["symbol"], "flows": flows})
        return results

    def get_multi_token_flow_intelligence(
        self, chains: Sequence[str] = DEFAULT_CHAINS
    ) -> List[Dict[str, Any]]:
        return self._flows_for_tokens(chains, per_chain=2, timeframe="1d")

    # ------------------------------------------------------------------
    # Day B: memecoin flows + perps
    # ------------------------------------------------------------------
    def get_memecoin_dex_trades(
        self,
        chains: Sequence[str] = DEFAULT_CHAINS,
        min_usd: float = 500,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        try:
            trades = self._dex_trades(chains, min_usd, limit)
        except NansenError as err:
            logger.error("get_memecoin_dex_trades error: %s", err)
            return []
        return [t for t in trades if is_memecoin_trade(t)]

    def get_smart_money_perp_trades(self, limit: int = 25) -> List[Dict[str, Any]]:
        try:
            response = self._post(
                "/smart-money/perp-trades",
                {
                    "pagination": {"page": 1, "per_page": limit},
                    "order_by": [{"field": "value_usd", "direction": "DESC"}],
                },
            )
        except NansenError as err:
            logger.error("get_smart_money_perp_trades error: %s", err)
            return []
        return [normalize_perp_trade(t) for t in response.get("data") or []]

    def get_token_screener(
        self,
        chains: Sequence[str] = DEFAULT_CHAINS,
        timeframe: str = "24h",
        min_volume: float = 100_000,
        min_liquidity: float = 50_000,
        only_smart_money: bool = False,
        limit: int = 25,
    ) -> List[Dict[str, Any]]:
        filters: Dict[str, Any] = {
            "volume": {"min": min_volume},
            "liquidity": {"min": min_liquidity},
        }
        if only_smart_money:
            filters["only_smart_money"] = True
        try:
            response = self._post(
                "/token-screener",
                {
                    "chains": list(chains),
                    "timeframe": timeframe,
                    "filters": filters,
                    "pagination": {"page": 1, "per_page": limit},
                    "order_by": [{"field": "netflow", "direction": "DESC"}],
                },
            )
        except NansenError as err:
            logger.error("get_token_screener error: %s", err)
            return []
        return [normalize_screener_item(i) for i in response.get("data") or []]

    # ------------------------------------------------------------------
    # Day C: weekly roundup
    # ------------------------------------------------------------------
    def get_weekly_dex_trades(
        self,
        chains: Sequence[str] = DEFAULT_CHAINS,
        min_usd: float = 5000,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        try:
            return self._dex_trades(chains, min_usd, limit)
        except NansenError as err:
            logger.error("get_weekly_dex_trades error: %s", err)
            return []

    def get_weekly_flow_intelligence(
        self, chains: Sequence[str] = DEFAULT_CHAINS
    ) -> List[Dict[str, Any]]:
        return self._flows_for_tokens(chains, per_chain=3, timeframe="7d")
