"""
SeerOps - Seer API Client
Read-only calls to the Seer app's public functions and its subgraph proxy.
No key needed.
"""

from __future__ import annotations

import requests

import config
from errors import ApiError

SORT_FIELDS = {
    "liquidity": "liquidityUSD",
    "date": "creationDate",
    "opening": "openingTs",
}


class SeerAPI:
    def __init__(self, base_url: str = None, subgraph_url: str = None, timeout: int = None):
        self.base_url = (base_url or config.SEER_API_URL).rstrip("/")
        self.subgraph_url = subgraph_url or config.SUBGRAPH_PROXY_URL
        self.timeout = timeout or config.API_TIMEOUT

    def _request(self, method: str, path: str, what: str, **kwargs):
        url = f"{self.base_url}/{path}"
        try:
            resp = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"{what}: request failed ({e})") from e
        if not resp.ok:
            body = resp.text.strip()[:300]
            raise ApiError(f"{what}: API error {resp.status_code} {resp.reason}" + (f" - {body}" if body else ""))
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(f"{what}: response is not JSON") from e

    # ─── Markets ───

    def search_markets(self, body: dict) -> dict:
        """POST markets-search. Returns {"markets": [...], "count": n, "pages": n}."""
        data = self._request("POST", "markets-search", "Market search", json=body)
        if not isinstance(data, dict):
            raise ApiError("Market search: unexpected response shape")
        data.setdefault("markets", [])
        return data

    def get_market(self, market: str, chain_id) -> dict | None:
        body = {"marketIds": [market.lower()], "chainsList": [str(chain_id)], "limit": 1}
        markets = self.search_markets(body)["markets"]
        return markets[0] if markets else None

    # ─── Portfolio / airdrop ───

    def get_portfolio(self, account: str, chain_id) -> list:
        data = self._request(
            "GET", "get-portfolio", f"Portfolio for chain {chain_id}",
            params={"account": account, "chainId": str(chain_id)},
        )
        if not isinstance(data, list):
            raise ApiError(f"Portfolio for chain {chain_id}: unexpected response shape")
        return data

    def get_airdrop_data(self, address: str) -> dict:
        return self._request("POST", "get-airdrop-data-by-user", "Airdrop data", json={"address": address})

    # ─── Subgraph proxy ───

    def query_subgraph(self, subgraph: str, chain_id, query: str, variables: dict = None) -> dict:
        params = {"_subgraph": subgraph, "_chainId": str(chain_id)}
        try:
            resp = requests.post(
                self.subgraph_url,
                params=params,
                json={"query": query, "variables": variables or {}},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiError(f"{subgraph} subgraph: request failed ({e})") from e
        if not resp.ok:
            raise ApiError(f"{subgraph} subgraph error: {resp.status_code} {resp.reason}")
        try:
            payload = resp.json()
        except ValueError as e:
            raise ApiError(f"{subgraph} subgraph: response is not JSON") from e
        if payload.get("errors"):
            raise ApiError(f"{subgraph} subgraph query error: {payload['errors']}")
        return payload.get("data") or {}


def outcome_name_for_token(market: dict, token: str) -> str | None:
    """Outcome label whose wrapped token is `token`, from a markets-search record."""
    token = token.lower()
    outcomes = market.get("outcomes") or []
    for idx, wrapped in enumerate(market.get("wrappedTokens") or []):
        if wrapped.lower() == token and idx < len(outcomes):
            return outcomes[idx]
    return None
