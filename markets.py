"""
SeerOps - Market Reads
Reads a Seer market through the MarketView contract and decodes the nested
struct into plain dicts keyed by field name (bytes as 0x-hex, ints kept).
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

from web3 import Web3

from errors import ExternalReadError
from seer_abi import MARKET_COMPONENTS, MARKET_VIEW_ABI

# Reality.eth reserved answers
INVALID_ANSWER = "0x" + "ff" * 32
ANSWERED_TOO_SOON = "0x" + "ff" * 31 + "fe"


def _decode(value, component: dict):
    typ = component["type"]
    if typ == "tuple":
        return {c["name"]: _decode(v, c) for c, v in zip(component["components"], value)}
    if typ == "tuple[]":
        inner = {"type": "tuple", "components": component["components"]}
        return [_decode(v, inner) for v in value]
    if typ.startswith("bytes"):
        if typ.endswith("[]"):
            return [Web3.to_hex(v) for v in value]
        return Web3.to_hex(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def decode_market(raw) -> dict:
    return _decode(raw, {"type": "tuple", "components": MARKET_COMPONENTS})


def read_market(client, market: str) -> dict:
    """Decoded getMarket(factory, market) for the client's chain."""
    contracts = client.chain.contracts
    view = client.contract(contracts["MARKET_VIEW"], MARKET_VIEW_ABI)
    try:
        raw = view.functions.getMarket(
            Web3.to_checksum_address(contracts["MARKET_FACTORY"]), Web3.to_checksum_address(market)
        ).call()
    except Exception as e:
        raise ExternalReadError(f"Could not read market {market} on {client.chain.name}: {e}") from e
    return decode_market(raw)


def market_status(info: dict, now: int = None) -> str:
    now = int(time.time()) if now is None else now
    questions = info.get("questions") or []
    question = questions[0] if questions else {}
    opening_ts = question.get("opening_ts") or 0
    finalize_ts = question.get("finalize_ts") or 0

    if info.get("payoutReported"):
        return "resolved"
    if 0 < finalize_ts <= now:
        return "finalized, awaiting resolve"
    if opening_ts > now:
        return "not yet open"
    return "active"


def opening_date(info: dict) -> str | None:
    questions = info.get("questions") or []
    opening_ts = questions[0].get("opening_ts") if questions else 0
    if not opening_ts:
        return None
    return datetime.fromtimestamp(opening_ts, tz=timezone.utc).strftime("%Y-%m-%d")


def payout_summary(info: dict) -> str:
    outcomes = info.get("outcomes") or []
    return ", ".join(
        f"{outcomes[i] if i < len(outcomes) else i}={n}" for i, n in enumerate(info.get("payoutNumerators") or [])
    )


def outcome_index(info: dict, token: str) -> int | None:
    token = token.lower()
    for idx, wrapped in enumerate(info.get("wrappedTokens") or []):
        if wrapped.lower() == token:
            return idx
    return None
