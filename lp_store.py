"""
SeerOps - LP Position Tracker
JSON file of LP positions minted by add_liquidity.py:

    {"positions": [{"tokenId": "123", "chain": "gnosis", ..., "withdrawnAt": null}]}

A position is active while withdrawnAt is null. Records are only appended;
the one mutation is stamping withdrawnAt once.

Writes are plain read-modify-write. Two scripts writing at the same moment can
lose an update; the tracker is meant for one operator running scripts in turn.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone

import config


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_lp_record(token_id, chain: str, dex_type: str, pool_address: str, token0: str, token1: str,
                  prob_low: float, prob_high: float, market: str = None, market_name: str = None,
                  outcome_name: str = None) -> dict:
    return {
        "tokenId": str(token_id),
        "chain": chain,
        "dexType": dex_type,
        "poolAddress": pool_address,
        "token0": token0,
        "token1": token1,
        "probLow": prob_low,
        "probHigh": prob_high,
        "market": market,
        "marketName": market_name,
        "outcomeName": outcome_name,
        "createdAt": utc_now_iso(),
        "withdrawnAt": None,
    }


def is_active(record: dict) -> bool:
    return record.get("withdrawnAt") is None


class LpStore:
    def __init__(self, path: str = None):
        self.path = path or config.LP_TRACKER_FILE

    def load(self) -> dict:
        """Tracker contents. A missing file is an empty tracker; a corrupt one raises."""
        if not os.path.exists(self.path):
            return {"positions": []}
        with open(self.path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict) or not isinstance(data.setdefault("positions", []), list):
            raise ValueError(f"{self.path}: expected a JSON object with a 'positions' list")
        return data

    def save(self, data: dict):
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)
            f.write("\n")

    def positions(self, chain: str = None, include_withdrawn: bool = False) -> list:
        positions = self.load()["positions"]
        if chain:
            positions = [p for p in positions if p.get("chain") == chain]
        if not include_withdrawn:
            positions = [p for p in positions if is_active(p)]
        return positions

    def append(self, record: dict) -> dict:
        data = self.load()
        data["positions"].append(record)
        self.save(data)
        return data

    def mark_field(self, token_id, chain: str, field: str, value) -> bool:
        """Set a field on the active record for (token_id, chain). False if none matches."""
        data = self.load()
        for record in data["positions"]:
            if record.get("tokenId") == str(token_id) and record.get("chain") == chain and is_active(record):
                record[field] = value
                self.save(data)
                return True
        return False

    def mark_withdrawn(self, token_id, chain: str) -> bool:
        return self.mark_field(token_id, chain, "withdrawnAt", utc_now_iso())
