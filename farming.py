"""
SeerOps - Eternal Farming
Incentive discovery for Algebra eternal farming through the Seer subgraph
proxy, and the incentive key the FarmingCenter expects.
"""

from __future__ import annotations

import time

from web3 import Web3

from errors import ValidationError
from seer_api import SeerAPI

FARMING_SUBGRAPH = "algebrafarming"
FARMING_CHAIN_ID = 100
SECONDS_PER_DAY = 86400

_INCENTIVES_QUERY = """
query ($pool: String!) {
  eternalFarmings(where: { pool: $pool }, first: 100) {
    id pool rewardToken bonusRewardToken reward rewardRate startTime endTime
  }
}
"""

_LATEST_INCENTIVES_QUERY = """
query ($pool: String!) {
  eternalFarmings(where: { pool: $pool }, first: 10, orderBy: startTime, orderDirection: desc) {
    id pool rewardToken bonusRewardToken reward rewardRate startTime endTime
  }
}
"""

_DEPOSIT_QUERY = """
query ($id: ID!) {
  deposit(id: $id) {
    id owner pool limitFarming eternalFarming onFarmingCenter
  }
}
"""


def require_farming(chain):
    if chain.farming is None:
        raise ValidationError(f'Farming is only available on gnosis. Chain "{chain.name}" does not support farming.')
    return chain.farming


def effective_end_time(incentive: dict) -> int:
    """min(endTime, startTime + reward // rewardRate). Zero rate never runs."""
    rate = int(incentive["rewardRate"])
    if rate == 0:
        return 0
    funded_until = int(incentive["startTime"]) + int(incentive["reward"]) // rate
    return min(int(incentive["endTime"]), funded_until)


def is_active(incentive: dict, now: int = None) -> bool:
    now = int(time.time()) if now is None else now
    return int(incentive["rewardRate"]) > 0 and effective_end_time(incentive) > now


def reward_per_day(incentive: dict, decimals: int = 18) -> float:
    return int(incentive["rewardRate"]) * SECONDS_PER_DAY / 10 ** decimals


def _query(api: SeerAPI, query: str, variables: dict) -> dict:
    return api.query_subgraph(FARMING_SUBGRAPH, FARMING_CHAIN_ID, query, variables)


def get_active_incentives(api: SeerAPI, pool: str, now: int = None) -> list:
    data = _query(api, _INCENTIVES_QUERY, {"pool": pool.lower()})
    return [f for f in data.get("eternalFarmings") or [] if is_active(f, now)]


def latest_incentive(api: SeerAPI, pool: str) -> dict | None:
    """Most recently started incentive for the pool, ended or not."""
    data = _query(api, _LATEST_INCENTIVES_QUERY, {"pool": pool.lower()})
    farmings = data.get("eternalFarmings") or []
    return farmings[0] if farmings else None


def get_deposit_info(api: SeerAPI, token_id) -> dict | None:
    data = _query(api, _DEPOSIT_QUERY, {"id": str(token_id)})
    return data.get("deposit")


def build_incentive_key(incentive: dict) -> tuple:
    """(rewardToken, bonusRewardToken, pool, startTime, endTime)"""
    return (
        Web3.to_checksum_address(incentive["rewardToken"]),
        Web3.to_checksum_address(incentive["bonusRewardToken"]),
        Web3.to_checksum_address(incentive["pool"]),
        int(incentive["startTime"]),
        int(incentive["endTime"]),
    )
