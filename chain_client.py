"""
SeerOps - Chain Client
Web3 connection, simulate-then-submit transactions, balances and approvals for
one chain. Every state-changing call is dry-run with eth_call first; a revert
there aborts before anything is signed.
"""

from __future__ import annotations

from decimal import Decimal

from eth_account import Account
from web3 import Web3
from web3.exceptions import Web3Exception

import config
from chains import ChainConfig
from errors import ExternalReadError, SimulationError, TxFailedError, ValidationError
from seer_abi import ERC20_ABI

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def connect(chain: ChainConfig, rpc_url: str = None) -> Web3:
    """Connect to the override RPC if given, falling back to the chain's default."""
    rpcs = [url for url in (rpc_url, chain.rpc_url) if url]
    for rpc in rpcs:
        w3 = Web3(Web3.HTTPProvider(rpc, request_kwargs={"timeout": config.RPC_TIMEOUT}))
        try:
            if w3.is_connected():
                return w3
        except (Web3Exception, OSError, ValueError) as e:
            print(f"[RPC] {chain.name}: {rpc} unreachable ({e})")
            continue
        print(f"[RPC] {chain.name}: {rpc} not responding")
    raise ExternalReadError(f"Could not connect to any {chain.name} RPC ({', '.join(rpcs)})")


def to_raw(amount, decimals: int = 18) -> int:
    """Human amount (str, float or Decimal) to integer base units."""
    try:
        value = Decimal(str(amount))
    except ArithmeticError as e:
        raise ValidationError(f"Invalid amount: {amount}") from e
    if not value.is_finite() or value < 0:
        raise ValidationError(f"Invalid amount: {amount}")
    return int(value.scaleb(decimals))


def from_raw(raw: int, decimals: int = 18) -> Decimal:
    return Decimal(int(raw)).scaleb(-decimals)


def fmt_amount(raw: int, decimals: int = 18) -> str:
    """Base units to a plain decimal string, trailing zeros trimmed."""
    text = format(from_raw(raw, decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def tx_hash_hex(tx_hash) -> str:
    return tx_hash if isinstance(tx_hash, str) else Web3.to_hex(tx_hash)


class ChainClient:
    """Web3 handle plus optional signing account for a single chain.

    Reads work without a key. Anything that signs asks for `address`, which
    raises a ValidationError when PRIVATE_KEY is not configured.
    """

    def __init__(self, chain: ChainConfig, private_key: str = None, rpc_url: str = None, w3: Web3 = None):
        self.chain = chain
        self.w3 = w3 or connect(chain, rpc_url)
        self._private_key = private_key if private_key is not None else config.PRIVATE_KEY
        self.account = Account.from_key(self._private_key) if self._private_key else None

    @property
    def address(self) -> str:
        if self.account is None:
            raise ValidationError("PRIVATE_KEY env var required")
        return self.account.address

    def contract(self, address: str, abi: list):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    # ─── Reads ───

    def native_balance(self, address: str = None) -> int:
        return self.w3.eth.get_balance(Web3.to_checksum_address(address or self.address))

    def token_balance(self, token: str, address: str = None) -> int:
        erc20 = self.contract(token, ERC20_ABI)
        return erc20.functions.balanceOf(Web3.to_checksum_address(address or self.address)).call()

    def allowance(self, token: str, spender: str) -> int:
        erc20 = self.contract(token, ERC20_ABI)
        return erc20.functions.allowance(self.address, Web3.to_checksum_address(spender)).call()

    # ─── Transactions ───

    def simulate(self, tx_func, value: int = 0, label: str = "call"):
        """eth_call the function from our address. Returns the decoded result."""
        try:
            return tx_func.call({"from": self.address, "value": value})
        except (Web3Exception, ValueError) as e:
            raise SimulationError(f"{label} simulation reverted: {e}") from e

    def send_tx(self, tx_func, value: int = 0, gas: int = None, label: str = "tx") -> dict:
        """Build, sign and send a transaction. Returns the receipt or raises."""
        addr = self.address
        priority_fee = self.w3.eth.max_priority_fee
        tx = tx_func.build_transaction({
            "from": addr,
            "nonce": self.w3.eth.get_transaction_count(addr, "pending"),
            "gas": gas or config.DEFAULT_GAS_LIMIT,
            "maxFeePerGas": self.w3.eth.gas_price * 2 + priority_fee,
            "maxPriorityFeePerGas": priority_fee,
            "chainId": self.chain.chain_id,
            "value": value,
        })
        if gas is None:
            try:
                estimated = self.w3.eth.estimate_gas(tx)
                tx["gas"] = int(estimated * config.GAS_ESTIMATE_MULTIPLIER)
            except (Web3Exception, ValueError) as e:
                print(f"[TX] Warning: gas estimate failed for {label} ({e}), using {tx['gas']}")

        signed = self.w3.eth.account.sign_transaction(tx, self._private_key)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        print(f"[TX] {label} sent: {tx_hash_hex(tx_hash)}")
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=config.TX_RECEIPT_TIMEOUT)
        if receipt["status"] != 1:
            raise TxFailedError(tx_hash_hex(tx_hash))
        print(f"[TX] {label} confirmed in block {receipt['blockNumber']}")
        return receipt

    def transact(self, tx_func, value: int = 0, gas: int = None, label: str = "tx") -> tuple:
        """Simulate, then submit. Returns (simulated result, receipt)."""
        result = self.simulate(tx_func, value=value, label=label)
        receipt = self.send_tx(tx_func, value=value, gas=gas, label=label)
        return result, receipt

    def approve(self, token: str, spender: str, amount: int, label: str = "approve") -> dict | None:
        """Approve `amount` to spender unless the current allowance already covers it."""
        current = self.allowance(token, spender)
        if current >= amount:
            return None
        erc20 = self.contract(token, ERC20_ABI)
        tx_func = erc20.functions.approve(Web3.to_checksum_address(spender), amount)
        _, receipt = self.transact(tx_func, label=label)
        return receipt
