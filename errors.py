"""
SeerOps - Error Types
Every script failure is one of these; cli_common turns them into a one-line
message and a non-zero exit code.
"""


class ScriptError(Exception):
    """Base class for failures a script reports to the operator."""


class ValidationError(ScriptError):
    """Bad, missing or conflicting input. Raised before any network call."""


class ExternalReadError(ScriptError):
    """A read against a contract or an HTTP API failed."""


class RateReadError(ExternalReadError):
    """The collateral exchange-rate read failed. Never replaced by a default rate."""


class PoolNotFoundError(ExternalReadError):
    """The DEX factory has no pool for the requested pair."""

    def __init__(self, token0: str, token1: str, detail: str = ""):
        self.token0 = token0
        self.token1 = token1
        msg = f"No pool exists for {token0} / {token1}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class ApiError(ExternalReadError):
    """The market API or subgraph proxy returned an error."""


class SimulationError(ScriptError):
    """A dry-run of a state-changing call reverted, so nothing was submitted."""


class TxFailedError(ScriptError):
    """A submitted transaction reverted on-chain."""

    def __init__(self, tx_hash: str, detail: str = "reverted"):
        self.tx_hash = tx_hash
        super().__init__(f"Tx {detail}: {tx_hash}")
