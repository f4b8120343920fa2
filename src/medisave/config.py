from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Network",
    "NetworkEnvironment",
    "NETWORKS",
    "get_network_environment",
    "OperationKind",
    "TokenCosts",
    "DEFAULT_TOKEN_COSTS",
]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class Network(str, Enum):
    SEPOLIA = "sepolia"
    POLYGON_AMOY = "polygon-amoy"
    BASE_SEPOLIA = "base-sepolia"


@dataclass(frozen=True)
class NetworkEnvironment:
    name: Network
    chain_id: int
    rpc_url: str
    token_contract: str
    invoice_contract: str

    @property
    def chain_id_hex(self) -> str:
        """Chain id in the 0x-prefixed form wallets report."""
        return hex(self.chain_id)


# Contract addresses are deployment specific and are supplied through
# MEDISAVE_<NETWORK>_TOKEN_CONTRACT / MEDISAVE_<NETWORK>_INVOICE_CONTRACT.
NETWORKS: Dict[Network, NetworkEnvironment] = {
    Network.SEPOLIA: NetworkEnvironment(
        name=Network.SEPOLIA,
        chain_id=11155111,
        rpc_url="https://rpc.sepolia.org",
        token_contract=ZERO_ADDRESS,
        invoice_contract=ZERO_ADDRESS,
    ),
    Network.POLYGON_AMOY: NetworkEnvironment(
        name=Network.POLYGON_AMOY,
        chain_id=80002,
        rpc_url="https://rpc-amoy.polygon.technology",
        token_contract=ZERO_ADDRESS,
        invoice_contract=ZERO_ADDRESS,
    ),
    Network.BASE_SEPOLIA: NetworkEnvironment(
        name=Network.BASE_SEPOLIA,
        chain_id=84532,
        rpc_url="https://sepolia.base.org",
        token_contract=ZERO_ADDRESS,
        invoice_contract=ZERO_ADDRESS,
    ),
}


def get_network_environment(
    network: Network,
    rpc_url: Optional[str] = None,
    token_contract: Optional[str] = None,
    invoice_contract: Optional[str] = None,
) -> NetworkEnvironment:
    env = NETWORKS[network]
    overrides = {
        key: value
        for key, value in (
            ("rpc_url", rpc_url),
            ("token_contract", token_contract),
            ("invoice_contract", invoice_contract),
        )
        if value
    }
    return replace(env, **overrides) if overrides else env


class OperationKind(str, Enum):
    SAVE = "SAVE"
    SAVE_AS = "SAVE_AS"
    PRINT = "PRINT"


class TokenCosts(BaseModel):
    """
    MediToken price of each metered operation, in whole tokens.

    Every OperationKind has a price, so ``cost_of`` cannot miss.

    Example:
        ```python
        costs = TokenCosts(SAVE=Decimal("1"), SAVE_AS=Decimal("2"), PRINT=Decimal("1"))
        costs.cost_of(OperationKind.SAVE_AS)  # Decimal("2")
        ```
    """

    model_config = ConfigDict(frozen=True)

    SAVE: Decimal = Field(default=Decimal("1"), ge=0, description="Price of saving in place")
    SAVE_AS: Decimal = Field(default=Decimal("2"), ge=0, description="Price of a first-time save")
    PRINT: Decimal = Field(default=Decimal("1"), ge=0, description="Price of printing")

    def cost_of(self, operation: OperationKind) -> Decimal:
        return getattr(self, OperationKind(operation).value)

    @classmethod
    def from_mapping(cls, costs: Mapping[str, object]) -> "TokenCosts":
        return cls(**{str(k).upper(): v for k, v in costs.items()})


DEFAULT_TOKEN_COSTS = TokenCosts()
