"""
Runtime settings loaded from the environment.

A ``.env`` file in the working directory is honored (python-dotenv);
variables already set in the process environment win.

Environment Variables:
    MEDISAVE_PRIVATE_KEY: Signing key of the session account
    MEDISAVE_NETWORK: Network the wallet connects to (default: sepolia)
    MEDISAVE_RPC_URL: RPC override for that network
    MEDISAVE_<NETWORK>_TOKEN_CONTRACT: MediToken address on <NETWORK>
    MEDISAVE_<NETWORK>_INVOICE_CONTRACT: MediInvoice address on <NETWORK>
    MEDISAVE_LIGHTHOUSE_API_KEY: Lighthouse API key
    MEDISAVE_STORACHA_ENDPOINT: URL of a custom Storacha upload relay (not the w3up bridge)
    MEDISAVE_STORACHA_AUTH_SECRET / MEDISAVE_STORACHA_AUTHORIZATION: bridge tokens
    MEDISAVE_DATA_DIR: Directory for files.json and accounts.json (default: ~/.medisave)
    MEDISAVE_CONFIRMATION_TIMEOUT: Receipt wait in seconds (default: 120)
    MEDISAVE_LOG_LEVEL: Package log level (default: WARNING)
    MEDISAVE_COST_SAVE / MEDISAVE_COST_SAVE_AS / MEDISAVE_COST_PRINT: token prices
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from medisave.config import (
    DEFAULT_TOKEN_COSTS,
    Network,
    NetworkEnvironment,
    OperationKind,
    TokenCosts,
    get_network_environment,
)
from medisave.constants import DEFAULT_CONFIRMATION_TIMEOUT_SECONDS
from medisave.storage.types import LighthouseConfig, StorachaConfig
from medisave.utils.validation import validate_address

ENV_PREFIX = "MEDISAVE_"


def _env_key(network: Network, suffix: str) -> str:
    return f"{ENV_PREFIX}{network.value.upper().replace('-', '_')}_{suffix}"


class Settings(BaseModel):
    """
    Everything needed to wire a SaveOrchestrator.

    Example:
        ```python
        settings = Settings.from_env()
        orchestrator = await create_orchestrator(engine, presenter, templates, settings)
        ```
    """

    model_config = ConfigDict(frozen=True)

    private_key: Optional[str] = Field(default=None, repr=False)
    network: Network = Network.SEPOLIA
    rpc_url: Optional[str] = None
    contracts: Dict[Network, Dict[str, str]] = Field(default_factory=dict)
    token_costs: TokenCosts = DEFAULT_TOKEN_COSTS
    storacha: StorachaConfig = Field(default_factory=StorachaConfig)
    lighthouse: LighthouseConfig = Field(default_factory=LighthouseConfig)
    data_dir: Path = Path("~/.medisave")
    confirmation_timeout: float = Field(default=DEFAULT_CONFIRMATION_TIMEOUT_SECONDS, gt=0)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """
        Build settings from ``env`` (default: the process environment).

        Args:
            env: Variables to read instead of ``os.environ``
            dotenv: Load ``.env`` into the process environment first
        """
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        contracts: Dict[Network, Dict[str, str]] = {}
        for network in Network:
            overrides = {
                field: validate_address(env[_env_key(network, suffix)], _env_key(network, suffix))
                for field, suffix in (
                    ("token_contract", "TOKEN_CONTRACT"),
                    ("invoice_contract", "INVOICE_CONTRACT"),
                )
                if env.get(_env_key(network, suffix))
            }
            if overrides:
                contracts[network] = overrides

        costs = {
            kind.value: env[f"{ENV_PREFIX}COST_{kind.value}"]
            for kind in OperationKind
            if env.get(f"{ENV_PREFIX}COST_{kind.value}")
        }

        storacha = StorachaConfig(
            endpoint=env.get(f"{ENV_PREFIX}STORACHA_ENDPOINT") or None,
            auth_secret=env.get(f"{ENV_PREFIX}STORACHA_AUTH_SECRET") or None,
            authorization=env.get(f"{ENV_PREFIX}STORACHA_AUTHORIZATION") or None,
        )
        lighthouse = LighthouseConfig(api_key=env.get(f"{ENV_PREFIX}LIGHTHOUSE_API_KEY") or None)

        return cls(
            private_key=env.get(f"{ENV_PREFIX}PRIVATE_KEY") or None,
            network=Network(env.get(f"{ENV_PREFIX}NETWORK", Network.SEPOLIA.value)),
            rpc_url=env.get(f"{ENV_PREFIX}RPC_URL") or None,
            contracts=contracts,
            token_costs=TokenCosts.from_mapping(costs) if costs else DEFAULT_TOKEN_COSTS,
            storacha=storacha,
            lighthouse=lighthouse,
            data_dir=Path(env.get(f"{ENV_PREFIX}DATA_DIR", "~/.medisave")),
            confirmation_timeout=float(
                env.get(f"{ENV_PREFIX}CONFIRMATION_TIMEOUT", DEFAULT_CONFIRMATION_TIMEOUT_SECONDS)
            ),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "WARNING"),
        )

    @property
    def data_path(self) -> Path:
        return self.data_dir.expanduser()

    @property
    def files_path(self) -> Path:
        return self.data_path / "files.json"

    @property
    def accounts_path(self) -> Path:
        return self.data_path / "accounts.json"

    def environment(self, network: Network) -> NetworkEnvironment:
        """Deployment for ``network`` with contract and RPC overrides applied."""
        overrides = self.contracts.get(network, {})
        return get_network_environment(
            network,
            rpc_url=self.rpc_url if network is self.network else None,
            token_contract=overrides.get("token_contract"),
            invoice_contract=overrides.get("invoice_contract"),
        )

    def environments(self) -> List[NetworkEnvironment]:
        return [self.environment(network) for network in Network]

    @property
    def active_rpc_url(self) -> str:
        return self.environment(self.network).rpc_url
