"""
Network resolution.

Maps the chain id the wallet reports to a configured NetworkEnvironment.
Lookups are never cached: the wallet can switch networks at any moment,
including in the middle of a workflow, so callers resolve again before
every contract interaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Optional, Union

from medisave.config import NETWORKS, NetworkEnvironment
from medisave.errors import UnsupportedNetworkError

if TYPE_CHECKING:
    from medisave.wallet import WalletSession


def normalize_chain_id(chain_id: Union[int, str]) -> Optional[int]:
    """
    Convert an int, decimal string or 0x-hex string chain id to int.

    Returns:
        The chain id, or None when it cannot be parsed
    """
    if isinstance(chain_id, bool):
        return None
    if isinstance(chain_id, int):
        return chain_id
    if isinstance(chain_id, str):
        text = chain_id.strip().lower()
        try:
            return int(text, 16) if text.startswith("0x") else int(text)
        except ValueError:
            return None
    return None


class NetworkResolver:
    """
    Resolve the active chain id to its contract deployment.

    Example:
        >>> resolver = NetworkResolver()
        >>> env = resolver.resolve_environment("0xaa36a7")
        >>> env.name
        <Network.SEPOLIA: 'sepolia'>
    """

    def __init__(
        self,
        environments: Optional[Iterable[NetworkEnvironment]] = None,
        wallet: "Optional[WalletSession]" = None,
    ) -> None:
        envs = list(environments) if environments is not None else list(NETWORKS.values())
        self._by_chain_id: Dict[int, NetworkEnvironment] = {env.chain_id: env for env in envs}
        self._wallet = wallet

    @property
    def environments(self) -> list:
        return list(self._by_chain_id.values())

    def resolve_environment(self, active_chain_id: Union[int, str]) -> NetworkEnvironment:
        """
        Find the environment deployed on ``active_chain_id``.

        Raises:
            UnsupportedNetworkError: If no configured environment matches
        """
        chain_id = normalize_chain_id(active_chain_id)
        env = self._by_chain_id.get(chain_id) if chain_id is not None else None
        if env is None:
            raise UnsupportedNetworkError(active_chain_id)
        return env

    async def resolve_active(self) -> NetworkEnvironment:
        """Read the wallet's current chain id and resolve it."""
        if self._wallet is None:
            raise RuntimeError("NetworkResolver has no wallet session to read the chain id from")
        return self.resolve_environment(await self._wallet.get_chain_id())
