"""
Wallet session for medisave.

Holds the connected account and the async Web3 handle, reports the
active chain id, and fans out network-change notifications to listeners
(the save orchestrator subscribes to refresh the displayed balance).

Example:
    >>> wallet = WalletSession.from_private_key("0x...", "https://rpc.sepolia.org")
    >>> chain_id = await wallet.get_chain_id()
    >>> wallet.on_network_change(handler)
    >>> await wallet.notify_network_change("0xaa36a7")
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Union

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3

from medisave.constants import PROVIDER_TIMEOUT_SECONDS
from medisave.utils.logging import get_logger

_logger = get_logger(__name__)

NetworkChangeListener = Callable[[Union[int, str]], Union[Awaitable[Any], Any]]


class WalletSession:
    """
    Connected wallet: account, Web3 handle and network-change events.

    Args:
        w3: Async Web3 instance bound to the wallet's RPC
        account: Local signing account
    """

    def __init__(self, w3: AsyncWeb3, account: LocalAccount) -> None:
        self.w3 = w3
        self.account = account
        self._listeners: List[NetworkChangeListener] = []

    @classmethod
    def from_private_key(
        cls,
        private_key: str,
        rpc_url: str,
        timeout: int = PROVIDER_TIMEOUT_SECONDS,
        w3: Optional[AsyncWeb3] = None,
    ) -> "WalletSession":
        # Sanitize private key errors to prevent key leakage in stack traces
        try:
            account: LocalAccount = Account.from_key(private_key)
        except Exception:
            raise ValueError("Invalid private key format (key not shown for security)") from None

        w3 = w3 or AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(
                rpc_url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)},
            )
        )
        return cls(w3, account)

    @property
    def address(self) -> str:
        return self.account.address

    async def get_chain_id(self) -> int:
        """Chain id of the network the wallet is connected to."""
        return await self.w3.eth.chain_id

    def sign_transaction(self, tx: dict) -> Any:
        return self.account.sign_transaction(tx)

    # ------------------------------------------------------------------
    # Network-change events
    # ------------------------------------------------------------------
    def on_network_change(self, listener: NetworkChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: NetworkChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def notify_network_change(self, chain_id: Union[int, str]) -> None:
        """
        Deliver a wallet-initiated network switch to every listener.

        Listeners run in subscription order; a coroutine result is awaited
        before the next listener runs.
        """
        _logger.info("Network changed", extra={"chain_id": chain_id})
        for listener in list(self._listeners):
            result = listener(chain_id)
            if asyncio.iscoroutine(result):
                await result
