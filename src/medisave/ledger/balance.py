"""
Displayed-balance tracking.

Keeps the last MediToken balance shown to the user. Refreshed when the
editor attaches, after every confirmed debit, and whenever the wallet
switches networks. Guarded operations never trust this value; they
read the ledger again.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from medisave.config import NetworkEnvironment
from medisave.errors import LedgerError
from medisave.ledger.client import TokenLedgerClient
from medisave.ledger.network import NetworkResolver
from medisave.utils.logging import get_logger
from medisave.wallet import WalletSession

_logger = get_logger(__name__)


def format_balance(balance: Optional[Decimal]) -> str:
    """Two-decimal display form ("0.00" when unknown)."""
    return f"{(balance or Decimal(0)):.2f}"


class BalanceMonitor:
    """
    Last known balance of the connected account.

    Example:
        >>> monitor = BalanceMonitor(ledger, resolver, wallet)
        >>> await monitor.refresh()
        Decimal('5')
        >>> monitor.display
        '5.00'
    """

    def __init__(
        self,
        ledger: TokenLedgerClient,
        resolver: NetworkResolver,
        wallet: WalletSession,
    ) -> None:
        self._ledger = ledger
        self._resolver = resolver
        self._wallet = wallet
        self._balance: Optional[Decimal] = None
        self._environment: Optional[NetworkEnvironment] = None
        self._refresh_count = 0

    @property
    def balance(self) -> Optional[Decimal]:
        """Last successfully read balance, None before the first read."""
        return self._balance

    @property
    def environment(self) -> Optional[NetworkEnvironment]:
        return self._environment

    @property
    def refresh_count(self) -> int:
        return self._refresh_count

    @property
    def display(self) -> str:
        return format_balance(self._balance)

    async def refresh(self) -> Optional[Decimal]:
        """
        Re-resolve the network and re-read the balance.

        A failed read keeps the previous value and is only logged; the
        displayed figure is informational.

        Returns:
            The fresh balance, or None if it could not be read
        """
        self._refresh_count += 1
        try:
            env = self._resolver.resolve_environment(await self._wallet.get_chain_id())
            balance = await self._ledger.get_balance(self._wallet.address, env)
        except LedgerError as e:
            _logger.warning("Error fetching user tokens: %s", e, extra={"chain_id": e.chain_id})
            return None
        except Exception as e:
            _logger.warning("Error fetching user tokens: %s", e)
            return None

        self._environment = env
        self._balance = balance
        _logger.debug("User tokens refreshed", extra={"network": env.name.value})
        return balance
