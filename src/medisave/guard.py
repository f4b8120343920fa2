"""
Payment guard.

Wraps a metered effect (save, save-as, print) in the sequence

    read balance -> compare with price -> debit -> effect

The effect never runs unless the debit confirmed. The reverse does not
hold: if the effect fails after the debit, the tokens stay spent
(on-chain transfers cannot be undone) and EffectFailedAfterDebitError is
raised so the host can tell the user exactly that.
"""

from __future__ import annotations

import inspect
from decimal import Decimal
from typing import Awaitable, Callable, Optional, TypeVar, Union

from medisave.config import DEFAULT_TOKEN_COSTS, NetworkEnvironment, OperationKind, TokenCosts
from medisave.errors import (
    BalanceUnknownError,
    DebitFailedError,
    EffectFailedAfterDebitError,
    InsufficientFundsError,
    UnsupportedNetworkError,
)
from medisave.ledger.balance import BalanceMonitor
from medisave.ledger.client import TokenLedgerClient
from medisave.ledger.network import NetworkResolver
from medisave.utils.logging import get_logger
from medisave.wallet import WalletSession

_logger = get_logger(__name__)

T = TypeVar("T")

GuardedAction = Callable[[], Union[Awaitable[T], T]]


class PaymentGuard:
    """
    Balance check and debit in front of a protected effect.

    Example:
        >>> guard = PaymentGuard(ledger, resolver, wallet, costs=TokenCosts(SAVE=Decimal("2")))
        >>> result = await guard.run_guarded(OperationKind.SAVE, persist)
    """

    def __init__(
        self,
        ledger: TokenLedgerClient,
        resolver: NetworkResolver,
        wallet: WalletSession,
        costs: TokenCosts = DEFAULT_TOKEN_COSTS,
        balance_monitor: Optional[BalanceMonitor] = None,
    ) -> None:
        self._ledger = ledger
        self._resolver = resolver
        self._wallet = wallet
        self._costs = costs
        self._balance_monitor = balance_monitor

    @property
    def costs(self) -> TokenCosts:
        return self._costs

    def cost_of(self, operation: OperationKind) -> Decimal:
        return self._costs.cost_of(operation)

    async def _resolve(self) -> NetworkEnvironment:
        return self._resolver.resolve_environment(await self._wallet.get_chain_id())

    async def run_guarded(self, operation: OperationKind, action: GuardedAction) -> T:
        """
        Run ``action`` only after a confirmed debit of the operation's price.

        Args:
            operation: Metered operation kind
            action: Effect to perform once paid; sync or async

        Returns:
            The action's result

        Raises:
            UnsupportedNetworkError: Wallet is on an unconfigured network
            BalanceUnknownError: Balance could not be read; nothing debited
            InsufficientFundsError: Balance below price; nothing debited
            DebitFailedError: Transfer did not confirm; action not invoked
            EffectFailedAfterDebitError: Action failed after payment
        """
        op = OperationKind(operation)
        cost = self.cost_of(op)

        # 1. Fresh balance, never a cached one
        try:
            env = await self._resolve()
            balance = await self._ledger.get_balance(self._wallet.address, env)
        except UnsupportedNetworkError:
            raise
        except Exception as e:
            _logger.warning("Balance unknown, aborting", extra={"operation": op.value})
            raise BalanceUnknownError(op.value) from e

        # 2. Price check
        if balance < cost:
            _logger.warning(
                "Insufficient balance %s < %s",
                balance,
                cost,
                extra={"operation": op.value, "chain_id": env.chain_id},
            )
            raise InsufficientFundsError(balance, cost, operation=op.value)

        # 3. Debit against the network active right now
        try:
            debit_env = await self._resolve()
        except UnsupportedNetworkError:
            raise
        except Exception as e:
            raise DebitFailedError(f"Failed to resolve network before debit: {e}", operation=op.value) from e
        if debit_env.chain_id != env.chain_id:
            # Wallet switched networks between the check and the debit
            raise BalanceUnknownError(
                op.value,
                details={"checked_chain_id": env.chain_id, "active_chain_id": debit_env.chain_id},
            )

        try:
            receipt = await self._ledger.debit(debit_env, cost, op)
        except DebitFailedError:
            raise
        except Exception as e:
            raise DebitFailedError(f"Token debit failed: {e}", operation=op.value) from e

        _logger.info(
            "Debit confirmed",
            extra={"operation": op.value, "tx_hash": receipt.tx_hash, "chain_id": debit_env.chain_id},
        )
        if self._balance_monitor is not None:
            await self._balance_monitor.refresh()

        # 4. Effect; failures from here on leave the tokens spent
        try:
            result = action()
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            _logger.error(
                "Effect failed after debit: %s",
                e,
                extra={"operation": op.value, "tx_hash": receipt.tx_hash},
            )
            raise EffectFailedAfterDebitError(e, operation=op.value, tx_hash=receipt.tx_hash) from e

        return result
