"""MediToken ledger client.

Reads the user's MediToken balance and debits tokens for metered
operations. The balance is the amount the invoice contract credits to the
caller (``getUserTokens``); a debit is an ERC20 ``transfer`` of the
operation's price from the user to the invoice contract.

Example:
    >>> ledger = TokenLedgerClient(wallet)
    >>> env = resolver.resolve_environment(await wallet.get_chain_id())
    >>> balance = await ledger.get_balance(wallet.address, env)
    >>> receipt = await ledger.debit(env, Decimal("2"), OperationKind.SAVE)
"""
from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted

from ..config import NetworkEnvironment, OperationKind
from ..constants import (
    DEFAULT_CONFIRMATION_TIMEOUT_SECONDS,
    RECEIPT_POLL_LATENCY_SECONDS,
    USER_REJECTED_REQUEST_CODE,
)
from ..errors import (
    DebitFailedError,
    LedgerReadError,
    TransactionRejectedError,
    TransactionRevertedError,
    TransactionTimeoutError,
)
from ..models import TransactionReceipt
from ..utils.logging import get_logger
from ..wallet import WalletSession

_logger = get_logger(__name__)

# ABI file directory
ABI_DIR = Path(__file__).resolve().parent.parent / "abis"

# ABI loading cache
_ABI_CACHE: dict[str, list] = {}

# Gas Constants
GAS_ESTIMATION_BUFFER = 1.2
MAX_GAS_LIMIT = 200_000  # an ERC20 transfer never needs more
MAX_FEE_MULTIPLIER = 2


def _load_abi(name: str) -> list:
    """Load ABI JSON with caching.

    Args:
        name: ABI filename (e.g., "medi_token.json")

    Returns:
        Parsed ABI list
    """
    if name not in _ABI_CACHE:
        _ABI_CACHE[name] = json.loads((ABI_DIR / name).read_text())
    return _ABI_CACHE[name]


def to_token_units(amount: Decimal) -> int:
    """Whole tokens to 18-decimal on-chain units."""
    return int(Web3.to_wei(Decimal(amount), "ether"))


def from_token_units(raw: int) -> Decimal:
    """18-decimal on-chain units to whole tokens."""
    return Decimal(Web3.from_wei(int(raw), "ether"))


def _rpc_error(exc: BaseException) -> Optional[dict]:
    """Extract the JSON-RPC error object from a provider exception, if any."""
    response = getattr(exc, "rpc_response", None)
    if isinstance(response, dict) and isinstance(response.get("error"), dict):
        return response["error"]
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0]
    return None


def _is_user_rejection(exc: BaseException) -> bool:
    error = _rpc_error(exc)
    if error is not None and error.get("code") == USER_REJECTED_REQUEST_CODE:
        return True
    return "user rejected" in str(exc).lower() or "user denied" in str(exc).lower()


class TokenLedgerClient:
    """Balance reads and debits against a resolved contract pair."""

    def __init__(
        self,
        wallet: WalletSession,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT_SECONDS,
        poll_latency: float = RECEIPT_POLL_LATENCY_SECONDS,
        tx_overrides: Optional[dict] = None,
    ):
        self.wallet = wallet
        self.confirmation_timeout = confirmation_timeout
        self.poll_latency = poll_latency
        self.tx_overrides = tx_overrides or {}

    @property
    def w3(self):
        return self.wallet.w3

    def _token_contract(self, environment: NetworkEnvironment):
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(environment.token_contract),
            abi=_load_abi("medi_token.json"),
        )

    def _invoice_contract(self, environment: NetworkEnvironment):
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(environment.invoice_contract),
            abi=_load_abi("medi_invoice.json"),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_balance(self, account: str, environment: NetworkEnvironment) -> Decimal:
        """Read the MediToken balance credited to ``account``.

        Args:
            account: Address of the connected user
            environment: Resolved network environment

        Returns:
            Balance in whole tokens

        Raises:
            LedgerReadError: If the RPC call fails. The balance is unknown
                in that case, not zero.
        """
        invoice = self._invoice_contract(environment)
        try:
            raw = await invoice.functions.getUserTokens().call({"from": account})
        except Exception as e:
            raise LedgerReadError(
                f"Failed to read token balance: {e}",
                chain_id=environment.chain_id,
            ) from e
        balance = from_token_units(raw)
        _logger.debug(
            "Balance read",
            extra={"chain_id": environment.chain_id, "network": environment.name.value},
        )
        return balance

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def debit(
        self,
        environment: NetworkEnvironment,
        cost: Decimal,
        operation: OperationKind,
    ) -> TransactionReceipt:
        """Transfer ``cost`` tokens to the invoice contract and wait for confirmation.

        Args:
            environment: Resolved network environment
            cost: Price of the operation in whole tokens
            operation: Operation kind being paid for

        Returns:
            Confirmed receipt. Funds have moved only if this returns.

        Raises:
            TransactionRejectedError: Signer declined the transfer
            TransactionRevertedError: Transfer reverted (estimation or on-chain)
            TransactionTimeoutError: No receipt within ``confirmation_timeout``
            DebitFailedError: Any other submission failure
        """
        op = OperationKind(operation).value
        token = self._token_contract(environment)
        func = token.functions.transfer(
            Web3.to_checksum_address(environment.invoice_contract),
            to_token_units(cost),
        )

        try:
            gas = await self._estimate_gas(func)
            tx = await func.build_transaction(await self._tx_meta(environment, gas))
            signed = self.wallet.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except DebitFailedError:
            raise
        except ContractLogicError as e:
            reason = getattr(e, "message", None) or str(e)
            raise TransactionRevertedError(
                f"Transfer reverted: {reason}", reason=reason, operation=op
            ) from e
        except Exception as e:
            if _is_user_rejection(e):
                raise TransactionRejectedError(operation=op) from e
            error = _rpc_error(e)
            msg = (error or {}).get("message") or str(e)
            raise DebitFailedError(f"Failed to submit transfer: {msg}", operation=op) from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        _logger.info(
            "Transfer submitted",
            extra={"operation": op, "tx_hash": tx_hash_hex, "chain_id": environment.chain_id},
        )

        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.confirmation_timeout,
                poll_latency=self.poll_latency,
            )
        except TimeExhausted as e:
            raise TransactionTimeoutError(
                self.confirmation_timeout, operation=op, tx_hash=tx_hash_hex
            ) from e
        except Exception as e:
            raise DebitFailedError(
                f"Failed to confirm transfer: {e}", operation=op, tx_hash=tx_hash_hex
            ) from e

        if receipt["status"] != 1:
            raise TransactionRevertedError(
                f"Transfer failed on-chain: {tx_hash_hex}", operation=op, tx_hash=tx_hash_hex
            )

        return TransactionReceipt(
            tx_hash=tx_hash_hex,
            block_number=receipt.get("blockNumber", 0),
            gas_used=receipt.get("gasUsed", 0),
            amount=Decimal(cost),
            operation=op,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _estimate_gas(self, func, buffer: float = GAS_ESTIMATION_BUFFER) -> int:
        """Estimate gas for the transfer with buffer, capped at MAX_GAS_LIMIT."""
        base = await func.estimate_gas({"from": self.wallet.address})
        return min(int(base * buffer), MAX_GAS_LIMIT)

    async def _tx_meta(self, environment: NetworkEnvironment, gas: int) -> dict[str, Any]:
        """Build transaction metadata with dynamic EIP-1559 pricing."""
        nonce = await self.w3.eth.get_transaction_count(self.wallet.address, "pending")
        latest_block = await self.w3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas", 0)
        priority_fee = await self.w3.eth.max_priority_fee

        meta = {
            "from": self.wallet.address,
            "nonce": nonce,
            "chainId": environment.chain_id,
            "gas": gas,
            "maxFeePerGas": base_fee * MAX_FEE_MULTIPLIER + priority_fee,
            "maxPriorityFeePerGas": priority_fee,
        }
        return {**meta, **self.tx_overrides}
