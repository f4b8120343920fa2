"""
Ledger Module - MediToken balance and payments.

- NetworkResolver: active chain id -> contract deployment
- TokenLedgerClient: balance reads and debits
- BalanceMonitor: last balance shown to the user
"""

from __future__ import annotations

from medisave.ledger.balance import BalanceMonitor, format_balance
from medisave.ledger.client import TokenLedgerClient, from_token_units, to_token_units
from medisave.ledger.network import NetworkResolver, normalize_chain_id

__all__ = [
    "NetworkResolver",
    "normalize_chain_id",
    "TokenLedgerClient",
    "to_token_units",
    "from_token_units",
    "BalanceMonitor",
    "format_balance",
]
