"""
Tests for BalanceMonitor and balance formatting.
"""

from decimal import Decimal

import pytest

from medisave.errors import LedgerReadError
from medisave.ledger.balance import format_balance

from ..conftest import AMOY_ID, SEPOLIA_ID


class TestFormatBalance:
    @pytest.mark.parametrize(
        "balance,expected",
        [
            (None, "0.00"),
            (Decimal("0"), "0.00"),
            (Decimal("5"), "5.00"),
            (Decimal("1.004"), "1.00"),
            (Decimal("12.5"), "12.50"),
        ],
    )
    def test_two_decimals(self, balance, expected) -> None:
        assert format_balance(balance) == expected


class TestBalanceMonitor:
    @pytest.mark.asyncio
    async def test_refresh_reads_active_network(self, monitor, ledger, wallet) -> None:
        ledger.balances[AMOY_ID] = Decimal("7")
        wallet.chain_id = AMOY_ID

        assert await monitor.refresh() == Decimal("7")
        assert monitor.balance == Decimal("7")
        assert monitor.environment.chain_id == AMOY_ID
        assert monitor.display == "7.00"
        assert monitor.refresh_count == 1

    @pytest.mark.asyncio
    async def test_failed_read_keeps_previous_value(self, monitor, ledger) -> None:
        ledger.balances[SEPOLIA_ID] = Decimal("4")
        await monitor.refresh()

        ledger.read_error = LedgerReadError("rpc down", chain_id=SEPOLIA_ID)

        assert await monitor.refresh() is None
        assert monitor.balance == Decimal("4")
        assert monitor.refresh_count == 2

    @pytest.mark.asyncio
    async def test_unsupported_network_is_logged_not_raised(self, monitor, wallet) -> None:
        wallet.chain_id = 1

        assert await monitor.refresh() is None
        assert monitor.balance is None
        assert monitor.display == "0.00"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_logged_not_raised(self, monitor, ledger) -> None:
        ledger.read_error = RuntimeError("boom")

        assert await monitor.refresh() is None
