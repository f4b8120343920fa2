"""
Tests for network-change handling.
"""

import asyncio
from decimal import Decimal

import pytest

from medisave.models import UploadMethod

from ..conftest import AMOY_ID, SEPOLIA_ID


class TestAttach:
    @pytest.mark.asyncio
    async def test_attach_subscribes_once_and_reads_balance(self, orchestrator, wallet, monitor) -> None:
        await orchestrator.attach()
        await orchestrator.attach()

        assert wallet.listener_count == 1
        assert monitor.refresh_count == 2
        assert orchestrator.balance == Decimal("10")
        assert orchestrator.balance_display == "10.00"

    @pytest.mark.asyncio
    async def test_detach_stops_refreshes(self, orchestrator, wallet, monitor) -> None:
        await orchestrator.attach()
        orchestrator.detach()

        await wallet.notify_network_change(AMOY_ID)

        assert wallet.listener_count == 0
        assert monitor.refresh_count == 1


class TestNetworkChange:
    @pytest.mark.asyncio
    async def test_one_refresh_per_change(self, orchestrator, wallet, ledger, monitor, call_log) -> None:
        ledger.balances[AMOY_ID] = Decimal("7.5")
        await orchestrator.attach()
        call_log.clear()

        await wallet.notify_network_change(AMOY_ID)

        assert monitor.refresh_count == 2
        assert call_log == [("balance", AMOY_ID)]
        assert orchestrator.balance_display == "7.50"

    @pytest.mark.asyncio
    async def test_pending_save_as_is_not_disturbed(
        self, orchestrator, selector, wallet, ledger, wait_until
    ) -> None:
        await orchestrator.attach()
        task = asyncio.create_task(orchestrator.save_as("Lab Notes"))
        await wait_until(lambda: selector.awaiting_method)

        await wallet.notify_network_change(AMOY_ID)

        assert selector.awaiting_method
        assert not task.done()

        orchestrator.resolve_upload_method(UploadMethod.LIGHTHOUSE)
        result = await task

        assert result.ok
        # The guard reads the network active at payment time
        assert ledger.debits[0][0] == AMOY_ID
        assert ledger.balances[SEPOLIA_ID] == Decimal("10")
