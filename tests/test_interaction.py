"""
Tests for InteractionSlot single-slot prompts.
"""

import asyncio

import pytest

from medisave.errors import (
    InteractionCancelledError,
    InteractionPendingError,
    NoPendingInteractionError,
)
from medisave.interaction import InteractionSlot


class TestInteractionSlot:
    @pytest.mark.asyncio
    async def test_request_resolves_with_decision(self, wait_until) -> None:
        slot: InteractionSlot[str] = InteractionSlot("upload method")
        opened = []

        task = asyncio.create_task(slot.request(on_open=lambda: opened.append(True)))
        await wait_until(lambda: slot.pending)

        assert opened == [True]
        slot.resolve("lighthouse")

        assert await task == "lighthouse"
        assert slot.pending is False

    @pytest.mark.asyncio
    async def test_second_request_rejected_without_overwriting(self, wait_until) -> None:
        slot: InteractionSlot[str] = InteractionSlot("upload method")
        first = asyncio.create_task(slot.request())
        await wait_until(lambda: slot.pending)

        with pytest.raises(InteractionPendingError) as exc_info:
            await slot.request()

        assert exc_info.value.kind == "upload method"
        # The first request still receives the decision
        slot.resolve("storacha")
        assert await first == "storacha"

    def test_resolve_with_nothing_pending(self) -> None:
        slot: InteractionSlot[str] = InteractionSlot("account setup")

        with pytest.raises(NoPendingInteractionError):
            slot.resolve("x")

    @pytest.mark.asyncio
    async def test_double_resolve_rejected(self, wait_until) -> None:
        slot: InteractionSlot[int] = InteractionSlot("upload method")
        task = asyncio.create_task(slot.request())
        await wait_until(lambda: slot.pending)

        slot.resolve(1)
        with pytest.raises(NoPendingInteractionError):
            slot.resolve(2)

        assert await task == 1

    @pytest.mark.asyncio
    async def test_cancel_raises_into_waiter(self, wait_until) -> None:
        slot: InteractionSlot[str] = InteractionSlot("upload method")
        task = asyncio.create_task(slot.request())
        await wait_until(lambda: slot.pending)

        slot.cancel()

        with pytest.raises(InteractionCancelledError):
            await task
        assert slot.pending is False

    def test_cancel_with_nothing_pending(self) -> None:
        with pytest.raises(NoPendingInteractionError):
            InteractionSlot("upload method").cancel()

    @pytest.mark.asyncio
    async def test_slot_reusable_after_resolution(self, wait_until) -> None:
        slot: InteractionSlot[str] = InteractionSlot("upload method")
        for choice in ("storacha", "lighthouse"):
            task = asyncio.create_task(slot.request())
            await wait_until(lambda: slot.pending)
            slot.resolve(choice)
            assert await task == choice
