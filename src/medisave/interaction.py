"""
Single-slot interactive prompts.

A workflow that needs a human decision calls ``request()`` and suspends
on a future. The UI later calls ``resolve()`` (or ``cancel()``) exactly
once. A second request while one is open, or a resolution with nothing
open, is a programming error and raises instead of overwriting the
pending continuation.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Generic, Optional, TypeVar

from medisave.errors import (
    InteractionCancelledError,
    InteractionPendingError,
    NoPendingInteractionError,
)
from medisave.utils.logging import get_logger

_logger = get_logger(__name__)

T = TypeVar("T")


class InteractionSlot(Generic[T]):
    """
    One outstanding prompt of a given kind.

    Example:
        >>> slot: InteractionSlot[str] = InteractionSlot("upload method")
        >>> # workflow side
        >>> choice = await slot.request(on_open=presenter.show_method_choice)
        >>> # UI side, later
        >>> slot.resolve("storacha")
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._future: Optional[asyncio.Future] = None

    @property
    def pending(self) -> bool:
        """True while a request is waiting for its resolution."""
        return self._future is not None and not self._future.done()

    async def request(self, on_open: Optional[Callable[[], object]] = None) -> T:
        """
        Open the prompt and wait for its resolution.

        Args:
            on_open: Called once the slot is armed, typically to show the dialog

        Returns:
            The value passed to ``resolve``

        Raises:
            InteractionPendingError: A prompt of this kind is already open
            InteractionCancelledError: The prompt was dismissed
        """
        if self._future is not None:
            raise InteractionPendingError(self.kind)

        future = asyncio.get_running_loop().create_future()
        self._future = future
        _logger.debug("Prompt opened: %s", self.kind)
        try:
            if on_open is not None:
                on_open()
            return await future
        finally:
            if self._future is future:
                self._future = None

    def resolve(self, decision: T) -> None:
        """
        Deliver the user's decision to the waiting workflow.

        Raises:
            NoPendingInteractionError: Nothing is waiting, or it was already resolved
        """
        if not self.pending:
            raise NoPendingInteractionError(self.kind)
        _logger.debug("Prompt resolved: %s", self.kind)
        self._future.set_result(decision)

    def cancel(self) -> None:
        """
        Dismiss the prompt; the waiting workflow sees InteractionCancelledError.

        Raises:
            NoPendingInteractionError: Nothing is waiting
        """
        if not self.pending:
            raise NoPendingInteractionError(self.kind)
        _logger.debug("Prompt dismissed: %s", self.kind)
        self._future.set_exception(InteractionCancelledError(self.kind))
