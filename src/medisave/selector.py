"""
Upload method selection.

Asks the user which storage backend a save-as should use, and checks
that the chosen backend's account is set up. Both questions are
single-slot prompts: the workflow suspends until the UI resolves them.
"""

from __future__ import annotations

from typing import Optional, Sequence

from medisave.collaborators import AccountSetupProvider, Presenter
from medisave.interaction import InteractionSlot
from medisave.models import AccountReadiness, UploadMethod
from medisave.utils.logging import get_logger

_logger = get_logger(__name__)


class UploadMethodSelector:
    """
    Interactive chooser between storage backends.

    Example:
        >>> selector = UploadMethodSelector(presenter, setup_provider)
        >>> method = await selector.choose_method()      # UI calls selector.resolve_method(...)
        >>> readiness = await selector.ensure_account_ready(method)
    """

    def __init__(
        self,
        presenter: Presenter,
        setup_provider: AccountSetupProvider,
        methods: Optional[Sequence[UploadMethod]] = None,
    ) -> None:
        self._presenter = presenter
        self._setup_provider = setup_provider
        self._methods = tuple(methods) if methods else tuple(UploadMethod)
        self._method_slot: InteractionSlot[UploadMethod] = InteractionSlot("upload method")
        self._setup_slot: InteractionSlot[bool] = InteractionSlot("account setup")

    @property
    def methods(self) -> Sequence[UploadMethod]:
        return self._methods

    @property
    def awaiting_method(self) -> bool:
        return self._method_slot.pending

    @property
    def awaiting_setup(self) -> bool:
        return self._setup_slot.pending

    # ------------------------------------------------------------------
    # Method choice
    # ------------------------------------------------------------------
    async def choose_method(self) -> UploadMethod:
        """
        Show the method-choice prompt and wait for the user's pick.

        Raises:
            InteractionPendingError: A method prompt is already open
            InteractionCancelledError: The prompt was dismissed
        """
        try:
            method = await self._method_slot.request(
                on_open=lambda: self._presenter.show_method_choice(self._methods)
            )
        finally:
            if not self._method_slot.pending:
                self._presenter.hide_method_choice()
        _logger.debug("Upload method chosen", extra={"method": method.value})
        return method

    def resolve_method(self, method: UploadMethod) -> None:
        """
        Resolve the open method prompt.

        Raises:
            ValueError: ``method`` is not one of the offered methods
            NoPendingInteractionError: No method prompt is open
        """
        choice = UploadMethod(method)
        if choice not in self._methods:
            raise ValueError(f"Invalid upload method selected: {choice.value}")
        self._method_slot.resolve(choice)

    def cancel_method_choice(self) -> None:
        self._method_slot.cancel()

    # ------------------------------------------------------------------
    # Account setup
    # ------------------------------------------------------------------
    def check_account(self, method: UploadMethod) -> AccountReadiness:
        """Readiness of ``method`` without prompting."""
        if UploadMethod(method) is UploadMethod.STORACHA:
            if self._setup_provider.get_storacha_account() is None:
                return AccountReadiness.NEEDS_SETUP
        return AccountReadiness.READY

    async def ensure_account_ready(self, method: UploadMethod) -> AccountReadiness:
        """
        Check readiness; if setup is missing, show the notice and wait for it.

        The notice only tells the user where to finish setup; acknowledging
        or dismissing it both end the wait and NEEDS_SETUP is returned.
        """
        readiness = self.check_account(method)
        if readiness is AccountReadiness.READY:
            return readiness

        _logger.warning("Account not set up", extra={"method": UploadMethod(method).value})
        try:
            await self._setup_slot.request(
                on_open=lambda: self._presenter.show_setup_required(UploadMethod(method))
            )
        finally:
            if not self._setup_slot.pending:
                self._presenter.hide_setup_required()
        return readiness

    def acknowledge_setup(self) -> None:
        """Close the setup-required notice (its only button)."""
        self._setup_slot.resolve(True)
