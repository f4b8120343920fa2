"""
Save orchestrator.

Entry point for the editor's file menu: New, Save, Save As and Print.
Metered workflows run their effect through the PaymentGuard; Save As
also picks a storage backend and uploads before paying.

UI-facing methods never raise medisave errors. They alert the user,
log, and return an OperationResult. Exceptions from host collaborators
are wrapped in CollaboratorError (or UploadError for a backend) first.
Programming errors (resolving a prompt that is not open, an unknown
method) still raise.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Mapping, Optional

from medisave.collaborators import DocumentEngine, FileStore, Presenter
from medisave.config import OperationKind
from medisave.constants import DEFAULT_DOCUMENT_NAME
from medisave.errors import (
    AccountNotConfiguredError,
    CollaboratorError,
    DocumentNotSavableError,
    EffectFailedAfterDebitError,
    MediSaveError,
    UploadError,
    WorkflowError,
)
from medisave.guard import PaymentGuard
from medisave.ledger.balance import BalanceMonitor, format_balance
from medisave.models import (
    AccountReadiness,
    ContentAddress,
    FileData,
    FileRecord,
    OperationResult,
    SaveSuccessDetails,
    UploadMethod,
    utc_timestamp,
)
from medisave.selector import UploadMethodSelector
from medisave.storage.base import UploadBackend
from medisave.utils.encoding import encode_content
from medisave.utils.logging import get_logger
from medisave.utils.validation import validate_filename
from medisave.wallet import WalletSession

_logger = get_logger(__name__)

DEFAULT_DEVICE = "default"


class SaveOrchestrator:
    """
    Runs the editor's file workflows.

    Example:
        ```python
        orchestrator = SaveOrchestrator(
            engine=engine,
            file_store=JsonFileStore("~/.medisave/files.json"),
            presenter=presenter,
            guard=guard,
            selector=selector,
            backends={UploadMethod.STORACHA: storacha, UploadMethod.LIGHTHOUSE: lighthouse},
            wallet=wallet,
            balance_monitor=monitor,
            default_templates={"default": DEFAULT_TEMPLATE},
        )
        await orchestrator.attach()

        task = asyncio.create_task(orchestrator.save_as("Blood Panel"))
        orchestrator.resolve_upload_method(UploadMethod.LIGHTHOUSE)  # from the dialog
        result = await task
        ```
    """

    def __init__(
        self,
        engine: DocumentEngine,
        file_store: FileStore,
        presenter: Presenter,
        guard: PaymentGuard,
        selector: UploadMethodSelector,
        backends: Mapping[UploadMethod, UploadBackend],
        wallet: WalletSession,
        balance_monitor: Optional[BalanceMonitor] = None,
        default_templates: Optional[Mapping[str, str]] = None,
        active_file: str = DEFAULT_DOCUMENT_NAME,
        on_selection_changed: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._engine = engine
        self._file_store = file_store
        self._presenter = presenter
        self._guard = guard
        self._selector = selector
        self._backends = dict(backends)
        self._wallet = wallet
        self._balance_monitor = balance_monitor
        self._templates = dict(default_templates or {})
        self._active_file = active_file
        self._on_selection_changed = on_selection_changed
        self._uploading = False
        self._attached = False
        self._save_success = SaveSuccessDetails()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def active_file(self) -> str:
        return self._active_file

    @property
    def is_uploading(self) -> bool:
        """True from method resolution through the end of a save-as upload."""
        return self._uploading

    @property
    def save_success(self) -> SaveSuccessDetails:
        return self._save_success

    @property
    def balance(self) -> Optional[Decimal]:
        """Last displayed balance; informational only."""
        return self._balance_monitor.balance if self._balance_monitor else None

    @property
    def balance_display(self) -> str:
        return format_balance(self.balance)

    @property
    def available_methods(self):
        return self._selector.methods

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def attach(self) -> None:
        """Subscribe to network changes and show the current balance."""
        if not self._attached:
            self._wallet.on_network_change(self.handle_network_change)
            self._attached = True
        if self._balance_monitor is not None:
            await self._balance_monitor.refresh()

    def detach(self) -> None:
        if self._attached:
            self._wallet.remove_listener(self.handle_network_change)
            self._attached = False

    async def handle_network_change(self, chain_id) -> None:
        """Refresh the displayed balance once; running workflows are left alone."""
        _logger.info("Network changed", extra={"chain_id": chain_id})
        if self._balance_monitor is not None:
            await self._balance_monitor.refresh()

    # ------------------------------------------------------------------
    # New
    # ------------------------------------------------------------------
    def new_file(self) -> OperationResult[str]:
        """
        Persist the open document (unless it is the template) and load a
        fresh default template. Not metered.
        """
        if self._active_file != DEFAULT_DOCUMENT_NAME:
            try:
                self._file_store.save_file(self._build_record(self._active_file))
            except Exception as e:
                return self._fail("new", "persist", _as_medisave_error(e, "file store"))
            _logger.debug("Persisted before new", extra={"document": self._active_file})

        try:
            template = self._template_for(self._engine.get_device_profile())
            self._engine.load_document(DEFAULT_DOCUMENT_NAME, template)
        except Exception as e:
            return self._fail("new", "load_template", _as_medisave_error(e, "document engine"))

        self._select(DEFAULT_DOCUMENT_NAME)
        return OperationResult("new", True, value=DEFAULT_DOCUMENT_NAME)

    # ------------------------------------------------------------------
    # Print
    # ------------------------------------------------------------------
    async def print_document(self) -> OperationResult[None]:
        def render() -> None:
            self._presenter.print_markup(self._engine.get_renderable_content())

        try:
            await self._guard.run_guarded(OperationKind.PRINT, render)
        except MediSaveError as e:
            return self._fail("print", _guard_step(e, "print"), e)
        return OperationResult("print", True)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------
    async def save(self) -> OperationResult[FileRecord]:
        """Save the open document in place, paying the SAVE price."""
        name = self._active_file
        if name == DEFAULT_DOCUMENT_NAME:
            return self._fail("save", "validate", DocumentNotSavableError(name))

        def persist() -> FileRecord:
            record = self._build_record(name)
            self._file_store.save_file(record)
            self._select(name)
            return record

        try:
            record = await self._guard.run_guarded(OperationKind.SAVE, persist)
        except MediSaveError as e:
            return self._fail("save", _guard_step(e, "persist"), e)

        _logger.info("File saved", extra={"document": name, "workflow": "save"})
        message = f"File {name} updated successfully!"
        self._presenter.alert(message)
        return OperationResult("save", True, value=record, message=message)

    # ------------------------------------------------------------------
    # Save As
    # ------------------------------------------------------------------
    async def save_as(self, filename: Optional[str]) -> OperationResult[ContentAddress]:
        """
        Upload the document under a new name, then pay and record it locally.

        Steps: validate, choose method, check account, upload, guard
        (persist and select), report. An upload that succeeds while the
        guard then aborts stays on the network; nothing is persisted.
        """
        workflow = "save_as"
        try:
            name = validate_filename(filename)
        except MediSaveError as e:
            return self._fail(workflow, "validate", e)

        try:
            method = await self._selector.choose_method()
        except Exception as e:
            return self._fail(workflow, "choose_method", _as_medisave_error(e, "presenter"))

        backend = self._backends.get(method)
        if backend is None:
            return self._fail(
                workflow,
                "choose_method",
                UploadError(f"No {method.label} backend configured", backend=method.value),
            )

        self._uploading = True
        try:
            try:
                readiness = await self._selector.ensure_account_ready(method)
            except Exception as e:
                return self._fail(workflow, "check_account", _as_medisave_error(e, "account setup"))
            if readiness is AccountReadiness.NEEDS_SETUP:
                return self._fail(workflow, "check_account", AccountNotConfiguredError(method.value))

            now = utc_timestamp()
            try:
                content = encode_content(self._engine.get_serialized_content())
            except Exception as e:
                return self._fail(workflow, "serialize", _as_medisave_error(e, "document engine"))
            file_data = FileData(name=name, content=content, created=now, modified=now)

            try:
                address = await backend.upload(file_data)
            except MediSaveError as e:
                return self._fail(workflow, "upload", e)
            except Exception as e:
                error = UploadError(f"Unexpected error: {e}", backend=method.value, cause=e)
                return self._fail(workflow, "upload", error)
        finally:
            self._uploading = False

        _logger.info(
            "Upload complete",
            extra={"workflow": workflow, "method": method.value, "cid": address.cid},
        )

        def persist() -> FileRecord:
            record = file_data.to_record()
            self._file_store.save_file(record)
            self._select(name)
            return record

        try:
            await self._guard.run_guarded(OperationKind.SAVE_AS, persist)
        except MediSaveError as e:
            if not isinstance(e, EffectFailedAfterDebitError):
                _logger.warning(
                    "Upload not recorded locally",
                    extra={"workflow": workflow, "cid": address.cid},
                )
            return self._fail(workflow, _guard_step(e, "persist"), e)

        details = SaveSuccessDetails(
            filename=name,
            cid=address.cid,
            gateway_url=backend.gateway_url(address.cid),
        )
        self._save_success = details
        self._presenter.show_save_success(details)
        _logger.info("File saved", extra={"document": name, "workflow": workflow})
        return OperationResult(workflow, True, value=address)

    # ------------------------------------------------------------------
    # UI resolution entry points
    # ------------------------------------------------------------------
    def resolve_upload_method(self, method: UploadMethod) -> None:
        self._selector.resolve_method(method)

    def cancel_upload_method(self) -> None:
        self._selector.cancel_method_choice()

    def acknowledge_setup(self) -> None:
        self._selector.acknowledge_setup()

    def copy_content_address(self) -> bool:
        """Copy the last saved CID to the clipboard. False if there is none."""
        if self._save_success.is_empty:
            return False
        self._presenter.copy_to_clipboard(self._save_success.cid)
        self._presenter.alert("CID copied to clipboard!")
        return True

    def close_save_success(self) -> None:
        self._presenter.hide_save_success()
        self._save_success = SaveSuccessDetails()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _select(self, name: str) -> None:
        self._active_file = name
        if self._on_selection_changed is not None:
            self._on_selection_changed(name)

    def _build_record(self, name: str) -> FileRecord:
        now = utc_timestamp()
        existing = self._file_store.get_file(name)
        return FileRecord(
            created=existing.created if existing else now,
            modified=now,
            content=encode_content(self._engine.get_serialized_content()),
            name=name,
        )

    def _template_for(self, device: str) -> str:
        template = self._templates.get(device) or self._templates.get(DEFAULT_DEVICE)
        if template is None:
            raise WorkflowError(f"No default template for device {device}")
        return template

    def _fail(self, workflow: str, step: str, error: MediSaveError) -> OperationResult:
        error.add_context(workflow=workflow, step=step)
        extra = {"workflow": workflow, "step": step}
        if isinstance(error, EffectFailedAfterDebitError):
            _logger.error("%s failed after payment: %s", workflow, error, extra={**extra, "tx_hash": error.tx_hash})
        else:
            _logger.warning("%s aborted: %s", workflow, error, extra=extra)

        message = error.user_message()
        self._presenter.alert(message)
        return OperationResult(workflow, False, error=error, message=message)


def _guard_step(error: MediSaveError, effect_step: str) -> str:
    return effect_step if isinstance(error, EffectFailedAfterDebitError) else "guard"


def _as_medisave_error(error: Exception, collaborator: str) -> MediSaveError:
    if isinstance(error, MediSaveError):
        return error
    return CollaboratorError(collaborator, error)
