"""
Interfaces of the editor components medisave drives but does not own.

- DocumentEngine: the spreadsheet engine (content, device, loading)
- FileStore: local file-record persistence
- AccountSetupProvider: locally persisted storage-account setup
- Presenter: dialogs, alerts, printing and clipboard
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from medisave.models import FileRecord, SaveSuccessDetails, StorachaAccount, UploadMethod


@runtime_checkable
class DocumentEngine(Protocol):
    def get_serialized_content(self) -> str:
        """Spreadsheet content in the engine's save format."""
        ...

    def get_renderable_content(self) -> str:
        """HTML markup of the current sheet, for printing."""
        ...

    def get_device_profile(self) -> str:
        """Device kind the editor runs on ("default", "iPad", ...)."""
        ...

    def load_document(self, name: str, template_json: str) -> None:
        ...


@runtime_checkable
class FileStore(Protocol):
    def get_file(self, name: str) -> Optional[FileRecord]:
        ...

    def save_file(self, record: FileRecord) -> None:
        """Store ``record`` under its name, replacing any previous record."""
        ...


@runtime_checkable
class AccountSetupProvider(Protocol):
    def get_storacha_account(self) -> Optional[StorachaAccount]:
        """Email and space set up for Storacha, or None if setup is incomplete."""
        ...


@runtime_checkable
class Presenter(Protocol):
    def show_method_choice(self, methods: Sequence[UploadMethod]) -> None:
        ...

    def hide_method_choice(self) -> None:
        ...

    def show_setup_required(self, method: UploadMethod) -> None:
        ...

    def hide_setup_required(self) -> None:
        ...

    def show_save_success(self, details: SaveSuccessDetails) -> None:
        ...

    def hide_save_success(self) -> None:
        ...

    def alert(self, message: str) -> None:
        ...

    def print_markup(self, markup: str) -> None:
        ...

    def copy_to_clipboard(self, text: str) -> Any:
        ...
