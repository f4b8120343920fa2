"""
Local stores for file records and storage-account setup.

JSON-file implementations persist under the data directory (by default
``~/.medisave``); in-memory variants back tests and embedded hosts.
The account file uses the same keys the editor's Files section writes
(``ipfsUserEmail``, ``ipfsUserSpace``).
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from medisave.constants import STORACHA_EMAIL_KEY, STORACHA_SPACE_KEY
from medisave.models import FileRecord, StorachaAccount

PathLike = Union[str, "os.PathLike[str]"]


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def _write_json(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    os.replace(tmp, path)


# ============================================================================
# File records
# ============================================================================


class InMemoryFileStore:
    """FileStore kept in a dict; overwrite by name."""

    def __init__(self) -> None:
        self._files: Dict[str, FileRecord] = {}

    def get_file(self, name: str) -> Optional[FileRecord]:
        return self._files.get(name)

    def save_file(self, record: FileRecord) -> None:
        self._files[record.name] = record

    def names(self) -> list:
        return sorted(self._files)

    def __len__(self) -> int:
        return len(self._files)


class JsonFileStore:
    """
    FileStore persisted as one JSON object keyed by filename.

    Example:
        >>> store = JsonFileStore("~/.medisave/files.json")
        >>> store.save_file(record)
        >>> store.get_file(record.name) == record
        True
    """

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path).expanduser()

    def get_file(self, name: str) -> Optional[FileRecord]:
        data = _read_json(self.path).get(name)
        return FileRecord.from_dict(data) if data else None

    def save_file(self, record: FileRecord) -> None:
        files = _read_json(self.path)
        files[record.name] = record.to_dict()
        _write_json(self.path, files)

    def names(self) -> list:
        return sorted(_read_json(self.path))


# ============================================================================
# Account setup
# ============================================================================


class InMemoryAccountSetupProvider:
    def __init__(self, storacha: Optional[StorachaAccount] = None) -> None:
        self._storacha = storacha

    def get_storacha_account(self) -> Optional[StorachaAccount]:
        return self._storacha

    def save_storacha_account(self, account: StorachaAccount) -> None:
        self._storacha = account


class JsonAccountSetupProvider:
    """Storacha setup read from (and written to) a small JSON file."""

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path).expanduser()

    def get_storacha_account(self) -> Optional[StorachaAccount]:
        data = _read_json(self.path)
        email = data.get(STORACHA_EMAIL_KEY)
        space = data.get(STORACHA_SPACE_KEY)
        if not (email and space):
            return None
        return StorachaAccount(email=email, space=space)

    def save_storacha_account(self, account: StorachaAccount) -> None:
        data = _read_json(self.path)
        data[STORACHA_EMAIL_KEY] = account.email
        data[STORACHA_SPACE_KEY] = account.space
        _write_json(self.path, data)
