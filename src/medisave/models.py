from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from .constants import LIGHTHOUSE_GATEWAY_TEMPLATE, STORACHA_GATEWAY_TEMPLATE

__all__ = [
    "UploadMethod",
    "AccountReadiness",
    "StorachaAccount",
    "FileRecord",
    "FileData",
    "ContentAddress",
    "TransactionReceipt",
    "SaveSuccessDetails",
    "OperationResult",
    "derive_gateway_url",
    "utc_timestamp",
]

T = TypeVar("T")


class UploadMethod(str, Enum):
    STORACHA = "storacha"
    LIGHTHOUSE = "lighthouse"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class AccountReadiness(str, Enum):
    READY = "ready"
    NEEDS_SETUP = "needs_setup"


_GATEWAY_TEMPLATES = {
    UploadMethod.STORACHA: STORACHA_GATEWAY_TEMPLATE,
    UploadMethod.LIGHTHOUSE: LIGHTHOUSE_GATEWAY_TEMPLATE,
}


def derive_gateway_url(method: UploadMethod, cid: str) -> str:
    """Public gateway URL for a CID uploaded through ``method``."""
    return _GATEWAY_TEMPLATES[UploadMethod(method)].format(cid=cid)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class StorachaAccount:
    email: str
    space: str


@dataclass(frozen=True)
class FileRecord:
    """Local record of a saved document.

    Attributes:
        created: ISO 8601 creation time, preserved across re-saves
        modified: ISO 8601 time of this save
        content: URI-encoded serialized document
        name: Filename, the record's identity
    """
    created: str
    modified: str
    content: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRecord":
        return cls(
            created=data["created"],
            modified=data["modified"],
            content=data["content"],
            name=data["name"],
        )


@dataclass(frozen=True)
class FileData:
    """Upload payload, serialized as one ``{name}.json`` blob."""
    name: str
    content: str
    created: str
    modified: str

    @property
    def blob_name(self) -> str:
        return f"{self.name}.json"

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "content": self.content,
            "created": self.created,
            "modified": self.modified,
        }

    def to_record(self) -> FileRecord:
        return FileRecord(
            created=self.created,
            modified=self.modified,
            content=self.content,
            name=self.name,
        )


@dataclass(frozen=True)
class ContentAddress:
    cid: str
    method: UploadMethod

    @property
    def gateway_url(self) -> str:
        return derive_gateway_url(self.method, self.cid)

    def __str__(self) -> str:
        return self.cid


@dataclass(frozen=True)
class TransactionReceipt:
    """Confirmed MediToken transfer.

    Attributes:
        tx_hash: 0x-prefixed transaction hash
        block_number: Block the transfer was mined in
        gas_used: Gas consumed by the transfer
        amount: Tokens debited (whole tokens)
        operation: Operation kind the debit paid for
    """
    tx_hash: str
    block_number: int
    gas_used: int
    amount: Decimal
    operation: str


@dataclass
class SaveSuccessDetails:
    filename: str = ""
    cid: str = ""
    gateway_url: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.filename


@dataclass
class OperationResult(Generic[T]):
    """Outcome of a UI-facing workflow.

    Attributes:
        operation: Workflow name ("save", "save_as", "print", "new")
        ok: Whether the workflow completed
        value: Workflow result on success
        error: The terminal error on failure
        message: Plain-language message shown to the user, if any
    """
    operation: str
    ok: bool
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None
