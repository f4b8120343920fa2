"""
medisave exception hierarchy.

All exceptions derive from MediSaveError:

- LedgerError: network resolution and balance reads
- GuardError: balance check, debit and post-debit effect failures
- StorageError: uploads and backend account setup
- WorkflowError: filename validation, template saves, prompts, host
  collaborator failures
"""

from medisave.errors.base import MediSaveError
from medisave.errors.ledger import (
    BalanceUnknownError,
    DebitFailedError,
    EffectFailedAfterDebitError,
    GuardError,
    InsufficientFundsError,
    LedgerError,
    LedgerReadError,
    TransactionRejectedError,
    TransactionRevertedError,
    TransactionTimeoutError,
    UnsupportedNetworkError,
)
from medisave.errors.storage import (
    AccountNotConfiguredError,
    FileSizeLimitError,
    LighthouseUploadError,
    StorachaUploadError,
    StorageError,
    UploadError,
)
from medisave.errors.workflow import (
    CollaboratorError,
    DocumentNotSavableError,
    InteractionCancelledError,
    InteractionError,
    InteractionPendingError,
    InvalidFilenameError,
    NoPendingInteractionError,
    WorkflowError,
)

__all__ = [
    # Base
    "MediSaveError",
    # Ledger
    "LedgerError",
    "UnsupportedNetworkError",
    "LedgerReadError",
    # Guard
    "GuardError",
    "BalanceUnknownError",
    "InsufficientFundsError",
    "DebitFailedError",
    "TransactionRejectedError",
    "TransactionRevertedError",
    "TransactionTimeoutError",
    "EffectFailedAfterDebitError",
    # Storage
    "StorageError",
    "UploadError",
    "StorachaUploadError",
    "LighthouseUploadError",
    "FileSizeLimitError",
    "AccountNotConfiguredError",
    # Workflow
    "WorkflowError",
    "CollaboratorError",
    "InvalidFilenameError",
    "DocumentNotSavableError",
    "InteractionError",
    "InteractionPendingError",
    "NoPendingInteractionError",
    "InteractionCancelledError",
]
