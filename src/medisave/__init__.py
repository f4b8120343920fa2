"""
medisave - token-metered saving, printing and IPFS archiving for a
medical spreadsheet editor.

Quick Start:
    >>> from medisave import create_orchestrator, UploadMethod
    >>> import asyncio
    >>>
    >>> async def main():
    ...     orchestrator = await create_orchestrator(engine, presenter, {"default": TEMPLATE})
    ...     print(f"Balance: {orchestrator.balance_display} MEDT")
    ...     task = asyncio.create_task(orchestrator.save_as("Blood Panel"))
    ...     orchestrator.resolve_upload_method(UploadMethod.LIGHTHOUSE)
    ...     result = await task
    ...     print(result.value.gateway_url if result.ok else result.message)
    ...
    >>> asyncio.run(main())

Modules:
- `orchestrator`: New, Save, Save As and Print workflows
- `guard`: balance check and debit in front of metered effects
- `ledger`: network resolution, MediToken balance reads and debits
- `selector`: upload method prompt and account readiness
- `storage`: Storacha and Lighthouse upload backends
- `errors`: exception hierarchy
- `utils`: logging, validation and content encoding
"""

from medisave.version import __version__, __version_info__

# Configuration
from medisave.config import (
    DEFAULT_TOKEN_COSTS,
    NETWORKS,
    Network,
    NetworkEnvironment,
    OperationKind,
    TokenCosts,
    get_network_environment,
)
from medisave.settings import Settings

# Errors
from medisave.errors import (
    AccountNotConfiguredError,
    BalanceUnknownError,
    CollaboratorError,
    DebitFailedError,
    DocumentNotSavableError,
    EffectFailedAfterDebitError,
    GuardError,
    InsufficientFundsError,
    InteractionCancelledError,
    InteractionError,
    InteractionPendingError,
    InvalidFilenameError,
    LedgerError,
    LedgerReadError,
    LighthouseUploadError,
    MediSaveError,
    NoPendingInteractionError,
    StorachaUploadError,
    StorageError,
    TransactionRejectedError,
    TransactionRevertedError,
    TransactionTimeoutError,
    UnsupportedNetworkError,
    UploadError,
    WorkflowError,
)

# Models
from medisave.models import (
    AccountReadiness,
    ContentAddress,
    FileData,
    FileRecord,
    OperationResult,
    SaveSuccessDetails,
    StorachaAccount,
    TransactionReceipt,
    UploadMethod,
)

# Components
from medisave.factory import create_orchestrator
from medisave.guard import PaymentGuard
from medisave.interaction import InteractionSlot
from medisave.ledger import BalanceMonitor, NetworkResolver, TokenLedgerClient
from medisave.local import (
    InMemoryAccountSetupProvider,
    InMemoryFileStore,
    JsonAccountSetupProvider,
    JsonFileStore,
)
from medisave.orchestrator import SaveOrchestrator
from medisave.selector import UploadMethodSelector
from medisave.storage import (
    LighthouseClient,
    LighthouseConfig,
    StorachaClient,
    StorachaConfig,
    UploadBackend,
)
from medisave.wallet import WalletSession

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Configuration
    "Network",
    "NetworkEnvironment",
    "NETWORKS",
    "get_network_environment",
    "OperationKind",
    "TokenCosts",
    "DEFAULT_TOKEN_COSTS",
    "Settings",
    # Errors
    "MediSaveError",
    "LedgerError",
    "UnsupportedNetworkError",
    "LedgerReadError",
    "GuardError",
    "BalanceUnknownError",
    "InsufficientFundsError",
    "DebitFailedError",
    "TransactionRejectedError",
    "TransactionRevertedError",
    "TransactionTimeoutError",
    "EffectFailedAfterDebitError",
    "StorageError",
    "UploadError",
    "StorachaUploadError",
    "LighthouseUploadError",
    "AccountNotConfiguredError",
    "WorkflowError",
    "CollaboratorError",
    "InvalidFilenameError",
    "DocumentNotSavableError",
    "InteractionError",
    "InteractionPendingError",
    "NoPendingInteractionError",
    "InteractionCancelledError",
    # Models
    "UploadMethod",
    "AccountReadiness",
    "StorachaAccount",
    "FileRecord",
    "FileData",
    "ContentAddress",
    "TransactionReceipt",
    "SaveSuccessDetails",
    "OperationResult",
    # Components
    "create_orchestrator",
    "SaveOrchestrator",
    "PaymentGuard",
    "InteractionSlot",
    "UploadMethodSelector",
    "NetworkResolver",
    "TokenLedgerClient",
    "BalanceMonitor",
    "WalletSession",
    "UploadBackend",
    "StorachaClient",
    "StorachaConfig",
    "LighthouseClient",
    "LighthouseConfig",
    "InMemoryFileStore",
    "JsonFileStore",
    "InMemoryAccountSetupProvider",
    "JsonAccountSetupProvider",
]
