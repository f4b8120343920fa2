"""
Wiring of a ready-to-use SaveOrchestrator from Settings.
"""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from web3 import AsyncWeb3

from medisave.collaborators import AccountSetupProvider, DocumentEngine, FileStore, Presenter
from medisave.guard import PaymentGuard
from medisave.ledger.balance import BalanceMonitor
from medisave.ledger.client import TokenLedgerClient
from medisave.ledger.network import NetworkResolver
from medisave.local import JsonAccountSetupProvider, JsonFileStore
from medisave.models import UploadMethod
from medisave.orchestrator import SaveOrchestrator
from medisave.selector import UploadMethodSelector
from medisave.settings import Settings
from medisave.storage import LighthouseClient, StorachaClient
from medisave.utils.logging import configure_logging
from medisave.wallet import WalletSession


async def create_orchestrator(
    engine: DocumentEngine,
    presenter: Presenter,
    default_templates: Mapping[str, str],
    settings: Optional[Settings] = None,
    file_store: Optional[FileStore] = None,
    setup_provider: Optional[AccountSetupProvider] = None,
    on_selection_changed: Optional[Callable[[str], None]] = None,
    w3: Optional[AsyncWeb3] = None,
) -> SaveOrchestrator:
    """
    Build every component from ``settings`` and attach the orchestrator.

    Args:
        engine: Spreadsheet engine of the host editor
        presenter: Dialog and alert surface of the host editor
        default_templates: Template JSON per device profile ("default" required)
        settings: Settings to use (default: ``Settings.from_env()``)
        file_store: FileStore override (default: JSON file in the data dir)
        setup_provider: Account setup override (default: JSON file in the data dir)
        on_selection_changed: Called with the filename whenever it changes
        w3: Preconfigured AsyncWeb3 (tests, custom providers)

    Returns:
        Attached SaveOrchestrator with its balance already read

    Raises:
        ValueError: No private key configured, or it is malformed
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if not settings.private_key:
        raise ValueError("MEDISAVE_PRIVATE_KEY is not set")

    wallet = WalletSession.from_private_key(settings.private_key, settings.active_rpc_url, w3=w3)
    resolver = NetworkResolver(settings.environments(), wallet=wallet)
    ledger = TokenLedgerClient(wallet, confirmation_timeout=settings.confirmation_timeout)
    monitor = BalanceMonitor(ledger, resolver, wallet)
    guard = PaymentGuard(ledger, resolver, wallet, costs=settings.token_costs, balance_monitor=monitor)

    file_store = file_store or JsonFileStore(settings.files_path)
    setup_provider = setup_provider or JsonAccountSetupProvider(settings.accounts_path)
    backends = {
        UploadMethod.STORACHA: StorachaClient(settings.storacha, setup_provider),
        UploadMethod.LIGHTHOUSE: LighthouseClient(settings.lighthouse),
    }
    selector = UploadMethodSelector(presenter, setup_provider, methods=list(backends))

    orchestrator = SaveOrchestrator(
        engine=engine,
        file_store=file_store,
        presenter=presenter,
        guard=guard,
        selector=selector,
        backends=backends,
        wallet=wallet,
        balance_monitor=monitor,
        default_templates=default_templates,
        on_selection_changed=on_selection_changed,
    )
    await orchestrator.attach()
    return orchestrator
