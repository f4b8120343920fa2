"""
Shared fixtures for medisave tests.

The fakes record every externally visible step into one shared ``CallLog``
so tests can assert on ordering (balance read, debit, upload, persist).
"""

import asyncio
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import pytest

from medisave.config import (
    Network,
    NetworkEnvironment,
    OperationKind,
    TokenCosts,
)
from medisave.guard import PaymentGuard
from medisave.ledger.balance import BalanceMonitor
from medisave.ledger.network import NetworkResolver
from medisave.local import InMemoryAccountSetupProvider, InMemoryFileStore
from medisave.models import (
    ContentAddress,
    FileData,
    FileRecord,
    StorachaAccount,
    TransactionReceipt,
    UploadMethod,
)
from medisave.orchestrator import SaveOrchestrator
from medisave.selector import UploadMethodSelector
from medisave.storage.base import UploadBackend


# =============================================================================
# Test Constants
# =============================================================================

ACCOUNT = "0x1234567890123456789012345678901234567890"
TOKEN_CONTRACT = "0x00000000000000000000000000000000000000A1"
INVOICE_CONTRACT = "0x00000000000000000000000000000000000000B2"

SEPOLIA_ID = 11155111
AMOY_ID = 80002

VALID_CID_V0 = "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"
VALID_CID_V1 = "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi"

DEFAULT_TEMPLATE = '{"sheet": "default"}'
IPAD_TEMPLATE = '{"sheet": "ipad"}'

TEST_COSTS = TokenCosts(SAVE=Decimal("2"), SAVE_AS=Decimal("3"), PRINT=Decimal("1"))


def make_environment(network: Network, chain_id: int) -> NetworkEnvironment:
    return NetworkEnvironment(
        name=network,
        chain_id=chain_id,
        rpc_url=f"https://rpc.invalid/{network.value}",
        token_contract=TOKEN_CONTRACT,
        invoice_contract=INVOICE_CONTRACT,
    )


SEPOLIA_ENV = make_environment(Network.SEPOLIA, SEPOLIA_ID)
AMOY_ENV = make_environment(Network.POLYGON_AMOY, AMOY_ID)


# =============================================================================
# Instrumented fakes
# =============================================================================


class CallLog(list):
    """Ordered record of ``(event, *details)`` tuples."""

    def events(self) -> List[str]:
        return [entry[0] for entry in self]

    def count_of(self, event: str) -> int:
        return sum(1 for entry in self if entry[0] == event)


class FakeWallet:
    """Wallet session stand-in: fixed address, switchable chain id."""

    def __init__(self, log: CallLog, chain_id: Any = SEPOLIA_ID) -> None:
        self.log = log
        self.address = ACCOUNT
        self.chain_id = chain_id
        self.chain_ids: List[Any] = []
        self._listeners: list = []

    async def get_chain_id(self) -> Any:
        chain_id = self.chain_ids.pop(0) if self.chain_ids else self.chain_id
        return chain_id

    def on_network_change(self, listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def notify_network_change(self, chain_id: Any) -> None:
        self.chain_id = chain_id
        for listener in list(self._listeners):
            result = listener(chain_id)
            if asyncio.iscoroutine(result):
                await result


class FakeLedger:
    """Token ledger keeping one balance per chain id."""

    def __init__(self, log: CallLog, balance: Decimal = Decimal("10")) -> None:
        self.log = log
        self.balances: Dict[int, Decimal] = {SEPOLIA_ID: balance, AMOY_ID: balance}
        self.read_error: Optional[Exception] = None
        self.debit_error: Optional[Exception] = None
        self.debits: List[Tuple[int, Decimal, str]] = []

    async def get_balance(self, account: str, environment: NetworkEnvironment) -> Decimal:
        self.log.append(("balance", environment.chain_id))
        if self.read_error is not None:
            raise self.read_error
        return self.balances[environment.chain_id]

    async def debit(
        self,
        environment: NetworkEnvironment,
        cost: Decimal,
        operation: OperationKind,
    ) -> TransactionReceipt:
        op = OperationKind(operation).value
        self.log.append(("debit", op, cost))
        if self.debit_error is not None:
            raise self.debit_error
        self.balances[environment.chain_id] -= cost
        self.debits.append((environment.chain_id, cost, op))
        return TransactionReceipt(
            tx_hash="0x" + "ab" * 32,
            block_number=100,
            gas_used=51_000,
            amount=cost,
            operation=op,
        )


class FakeBackend(UploadBackend):
    """Upload backend returning a fixed CID."""

    def __init__(self, method: UploadMethod, log: CallLog, cid: str = VALID_CID_V1) -> None:
        super().__init__(60000, 1024 * 1024)
        self.method = method
        self.log = log
        self.cid = cid
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.uploads: List[FileData] = []

    async def upload(self, file_data: FileData) -> ContentAddress:
        self.log.append(("upload", self.method.value, file_data.name))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        self.uploads.append(file_data)
        return ContentAddress(cid=self.cid, method=self.method)


class RecordingFileStore(InMemoryFileStore):
    def __init__(self, log: CallLog) -> None:
        super().__init__()
        self.log = log
        self.error: Optional[Exception] = None

    def save_file(self, record: FileRecord) -> None:
        self.log.append(("persist", record.name))
        if self.error is not None:
            raise self.error
        super().save_file(record)


class RecordingPresenter:
    """Presenter that records every call."""

    def __init__(self, log: CallLog) -> None:
        self.log = log
        self.calls: List[Tuple[str, Any]] = []
        self.alerts: List[str] = []
        self.printed: List[str] = []
        self.clipboard: List[str] = []
        self.method_choice_visible = False
        self.setup_visible = False
        self.success: Any = None

    def _record(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        self.log.append(("presenter", name))

    def show_method_choice(self, methods) -> None:
        self._record("show_method_choice", tuple(methods))
        self.method_choice_visible = True

    def hide_method_choice(self) -> None:
        self._record("hide_method_choice")
        self.method_choice_visible = False

    def show_setup_required(self, method) -> None:
        self._record("show_setup_required", method)
        self.setup_visible = True

    def hide_setup_required(self) -> None:
        self._record("hide_setup_required")
        self.setup_visible = False

    def show_save_success(self, details) -> None:
        self._record("show_save_success", details)
        self.success = details

    def hide_save_success(self) -> None:
        self._record("hide_save_success")
        self.success = None

    def alert(self, message: str) -> None:
        self._record("alert", message)
        self.alerts.append(message)

    def print_markup(self, markup: str) -> None:
        self._record("print_markup", markup)
        self.printed.append(markup)

    def copy_to_clipboard(self, text: str) -> None:
        self._record("copy_to_clipboard", text)
        self.clipboard.append(text)


class FakeEngine:
    def __init__(self) -> None:
        self.content = "cell A1=Hemoglobin 13.5 g/dL"
        self.markup = "<table><tr><td>Hemoglobin</td></tr></table>"
        self.device = "default"
        self.loaded: List[Tuple[str, str]] = []

    def get_serialized_content(self) -> str:
        return self.content

    def get_renderable_content(self) -> str:
        return self.markup

    def get_device_profile(self) -> str:
        return self.device

    def load_document(self, name: str, template_json: str) -> None:
        self.loaded.append((name, template_json))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def wallet(call_log: CallLog) -> FakeWallet:
    return FakeWallet(call_log)


@pytest.fixture
def ledger(call_log: CallLog) -> FakeLedger:
    return FakeLedger(call_log)


@pytest.fixture
def resolver(wallet: FakeWallet) -> NetworkResolver:
    return NetworkResolver([SEPOLIA_ENV, AMOY_ENV], wallet=wallet)


@pytest.fixture
def monitor(ledger: FakeLedger, resolver: NetworkResolver, wallet: FakeWallet) -> BalanceMonitor:
    return BalanceMonitor(ledger, resolver, wallet)


@pytest.fixture
def guard(
    ledger: FakeLedger,
    resolver: NetworkResolver,
    wallet: FakeWallet,
    monitor: BalanceMonitor,
) -> PaymentGuard:
    return PaymentGuard(ledger, resolver, wallet, costs=TEST_COSTS, balance_monitor=monitor)


@pytest.fixture
def presenter(call_log: CallLog) -> RecordingPresenter:
    return RecordingPresenter(call_log)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def file_store(call_log: CallLog) -> RecordingFileStore:
    return RecordingFileStore(call_log)


@pytest.fixture
def setup_provider() -> InMemoryAccountSetupProvider:
    return InMemoryAccountSetupProvider(
        StorachaAccount(email="doctor@example.com", space="did:key:z6MkSpace")
    )


@pytest.fixture
def backends(call_log: CallLog) -> Dict[UploadMethod, FakeBackend]:
    return {
        UploadMethod.STORACHA: FakeBackend(UploadMethod.STORACHA, call_log),
        UploadMethod.LIGHTHOUSE: FakeBackend(UploadMethod.LIGHTHOUSE, call_log, cid=VALID_CID_V0),
    }


@pytest.fixture
def selector(presenter: RecordingPresenter, setup_provider) -> UploadMethodSelector:
    return UploadMethodSelector(presenter, setup_provider)


@pytest.fixture
def selections() -> List[str]:
    return []


@pytest.fixture
def make_orchestrator(
    engine: FakeEngine,
    file_store: RecordingFileStore,
    presenter: RecordingPresenter,
    guard: PaymentGuard,
    selector: UploadMethodSelector,
    backends,
    wallet: FakeWallet,
    monitor: BalanceMonitor,
    selections: List[str],
):
    """Build a SaveOrchestrator from the shared fakes; keyword overrides win."""

    def _make(**overrides) -> SaveOrchestrator:
        kwargs = dict(
            engine=engine,
            file_store=file_store,
            presenter=presenter,
            guard=guard,
            selector=selector,
            backends=backends,
            wallet=wallet,
            balance_monitor=monitor,
            default_templates={"default": DEFAULT_TEMPLATE, "iPad": IPAD_TEMPLATE},
            on_selection_changed=selections.append,
        )
        kwargs.update(overrides)
        return SaveOrchestrator(**kwargs)

    return _make


@pytest.fixture
def orchestrator(make_orchestrator) -> SaveOrchestrator:
    return make_orchestrator()


@pytest.fixture
def wait_until():
    """Yield to the event loop until ``predicate()`` holds."""

    async def _wait(predicate, attempts: int = 100) -> None:
        for _ in range(attempts):
            if predicate():
                return
            await asyncio.sleep(0)
        raise AssertionError("condition not reached")

    return _wait
