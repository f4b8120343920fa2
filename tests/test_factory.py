"""
Tests for create_orchestrator wiring.
"""

import asyncio
from types import SimpleNamespace

import pytest

from medisave.factory import create_orchestrator
from medisave.models import UploadMethod
from medisave.settings import Settings
from medisave.storage import LighthouseClient, StorachaClient

from .conftest import DEFAULT_TEMPLATE, CallLog, FakeEngine, RecordingPresenter


class UnsupportedChainEth:
    @property
    def chain_id(self):
        return asyncio.sleep(0, result=1)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(private_key="0x" + "11" * 32, data_dir=tmp_path, log_level="CRITICAL")


class TestCreateOrchestrator:
    @pytest.mark.asyncio
    async def test_wires_and_attaches(self, settings) -> None:
        presenter = RecordingPresenter(CallLog())
        w3 = SimpleNamespace(eth=UnsupportedChainEth())

        orchestrator = await create_orchestrator(
            FakeEngine(), presenter, {"default": DEFAULT_TEMPLATE}, settings=settings, w3=w3
        )

        assert orchestrator.available_methods == (UploadMethod.STORACHA, UploadMethod.LIGHTHOUSE)
        assert isinstance(orchestrator._backends[UploadMethod.STORACHA], StorachaClient)
        assert isinstance(orchestrator._backends[UploadMethod.LIGHTHOUSE], LighthouseClient)
        # Unsupported chain: balance stays unknown, attach still succeeds
        assert orchestrator.balance is None
        assert orchestrator.balance_display == "0.00"
        assert orchestrator._wallet.listener_count == 1

    @pytest.mark.asyncio
    async def test_new_file_uses_json_store(self, settings) -> None:
        orchestrator = await create_orchestrator(
            FakeEngine(),
            RecordingPresenter(CallLog()),
            {"default": DEFAULT_TEMPLATE},
            settings=settings,
            w3=SimpleNamespace(eth=UnsupportedChainEth()),
        )
        orchestrator._active_file = "Blood Panel"

        assert orchestrator.new_file().ok
        assert settings.files_path.exists()

    @pytest.mark.asyncio
    async def test_private_key_required(self, tmp_path) -> None:
        with pytest.raises(ValueError, match="MEDISAVE_PRIVATE_KEY"):
            await create_orchestrator(
                FakeEngine(),
                RecordingPresenter(CallLog()),
                {"default": DEFAULT_TEMPLATE},
                settings=Settings(data_dir=tmp_path),
            )
