"""
Tests for NetworkResolver and chain id normalization.
"""

import pytest

from medisave.config import NETWORKS, Network
from medisave.errors import UnsupportedNetworkError
from medisave.ledger.network import NetworkResolver, normalize_chain_id

from ..conftest import AMOY_ENV, AMOY_ID, SEPOLIA_ENV, SEPOLIA_ID


class TestNormalizeChainId:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (11155111, 11155111),
            ("0xaa36a7", 11155111),
            ("0xAA36A7", 11155111),
            ("80002", 80002),
            (" 0x13882 ", 80002),
        ],
    )
    def test_accepted_forms(self, raw, expected) -> None:
        assert normalize_chain_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "0xzz", "sepolia", None, True, 1.5])
    def test_unparseable(self, raw) -> None:
        assert normalize_chain_id(raw) is None


class TestNetworkResolver:
    def test_default_table(self) -> None:
        resolver = NetworkResolver()
        env = resolver.resolve_environment("0xaa36a7")
        assert env is NETWORKS[Network.SEPOLIA]
        assert len(resolver.environments) == len(NETWORKS)

    def test_int_and_hex_resolve_identically(self) -> None:
        resolver = NetworkResolver([SEPOLIA_ENV, AMOY_ENV])
        assert resolver.resolve_environment(AMOY_ID) == resolver.resolve_environment(hex(AMOY_ID))

    def test_unsupported_network(self) -> None:
        resolver = NetworkResolver([SEPOLIA_ENV])

        with pytest.raises(UnsupportedNetworkError) as exc_info:
            resolver.resolve_environment("0x1")

        assert exc_info.value.requested_chain_id == "0x1"
        assert exc_info.value.details["requested_chain_id"] == "0x1"

    def test_garbage_chain_id_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedNetworkError):
            NetworkResolver([SEPOLIA_ENV]).resolve_environment("mainnet")

    @pytest.mark.asyncio
    async def test_resolve_active_reads_wallet_each_time(self, wallet) -> None:
        resolver = NetworkResolver([SEPOLIA_ENV, AMOY_ENV], wallet=wallet)

        assert (await resolver.resolve_active()).chain_id == SEPOLIA_ID
        wallet.chain_id = hex(AMOY_ID)
        assert (await resolver.resolve_active()).chain_id == AMOY_ID

    @pytest.mark.asyncio
    async def test_resolve_active_without_wallet(self) -> None:
        with pytest.raises(RuntimeError):
            await NetworkResolver().resolve_active()
