"""
Tests for the chain registry and curve classification.
"""
import pytest

from portal_wallet.chains import (
    CHAIN_CATALOG,
    ED25519_CHAIN_IDS,
    ChainDescriptor,
    ChainRegistry,
    curve_for_chain,
    split_chain_id,
)
from portal_wallet.models import Curve


class TestCurveForChain:
    """Tests for curve classification."""

    @pytest.mark.parametrize("chain_id", sorted(ED25519_CHAIN_IDS))
    def test_ed25519_chains(self, chain_id):
        """Should classify every allow-listed chain as ED25519."""
        assert curve_for_chain(chain_id) == Curve.ED25519

    @pytest.mark.parametrize(
        "chain_id",
        [
            "eip155:1",
            "eip155:42161",
            "tron:mainnet",
            "bip122:000000000019d6689c085ae165831e93-p2wpkh",
            "solana:unknown-genesis",
            "cosmos:cosmoshub-4",
        ],
    )
    def test_other_chains_default_to_secp256k1(self, chain_id):
        """Should default every other chain id to SECP256K1."""
        assert curve_for_chain(chain_id) == Curve.SECP256K1

    def test_registry_curves_match_allow_list(self, registry):
        """Descriptor curves should agree with the allow-list."""
        for descriptor in registry.list_chains():
            expected = Curve.ED25519 if descriptor.chain_id in ED25519_CHAIN_IDS else Curve.SECP256K1
            assert descriptor.curve == expected

    def test_registry_falls_back_for_unknown_chain(self, registry):
        assert registry.curve_for_chain("eip155:999999") == Curve.SECP256K1


class TestResolveRpcUrl:
    """Tests for RPC endpoint lookup."""

    def test_resolves_ethereum(self, registry):
        assert registry.resolve_rpc_url("eip155:1") == "https://api.portalhq.io/rpc/v1/eip155/1"

    def test_resolves_arbitrum_sepolia(self, registry):
        assert (
            registry.resolve_rpc_url("eip155:421614")
            == "https://api.portalhq.io/rpc/v1/eip155/421614"
        )

    def test_resolves_solana(self, registry):
        assert registry.resolve_rpc_url("solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp") == (
            "https://api.portalhq.io/rpc/v1/solana/5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp"
        )

    def test_unknown_chain_returns_none(self, registry):
        assert registry.resolve_rpc_url("eip155:999999") is None

    def test_custom_rpc_base_url(self):
        registry = ChainRegistry.from_catalog(rpc_base_url="https://rpc.example.com/")
        assert registry.resolve_rpc_url("eip155:8453") == "https://rpc.example.com/eip155/8453"


class TestChainRegistry:
    """Tests for registry construction."""

    def test_loads_full_catalog(self, registry):
        assert len(registry) == len(CHAIN_CATALOG)
        assert "stellar:testnet" in registry
        assert "eip155:0" not in registry

    def test_get_returns_descriptor(self, registry):
        descriptor = registry.get("eip155:1")
        assert descriptor.id == "ethereum"
        assert descriptor.name == "Ethereum Mainnet"
        assert descriptor.namespace == "eip155"

    def test_duplicate_chain_ids_rejected(self):
        descriptor = ChainDescriptor("a", "A", "eip155:1", "https://rpc", Curve.SECP256K1)
        with pytest.raises(ValueError, match="Duplicate"):
            ChainRegistry([descriptor, descriptor])

    def test_malformed_chain_id_rejected(self):
        with pytest.raises(ValueError, match="Malformed"):
            split_chain_id("ethereum")
