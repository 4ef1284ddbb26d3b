"""
Chain registry: routing metadata for every chain the wallet can use.

Chain ids are CAIP-2 style ``<namespace>:<reference>`` strings. Each
descriptor carries its RPC endpoint (Portal's RPC gateway) and the curve
family its addresses are derived with.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .config import DEFAULT_RPC_BASE_URL
from .models.share import Curve

logger = logging.getLogger(__name__)

# Only these chains sign with ED25519; every other chain id uses SECP256K1.
ED25519_CHAIN_IDS: frozenset[str] = frozenset({
    "solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp",  # Solana Mainnet
    "solana:EtWTRABZaYq6iMfeYKouRu166VU2xqa1",  # Solana Devnet
    "stellar:pubnet",
    "stellar:testnet",
})

# (id, display name, chain id)
CHAIN_CATALOG: Tuple[Tuple[str, str, str], ...] = (
    ("solana", "Solana Mainnet", "solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp"),
    ("solana-devnet", "Solana Devnet", "solana:EtWTRABZaYq6iMfeYKouRu166VU2xqa1"),
    ("bitcoin", "Bitcoin", "bip122:000000000019d6689c085ae165831e93-p2wpkh"),
    ("bitcoin-testnet", "Bitcoin Testnet", "bip122:000000000933ea01ad0ee984209779ba-p2wpkh"),
    ("tron", "Tron", "tron:mainnet"),
    ("tron-nile", "Tron Nile", "tron:nile"),
    ("tron-shasta", "Tron Shasta", "tron:shasta"),
    ("stellar", "Stellar", "stellar:pubnet"),
    ("stellar-testnet", "Stellar Testnet", "stellar:testnet"),
    ("ethereum", "Ethereum Mainnet", "eip155:1"),
    ("sepolia", "Ethereum Sepolia", "eip155:11155111"),
    ("base", "Base Mainnet", "eip155:8453"),
    ("base-sepolia", "Base Sepolia", "eip155:84532"),
    ("polygon", "Polygon Mainnet", "eip155:137"),
    ("polygon-amoy", "Polygon Amoy", "eip155:80002"),
    ("optimism", "Optimism Mainnet", "eip155:10"),
    ("bsc", "Binance Smart Chain", "eip155:56"),
    ("bsc-testnet", "Binance Smart Chain Testnet", "eip155:97"),
    ("fantom", "Fantom", "eip155:250"),
    ("moonbeam", "Moonbeam", "eip155:1284"),
    ("arbitrum", "Arbitrum Mainnet", "eip155:42161"),
    ("arbitrum-sepolia", "Arbitrum Sepolia", "eip155:421614"),
    ("avalanche", "Avalanche Mainnet", "eip155:43114"),
    ("linea", "Linea Mainnet", "eip155:59144"),
    ("celo", "Celo", "eip155:42220"),
    ("celo-alfajores", "Celo Alfajores Testnet", "eip155:44787"),
)


def curve_for_chain(chain_id: str) -> Curve:
    """Classify a chain id into its signing curve."""
    return Curve.ED25519 if chain_id in ED25519_CHAIN_IDS else Curve.SECP256K1


def split_chain_id(chain_id: str) -> Tuple[str, str]:
    """Split ``namespace:reference``; raises ValueError if malformed."""
    namespace, sep, reference = chain_id.partition(":")
    if not sep or not namespace or not reference:
        raise ValueError(f"Malformed chain id: {chain_id!r}")
    return namespace, reference


@dataclass(frozen=True)
class ChainDescriptor:
    """Static routing metadata for one chain."""

    id: str
    name: str
    chain_id: str
    rpc_url: str
    curve: Curve

    @property
    def namespace(self) -> str:
        return split_chain_id(self.chain_id)[0]


class ChainRegistry:
    """Read-only lookup from chain id to descriptor.

    Built once at startup; the curve of each entry is derived from
    ``ED25519_CHAIN_IDS`` at construction time.
    """

    def __init__(self, descriptors: Iterable[ChainDescriptor]):
        self._by_chain_id: Dict[str, ChainDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.chain_id in self._by_chain_id:
                raise ValueError(f"Duplicate chain id in registry: {descriptor.chain_id}")
            self._by_chain_id[descriptor.chain_id] = descriptor

    @classmethod
    def from_catalog(
        cls,
        catalog: Iterable[Tuple[str, str, str]] = CHAIN_CATALOG,
        rpc_base_url: str = DEFAULT_RPC_BASE_URL,
    ) -> "ChainRegistry":
        """Build a registry routing every chain through the Portal RPC gateway."""
        base = rpc_base_url.rstrip("/")
        descriptors = []
        for ident, name, chain_id in catalog:
            namespace, reference = split_chain_id(chain_id)
            descriptors.append(
                ChainDescriptor(
                    id=ident,
                    name=name,
                    chain_id=chain_id,
                    rpc_url=f"{base}/{namespace}/{reference}",
                    curve=curve_for_chain(chain_id),
                )
            )
        registry = cls(descriptors)
        logger.debug("Chain registry loaded with %d chains", len(descriptors))
        return registry

    def get(self, chain_id: str) -> Optional[ChainDescriptor]:
        return self._by_chain_id.get(chain_id)

    def resolve_rpc_url(self, chain_id: str) -> Optional[str]:
        """Return the RPC endpoint for ``chain_id``, or None if unknown."""
        descriptor = self._by_chain_id.get(chain_id)
        return descriptor.rpc_url if descriptor else None

    def curve_for_chain(self, chain_id: str) -> Curve:
        """Curve for a chain; chains outside the registry default to SECP256K1."""
        descriptor = self._by_chain_id.get(chain_id)
        return descriptor.curve if descriptor else curve_for_chain(chain_id)

    def list_chains(self) -> List[ChainDescriptor]:
        return list(self._by_chain_id.values())

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._by_chain_id

    def __len__(self) -> int:
        return len(self._by_chain_id)
