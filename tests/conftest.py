"""
Pytest configuration and fixtures for portal_wallet tests.
"""
from __future__ import annotations

import copy

import pytest

from portal_wallet.chains import ChainRegistry
from portal_wallet.config import PortalSettings
from portal_wallet.gateway import PortalGateway
from portal_wallet.share_store import ShareStore

CUSTODIAN_URL = "https://api.portalhq.io/api/v3/custodians"
CLIENT_URL = "https://api.portalhq.io/api/v3/clients"
ENCLAVE_URL = "https://mpc-client.portalhq.io/v1"
RPC_BASE_URL = "https://api.portalhq.io/rpc/v1"

CUSTODIAN_KEY = "test-custodian-key"
CLIENT_ID = "cl_test123"


# Mock response data
MOCK_RESPONSES = {
    "create_client": {
        "id": CLIENT_ID,
        "clientApiKey": "client-api-key-abc",
        "clientSessionToken": "session-initial",
        "isAccountAbstracted": False,
    },
    "session": {
        "id": CLIENT_ID,
        "clientSessionToken": "session-xyz",
        "isAccountAbstracted": False,
    },
    "generate": {
        "SECP256K1": {"id": "ssp_secp_1", "share": "secp-share-blob"},
        "ED25519": {"id": "ssp_ed_1", "share": "ed-share-blob"},
    },
    "client_detail": {
        "id": CLIENT_ID,
        "createdAt": "2025-01-20T00:00:00.000Z",
        "ejectedAt": None,
        "isAccountAbstracted": False,
        "custodian": {"id": "cust_1", "name": "Demo Custodian"},
        "environment": {"id": "env_1", "name": "Testnet"},
        "metadata": {
            "namespaces": {
                "eip155": {"address": "0x1234567890abcdef1234567890abcdef12345678", "curve": "SECP256K1"},
                "solana": {"address": "7EcDhSYGxXyscszYEp35KHN8vvw3svAuLKTzXwCFLtV", "curve": "ED25519"},
                "tron": {"address": "TXYZopYRdj2D9XRtbG411XZZ3kM5VkAeBf", "curve": "SECP256K1"},
                "stellar": {
                    "address": "GAHK7EEG2WWHVKDNT4CEQFZGKF2LGDSW2IVM4S5DP42RBW3K6BTODB4A",
                    "curve": "ED25519",
                },
            }
        },
        "wallets": [
            {
                "id": "wal_secp",
                "createdAt": "2025-01-20T00:00:00.000Z",
                "curve": "SECP256K1",
                "publicKey": "04abcdef",
                "backupSharePairs": [],
                "signingSharePairs": [
                    {"id": "ssp_secp_1", "createdAt": "2025-01-20T00:00:00.000Z", "status": "completed"}
                ],
            },
            {
                "id": "wal_ed",
                "createdAt": "2025-01-20T00:00:00.000Z",
                "curve": "ED25519",
                "publicKey": "ed25519pub",
                "backupSharePairs": [
                    {
                        "id": "bsp_1",
                        "backupMethod": "CUSTOM",
                        "createdAt": "2025-01-20T00:00:00.000Z",
                        "status": "completed",
                    }
                ],
                "signingSharePairs": [
                    {"id": "ssp_ed_1", "createdAt": "2025-01-20T00:00:00.000Z", "status": "completed"}
                ],
            },
        ],
    },
    "assets": {
        "nativeBalance": {
            "balance": "0.5",
            "decimals": 18,
            "name": "Ether",
            "rawBalance": "500000000000000000",
            "symbol": "ETH",
            "metadata": {},
        },
        "tokenBalances": [
            {
                "balance": "10",
                "decimals": 6,
                "name": "USD Coin",
                "rawBalance": "10000000",
                "symbol": "USDC",
                "metadata": {"tokenAddress": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"},
            }
        ],
        "nfts": [
            {
                "nftId": "nft_1",
                "name": "Punk #1",
                "chainId": "eip155:1",
                "contractAddress": "0xb47e3cd837ddf8e4c57f05d70ab865de6e193bbb",
                "tokenId": "1",
                "rarity": {"rank": 3, "score": 99.1},
            }
        ],
    },
    "signed": {
        "signature": "0xsig",
        "signedTransaction": "0xsignedtx",
    },
}


@pytest.fixture
def mock_responses() -> dict:
    """Return a deep copy of the mock response data."""
    return copy.deepcopy(MOCK_RESPONSES)


@pytest.fixture
def settings(tmp_path) -> PortalSettings:
    """Settings isolated from the host environment."""
    return PortalSettings(
        _env_file=None,
        custodian_api_key=CUSTODIAN_KEY,
        share_store_path=tmp_path / "data" / "db.json",
    )


@pytest.fixture
def registry() -> ChainRegistry:
    return ChainRegistry.from_catalog(rpc_base_url=RPC_BASE_URL)


@pytest.fixture
async def share_store(settings) -> ShareStore:
    store = ShareStore(settings.share_store_path)
    await store.open()
    return store


@pytest.fixture
async def gateway(settings, registry) -> PortalGateway:
    gateway = PortalGateway(settings, registry)
    yield gateway
    await gateway.close()
