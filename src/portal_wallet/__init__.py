"""
Portal Wallet

Backend-for-frontend over the Portal custodial MPC wallet API: provisions
two-curve (SECP256K1 + ED25519) wallets, keeps the returned signing shares
in a local store, and uses them to authorize transfers.

Example usage:
    ```python
    from portal_wallet import (
        ChainRegistry,
        PortalGateway,
        ShareStore,
        WalletService,
        load_settings,
    )

    settings = load_settings()
    registry = ChainRegistry.from_catalog(rpc_base_url=settings.rpc_base_url)
    store = ShareStore(settings.share_store_path)
    await store.open()

    async with PortalGateway(settings, registry) as gateway:
        service = WalletService(
            settings=settings, gateway=gateway, share_store=store, registry=registry
        )
        client = await service.provision_wallet()
        result = await service.transfer(
            client.id, "SECP256K1", "eip155:1", "0xabc", "1.5", "native"
        )
    ```
"""

from .chains import ChainDescriptor, ChainRegistry, curve_for_chain, ED25519_CHAIN_IDS
from .config import PortalSettings, load_settings
from .gateway import PortalGateway
from .models import (
    APIError,
    AssetSnapshot,
    ClientDetail,
    ConfigurationError,
    Curve,
    GatewayError,
    PortalError,
    ProvisioningError,
    ShareNotFoundError,
    SignedTransaction,
    SigningShare,
    StorageError,
    TransportError,
    UnknownChainError,
    ValidationError,
)
from .provisioning import ProvisioningOrchestrator, ProvisioningRun, ProvisioningStep
from .service import WalletService
from .share_store import ShareStore
from .transfers import TransferOrchestrator

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "PortalSettings",
    "load_settings",
    # Chains
    "ChainDescriptor",
    "ChainRegistry",
    "curve_for_chain",
    "ED25519_CHAIN_IDS",
    # Components
    "PortalGateway",
    "ShareStore",
    "ProvisioningOrchestrator",
    "ProvisioningRun",
    "ProvisioningStep",
    "TransferOrchestrator",
    "WalletService",
    # Models
    "AssetSnapshot",
    "ClientDetail",
    "Curve",
    "SignedTransaction",
    "SigningShare",
    # Errors
    "PortalError",
    "ConfigurationError",
    "ValidationError",
    "UnknownChainError",
    "ShareNotFoundError",
    "StorageError",
    "GatewayError",
    "APIError",
    "TransportError",
    "ProvisioningError",
]
