"""Models for the Portal wallet backend."""

from .assets import AssetSnapshot, Nft, TokenBalance, TokenMetadata
from .base import PortalModel
from .client import (
    NAMESPACE_CURVES,
    BackupSharePair,
    ClientDetail,
    ClientList,
    ClientMetadata,
    CreateClientResponse,
    CreateWalletResponse,
    Custodian,
    Environment,
    GeneratedShare,
    NamespaceAddress,
    Namespaces,
    SessionToken,
    SignedTransaction,
    SigningSharePair,
    UpdateWalletStatusRequest,
    WalletKey,
)
from .errors import (
    APIError,
    ConfigurationError,
    GatewayError,
    PortalError,
    ProvisioningError,
    ShareNotFoundError,
    StorageError,
    TransportError,
    UnknownChainError,
    ValidationError,
)
from .share import Curve, SigningShare

__all__ = [
    "PortalModel",
    # Shares
    "Curve",
    "SigningShare",
    # Custodian / enclave payloads
    "NAMESPACE_CURVES",
    "BackupSharePair",
    "ClientDetail",
    "ClientList",
    "ClientMetadata",
    "CreateClientResponse",
    "CreateWalletResponse",
    "Custodian",
    "Environment",
    "GeneratedShare",
    "NamespaceAddress",
    "Namespaces",
    "SessionToken",
    "SignedTransaction",
    "SigningSharePair",
    "UpdateWalletStatusRequest",
    "WalletKey",
    # Assets
    "AssetSnapshot",
    "Nft",
    "TokenBalance",
    "TokenMetadata",
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
