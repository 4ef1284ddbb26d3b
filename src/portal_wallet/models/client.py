"""Custodian and enclave payload models."""
from __future__ import annotations

import logging
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from .base import PortalModel
from .share import Curve

logger = logging.getLogger(__name__)

# Curve family each address namespace is derived with.
NAMESPACE_CURVES: dict[str, Curve] = {
    "eip155": Curve.SECP256K1,
    "solana": Curve.ED25519,
    "tron": Curve.SECP256K1,
    "stellar": Curve.ED25519,
}


class CreateClientResponse(PortalModel):
    """A freshly provisioned custodial client."""

    id: str
    client_api_key: str
    client_session_token: Optional[str] = None
    is_account_abstracted: bool = False

    def __repr__(self) -> str:
        return f"CreateClientResponse(id={self.id!r})"


class SessionToken(PortalModel):
    """Short-lived credential scoped to one client."""

    id: str
    client_session_token: str
    is_account_abstracted: bool = False

    def __repr__(self) -> str:
        return f"SessionToken(id={self.id!r})"


class GeneratedShare(PortalModel):
    """One curve's output of remote key generation."""

    id: str
    share: str

    def __repr__(self) -> str:
        return f"GeneratedShare(id={self.id!r})"


class CreateWalletResponse(PortalModel):
    """Both curves' shares from a single ``/generate`` call."""

    secp256k1: GeneratedShare = Field(alias="SECP256K1")
    ed25519: GeneratedShare = Field(alias="ED25519")

    def for_curve(self, curve: Curve | str) -> GeneratedShare:
        return self.secp256k1 if Curve(curve) == Curve.SECP256K1 else self.ed25519

    def signing_share_pair_ids(self) -> List[str]:
        return [self.ed25519.id, self.secp256k1.id]


class UpdateWalletStatusRequest(PortalModel):
    status: Literal["STORED_CLIENT"] = "STORED_CLIENT"
    signing_share_pair_ids: List[str]


class SignedTransaction(PortalModel):
    signature: str
    signed_transaction: str


class Custodian(PortalModel):
    id: str
    name: str


class Environment(PortalModel):
    id: str
    name: str


class NamespaceAddress(PortalModel):
    address: str
    curve: Curve


class Namespaces(PortalModel):
    """Per-namespace addresses; at most one per namespace."""

    eip155: Optional[NamespaceAddress] = None
    solana: Optional[NamespaceAddress] = None
    tron: Optional[NamespaceAddress] = None
    stellar: Optional[NamespaceAddress] = None

    def curve_mismatches(self) -> List[str]:
        """Namespaces whose address does not use the curve its family requires."""
        return [
            namespace
            for namespace, expected in NAMESPACE_CURVES.items()
            if getattr(self, namespace) is not None and getattr(self, namespace).curve != expected
        ]

    @model_validator(mode="after")
    def _check_curves(self) -> "Namespaces":
        # Remote records are kept as-is; a mismatch is reported, not rejected.
        for namespace in self.curve_mismatches():
            logger.warning(
                "%s address uses curve %s, expected %s",
                namespace,
                getattr(self, namespace).curve,
                NAMESPACE_CURVES[namespace].value,
            )
        return self


class ClientMetadata(PortalModel):
    namespaces: Namespaces = Field(default_factory=Namespaces)


class BackupSharePair(PortalModel):
    id: str
    backup_method: str
    created_at: str
    status: str


class SigningSharePair(PortalModel):
    id: str
    created_at: str
    status: str


class WalletKey(PortalModel):
    """An underlying MPC key held by a client."""

    id: str
    created_at: str
    curve: Curve
    public_key: str
    backup_share_pairs: List[BackupSharePair] = Field(default_factory=list)
    signing_share_pairs: List[SigningSharePair] = Field(default_factory=list)


class ClientDetail(PortalModel):
    """Full client/wallet record owned by the custodian."""

    id: str
    created_at: str
    ejected_at: Optional[str] = None
    is_account_abstracted: bool = False
    custodian: Optional[Custodian] = None
    environment: Optional[Environment] = None
    metadata: ClientMetadata = Field(default_factory=ClientMetadata)
    wallets: List[WalletKey] = Field(default_factory=list)

    @property
    def is_ejected(self) -> bool:
        return self.ejected_at is not None

    def address_for(self, namespace: str) -> Optional[str]:
        """Return the client's address in ``namespace``, if it has one."""
        if namespace not in NAMESPACE_CURVES:
            return None
        entry = getattr(self.metadata.namespaces, namespace, None)
        return entry.address if entry else None


class ClientList(PortalModel):
    results: List[ClientDetail] = Field(default_factory=list)
