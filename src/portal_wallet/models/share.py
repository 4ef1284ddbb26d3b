"""Signing share records kept by the local share store."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import field_serializer

from .base import PortalModel


class Curve(str, Enum):
    """Signature curves supported by Portal wallets."""

    SECP256K1 = "SECP256K1"
    ED25519 = "ED25519"


class SigningShare(PortalModel):
    """One persisted MPC signing share.

    The ``share`` payload is opaque and never interpreted locally.
    """

    id: str
    client_id: str
    curve: Curve
    share: str
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return value.isoformat().replace("+00:00", "Z")

    def __repr__(self) -> str:
        return f"SigningShare(id={self.id!r}, client_id={self.client_id!r}, curve={self.curve!r})"
