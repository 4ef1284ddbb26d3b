"""Transfer orchestration: pick the right share, get a session, send."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from .chains import ChainRegistry
from .models.client import SessionToken, SignedTransaction
from .models.errors import ShareNotFoundError, UnknownChainError, ValidationError
from .models.share import Curve, SigningShare

logger = logging.getLogger(__name__)

NATIVE_TOKEN = "native"


class TransferGateway(Protocol):
    async def create_session_token(self, client_id: str) -> SessionToken: ...

    async def transfer_assets(
        self,
        session_token: str,
        share: str,
        chain_id: str,
        to: str,
        amount: str,
        token: str,
    ) -> SignedTransaction: ...


class ShareReader(Protocol):
    async def latest_for(self, client_id: str, curve: Curve | str) -> Optional[SigningShare]: ...


def parse_curve(value: Curve | str) -> Curve:
    """Validate a caller-supplied curve name."""
    try:
        return Curve(value)
    except ValueError:
        raise ValidationError(
            "Invalid curve type. Must be either 'SECP256K1' or 'ED25519'",
            field="curve",
        ) from None


class TransferOrchestrator:
    """Signs and broadcasts transfers with locally persisted shares."""

    def __init__(
        self,
        *,
        gateway: TransferGateway,
        share_store: ShareReader,
        registry: ChainRegistry,
    ) -> None:
        self._gateway = gateway
        self._store = share_store
        self._registry = registry

    async def transfer(
        self,
        client_id: str,
        curve: Curve | str,
        chain_id: str,
        to: str,
        amount: str,
        token: str = NATIVE_TOKEN,
    ) -> SignedTransaction:
        """Transfer ``amount`` of ``token`` to ``to`` on ``chain_id``.

        ``token`` is either ``"native"`` or a token contract/mint address.
        The remote signature and signed transaction are returned unchanged.

        Raises:
            ValidationError: missing field, unsupported curve or unknown chain
            ShareNotFoundError: no share persisted for (client, curve)
            GatewayError: the session or send call failed
        """
        fields = {
            "clientId": client_id,
            "chain": chain_id,
            "to": to,
            "amount": amount,
            "token": token,
        }
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", field=missing[0]
            )

        wanted = parse_curve(curve)
        if chain_id not in self._registry:
            raise UnknownChainError(chain_id)
        chain_curve = self._registry.curve_for_chain(chain_id)
        if chain_curve != wanted:
            logger.warning(
                "Curve %s does not match chain %s (expects %s)",
                wanted.value,
                chain_id,
                chain_curve.value,
            )

        share = await self._store.latest_for(client_id, wanted)
        if share is None:
            raise ShareNotFoundError(client_id, wanted.value)

        session = await self._gateway.create_session_token(client_id)
        result = await self._gateway.transfer_assets(
            session.client_session_token,
            share.share,
            chain_id,
            to,
            amount,
            token,
        )
        logger.info(
            "Transfer signed",
            extra={"client_id": client_id, "chain_id": chain_id, "curve": wanted.value},
        )
        return result
