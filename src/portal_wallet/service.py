"""Wallet service: the operations exposed to the HTTP layer."""
from __future__ import annotations

import logging
from typing import List, Optional

from .chains import ChainRegistry
from .config import PortalSettings
from .gateway import PortalGateway
from .models.assets import AssetSnapshot
from .models.client import ClientDetail, SignedTransaction
from .models.errors import UnknownChainError, ValidationError
from .models.share import Curve
from .provisioning import ProvisioningOrchestrator
from .share_store import ShareStore
from .transfers import NATIVE_TOKEN, TransferOrchestrator

logger = logging.getLogger(__name__)


class WalletService:
    """Composes the gateway, share store and orchestrators.

    The share store is injected and owned by the caller; the service never
    opens or replaces it.
    """

    def __init__(
        self,
        *,
        settings: PortalSettings,
        gateway: PortalGateway,
        share_store: ShareStore,
        registry: ChainRegistry,
    ) -> None:
        self._settings = settings
        self._gateway = gateway
        self._store = share_store
        self._registry = registry
        self._provisioning = ProvisioningOrchestrator(gateway=gateway, share_store=share_store)
        self._transfers = TransferOrchestrator(
            gateway=gateway, share_store=share_store, registry=registry
        )

    @property
    def registry(self) -> ChainRegistry:
        return self._registry

    async def provision_wallet(self) -> ClientDetail:
        return await self._provisioning.provision()

    async def list_wallets(self) -> List[ClientDetail]:
        return await self._gateway.get_clients()

    async def get_assets(self, client_id: str, chain_id: str) -> AssetSnapshot:
        if not client_id:
            raise ValidationError("Wallet ID is required", field="id")
        if not chain_id:
            raise ValidationError("Chain ID is required", field="chainId")
        return await self._gateway.get_wallet_assets(client_id, chain_id)

    async def fund_wallet(
        self,
        client_id: str,
        chain_id: str,
        token: Optional[str] = None,
        amount: Optional[str] = None,
    ) -> None:
        """Fund a wallet from the custodian's faucet.

        Unknown chains are rejected before any remote call.
        """
        if not client_id:
            raise ValidationError("Client ID is required", field="clientId")
        if not chain_id:
            raise ValidationError("Chain ID is required", field="chainId")
        if chain_id not in self._registry:
            raise UnknownChainError(chain_id)

        session = await self._gateway.create_session_token(client_id)
        await self._gateway.fund_wallet(
            session.client_session_token,
            chain_id,
            token or self._settings.fund_token,
            amount or self._settings.fund_amount,
        )

    async def transfer(
        self,
        client_id: str,
        curve: Curve | str,
        chain_id: str,
        to: str,
        amount: str,
        token: str = NATIVE_TOKEN,
    ) -> SignedTransaction:
        return await self._transfers.transfer(client_id, curve, chain_id, to, amount, token)
