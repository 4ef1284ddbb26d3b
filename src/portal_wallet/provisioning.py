"""
Wallet provisioning saga.

Steps, in order:

1. create a custodial client (custodian API);
2. generate the SECP256K1 + ED25519 key pair (enclave API);
3. persist both signing shares locally;
4. mark the signing-share pairs as stored by the client (client API);
5. fetch the full client detail.

Shares are persisted before any further remote call: the enclave never
returns them again, so local durability is the first checkpoint after key
generation. Nothing is rolled back on failure. The run records which steps
completed and is attached to the raised ``ProvisioningError``; passing
``error.run.client`` back into ``provision()`` resumes from key generation
with the same remote client.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Protocol

from .models.client import (
    ClientDetail,
    CreateClientResponse,
    CreateWalletResponse,
    UpdateWalletStatusRequest,
)
from .models.errors import PortalError, ProvisioningError
from .models.share import Curve, SigningShare

logger = logging.getLogger(__name__)


class ProvisioningStep(str, Enum):
    CREATE_CLIENT = "create_client"
    GENERATE_KEYS = "generate_keys"
    PERSIST_SHARES = "persist_shares"
    MARK_CUSTODIED = "mark_custodied"
    FETCH_DETAIL = "fetch_detail"


class ProvisioningGateway(Protocol):
    async def create_client(self) -> CreateClientResponse: ...

    async def create_wallet(self, client_api_key: str) -> CreateWalletResponse: ...

    async def update_wallet_status(
        self, client_api_key: str, request: UpdateWalletStatusRequest
    ) -> None: ...

    async def get_client(self, client_id: str) -> ClientDetail: ...


class ShareWriter(Protocol):
    async def append(self, client_id: str, curve: Curve | str, share: str) -> SigningShare: ...


@dataclass
class ProvisioningRun:
    """Step outcomes of one provisioning attempt."""

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    client: Optional[CreateClientResponse] = None
    completed_steps: List[ProvisioningStep] = field(default_factory=list)
    failed_step: Optional[ProvisioningStep] = None
    persisted_shares: List[SigningShare] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def client_id(self) -> Optional[str]:
        return self.client.id if self.client else None

    @property
    def succeeded(self) -> bool:
        return self.failed_step is None and ProvisioningStep.FETCH_DETAIL in self.completed_steps

    def summary(self) -> dict:
        return {
            "client_id": self.client_id,
            "completed_steps": [step.value for step in self.completed_steps],
            "failed_step": self.failed_step.value if self.failed_step else None,
            "persisted_share_ids": [share.id for share in self.persisted_shares],
            "error": self.error,
        }


class ProvisioningOrchestrator:
    """Creates a custodial client with a two-curve MPC wallet."""

    # Persisted in this order; matches the pair-id order sent to the custodian.
    CURVES = (Curve.ED25519, Curve.SECP256K1)

    def __init__(self, *, gateway: ProvisioningGateway, share_store: ShareWriter) -> None:
        self._gateway = gateway
        self._store = share_store

    async def provision(self, client: Optional[CreateClientResponse] = None) -> ClientDetail:
        """Run the provisioning saga.

        Args:
            client: An already-created client to resume with; step 1 is
                skipped when given.

        Raises:
            ProvisioningError: a step failed; ``error.run`` holds the partial state.
        """
        run = ProvisioningRun(client=client)
        step = ProvisioningStep.CREATE_CLIENT
        try:
            if run.client is None:
                run.client = await self._gateway.create_client()
            else:
                logger.info("Resuming provisioning for existing client %s", run.client.id)
            run.completed_steps.append(step)

            step = ProvisioningStep.GENERATE_KEYS
            wallet = await self._gateway.create_wallet(run.client.client_api_key)
            run.completed_steps.append(step)

            step = ProvisioningStep.PERSIST_SHARES
            for curve in self.CURVES:
                record = await self._store.append(run.client.id, curve, wallet.for_curve(curve).share)
                run.persisted_shares.append(record)
            run.completed_steps.append(step)

            step = ProvisioningStep.MARK_CUSTODIED
            await self._gateway.update_wallet_status(
                run.client.client_api_key,
                UpdateWalletStatusRequest(signing_share_pair_ids=wallet.signing_share_pair_ids()),
            )
            run.completed_steps.append(step)

            step = ProvisioningStep.FETCH_DETAIL
            detail = await self._gateway.get_client(run.client.id)
            run.completed_steps.append(step)
        except PortalError as exc:
            run.failed_step = step
            run.error = exc.message
            # Partial remote/local state is left in place for manual reconciliation.
            logger.error("Wallet provisioning failed", extra={"provisioning": run.summary()})
            raise ProvisioningError(run, exc) from exc

        logger.info("Provisioned wallet for client %s", detail.id)
        return detail
