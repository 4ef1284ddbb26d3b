"""Wallet API endpoints."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...service import WalletService

router = APIRouter()


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class FundRequest(_Body):
    client_id: str = Field(min_length=1)
    chain_id: str = Field(min_length=1)
    token: Optional[str] = None
    amount: Optional[str] = None


class TransferRequest(_Body):
    client_id: str = Field(min_length=1)
    curve: str = Field(min_length=1)
    chain: str = Field(min_length=1)
    to: str = Field(min_length=1)
    amount: str = Field(min_length=1)
    token: str = Field(min_length=1)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        try:
            value = Decimal(v)
        except InvalidOperation:
            raise ValueError("amount must be a decimal string") from None
        if not value.is_finite() or value <= 0:
            raise ValueError("amount must be positive")
        return v


class Envelope(BaseModel):
    success: Literal[True] = True
    data: Optional[Any] = None


def get_service() -> WalletService:
    raise NotImplementedError("Dependency override required")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope)
async def create_wallet(service: WalletService = Depends(get_service)):
    """Provision a client with a two-curve MPC wallet."""
    client = await service.provision_wallet()
    return Envelope(data=client.to_dict())


@router.get("", response_model=Envelope)
async def list_wallets(service: WalletService = Depends(get_service)):
    """List every client of the custodian."""
    clients = await service.list_wallets()
    return Envelope(data=[client.to_dict() for client in clients])


@router.get("/{client_id}/assets", response_model=Envelope)
async def get_wallet_assets(
    client_id: str,
    chain_id: str = Query(alias="chainId", min_length=1),
    service: WalletService = Depends(get_service),
):
    assets = await service.get_assets(client_id, chain_id)
    return Envelope(data=assets.to_dict())


@router.post("/fund", response_model=Envelope)
async def fund_wallet(request: FundRequest, service: WalletService = Depends(get_service)):
    await service.fund_wallet(request.client_id, request.chain_id, request.token, request.amount)
    return Envelope()


@router.post("/transfer", response_model=Envelope)
async def transfer(request: TransferRequest, service: WalletService = Depends(get_service)):
    """Sign and broadcast a transfer; returns the signature and signed transaction."""
    result = await service.transfer(
        request.client_id,
        request.curve,
        request.chain,
        request.to,
        request.amount,
        request.token,
    )
    return Envelope(data=result.to_dict())
