"""Asset snapshot models returned by the custodian's assets endpoint."""
from __future__ import annotations

from typing import List, Optional

from pydantic import ConfigDict, Field

from .base import PortalModel


class TokenMetadata(PortalModel):
    token_address: Optional[str] = None
    verified_contract: Optional[bool] = None
    total_supply: Optional[str] = None
    raw_total_supply: Optional[str] = None
    percentage_relative_to_total_supply: Optional[float] = None
    logo: Optional[str] = None
    thumbnail: Optional[str] = None
    usd_value: Optional[float] = None


class TokenBalance(PortalModel):
    """Native or token balance; ``balance`` is already decimal-adjusted."""

    balance: str
    decimals: int
    name: str
    raw_balance: str
    symbol: str
    metadata: TokenMetadata = Field(default_factory=TokenMetadata)


class Nft(PortalModel):
    """An NFT held by the wallet; unlisted remote fields are preserved."""

    model_config = ConfigDict(extra="allow")

    nft_id: str
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    chain_id: Optional[str] = None
    contract_address: Optional[str] = None
    token_id: Optional[str] = None


class AssetSnapshot(PortalModel):
    """Balances and NFTs of one client on one chain."""

    model_config = ConfigDict(extra="allow")

    native_balance: Optional[TokenBalance] = None
    token_balances: List[TokenBalance] = Field(default_factory=list)
    nfts: List[Nft] = Field(default_factory=list)
