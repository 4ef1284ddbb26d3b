"""Chain catalog endpoint."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...chains import ChainDescriptor, ChainRegistry

router = APIRouter()


class ChainResponse(BaseModel):
    id: str
    name: str
    chainId: str
    curve: str

    @classmethod
    def from_descriptor(cls, descriptor: ChainDescriptor) -> "ChainResponse":
        return cls(
            id=descriptor.id,
            name=descriptor.name,
            chainId=descriptor.chain_id,
            curve=descriptor.curve.value,
        )


def get_registry() -> ChainRegistry:
    raise NotImplementedError("Dependency override required")


@router.get("", response_model=List[ChainResponse])
async def list_chains(registry: ChainRegistry = Depends(get_registry)):
    """List supported chains and the curve each one signs with."""
    return [ChainResponse.from_descriptor(d) for d in registry.list_chains()]
