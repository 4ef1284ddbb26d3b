"""Base model for Portal payloads."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PortalModel(BaseModel):
    """Base model with camelCase wire names and snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to its wire (camelCase) dictionary."""
        return self.model_dump(mode="json", by_alias=True)
