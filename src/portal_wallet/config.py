"""Configuration surface for the Portal wallet backend."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.errors import ConfigurationError

DEFAULT_CUSTODIAN_URL = "https://api.portalhq.io/api/v3/custodians"
DEFAULT_CLIENT_URL = "https://api.portalhq.io/api/v3/clients"
DEFAULT_ENCLAVE_URL = "https://mpc-client.portalhq.io/v1"
DEFAULT_RPC_BASE_URL = "https://api.portalhq.io/rpc/v1"


class PortalSettings(BaseSettings):
    """Process-wide settings, read from ``PORTAL_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_",
        env_file=".env",
        extra="ignore",
    )

    environment: Literal["dev", "sandbox", "prod"] = "dev"

    # Long-lived custodian credential; required.
    custodian_api_key: str

    custodian_url: str = DEFAULT_CUSTODIAN_URL
    client_url: str = DEFAULT_CLIENT_URL
    enclave_url: str = DEFAULT_ENCLAVE_URL
    rpc_base_url: str = DEFAULT_RPC_BASE_URL
    request_timeout_seconds: float = 30.0

    share_store_path: Path = Path("data/db.json")

    # Faucet defaults for fund requests
    fund_token: str = "MXNB"
    fund_amount: str = "1"

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("custodian_api_key")
    @classmethod
    def validate_custodian_api_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("PORTAL_CUSTODIAN_API_KEY is not set in environment variables")
        return v.strip()

    @field_validator("custodian_url", "client_url", "enclave_url", "rpc_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def load_settings(env_file: str | None = None) -> PortalSettings:
    """Load PortalSettings once per process.

    Raises:
        ConfigurationError: if the custodian API key is missing or blank.
    """
    overrides = {"_env_file": Path(env_file)} if env_file else {}
    try:
        return PortalSettings(**overrides)
    except PydanticValidationError as exc:
        missing = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        if "custodian_api_key" in missing:
            raise ConfigurationError(
                "PORTAL_CUSTODIAN_API_KEY is not set in environment variables",
                setting="custodian_api_key",
            ) from exc
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
