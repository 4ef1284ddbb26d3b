"""Error models for the Portal wallet backend.

Every failure surfaced to a caller is one of the subclasses below, so the
HTTP layer can map them without inspecting messages.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..provisioning import ProvisioningRun


class PortalError(Exception):
    """Base exception for the Portal wallet backend."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "PORTAL_ERROR"
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(PortalError):
    """A required setting is missing or invalid at startup."""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details={"setting": setting})
        self.setting = setting


class ValidationError(PortalError):
    """Malformed caller input; raised before any remote call."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, code="VALIDATION_ERROR", details={"field": field})
        self.field = field


class UnknownChainError(ValidationError):
    """The chain id has no entry in the chain registry."""

    def __init__(self, chain_id: str):
        super().__init__(f"No RPC URL found for chain: {chain_id}", field="chainId")
        self.code = "UNKNOWN_CHAIN"
        self.chain_id = chain_id


class ShareNotFoundError(PortalError):
    """No persisted signing share exists for a (client, curve) pair."""

    def __init__(self, client_id: str, curve: str):
        super().__init__(
            f"Wallet's {curve} MPC share not found in database. Please create a wallet first.",
            code="SHARE_NOT_FOUND",
            details={"client_id": client_id, "curve": curve},
        )
        self.client_id = client_id
        self.curve = curve


class StorageError(PortalError):
    """The share store could not be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, code="STORAGE_ERROR", details={"path": path})
        self.path = path


class GatewayError(PortalError):
    """Normalized failure of a custodian or enclave call."""

    def __init__(
        self,
        message: str,
        operation: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(f"Failed to {operation}: {message}", code or "GATEWAY_ERROR", details)
        self.operation = operation
        self.reason = message


class APIError(GatewayError):
    """The remote service answered with a failure status."""

    def __init__(self, message: str, operation: str, status_code: int):
        super().__init__(
            message,
            operation,
            code="API_ERROR",
            details={"status_code": status_code},
        )
        self.status_code = status_code

    @classmethod
    def from_response(cls, operation: str, status_code: int, body: Any) -> "APIError":
        """Create APIError from a remote response body, preferring its message."""
        message: Optional[str] = None
        if isinstance(body, dict):
            error_data = body.get("message") or body.get("error") or body.get("detail")
            if isinstance(error_data, dict):
                error_data = error_data.get("message")
            if isinstance(error_data, str) and error_data:
                message = error_data
        elif isinstance(body, str) and body:
            message = body
        return cls(
            message=message or f"Request failed with status code {status_code}",
            operation=operation,
            status_code=status_code,
        )


class TransportError(GatewayError):
    """The remote call could not complete at all."""

    def __init__(self, message: str, operation: str):
        super().__init__(message, operation, code="TRANSPORT_ERROR")


class ProvisioningError(PortalError):
    """A provisioning run stopped before completing every step."""

    def __init__(self, run: "ProvisioningRun", cause: PortalError):
        super().__init__(
            cause.message,
            code=cause.code,
            details={
                "client_id": run.client_id,
                "failed_step": run.failed_step.value if run.failed_step else None,
                "completed_steps": [step.value for step in run.completed_steps],
            },
        )
        self.run = run
        self.cause = cause
