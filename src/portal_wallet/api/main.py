"""API composition root.

Serve with ``uvicorn --factory portal_wallet.api.main:create_app``.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..chains import ChainRegistry
from ..config import PortalSettings, load_settings
from ..gateway import PortalGateway
from ..logging import configure_logging
from ..models.errors import (
    ConfigurationError,
    GatewayError,
    PortalError,
    ProvisioningError,
    ShareNotFoundError,
    StorageError,
    ValidationError,
)
from ..service import WalletService
from ..share_store import ShareStore
from .routers import chains as chains_router
from .routers import wallets as wallets_router

logger = logging.getLogger("portal_wallet.api")


def _status_for(exc: PortalError) -> int:
    if isinstance(exc, ProvisioningError):
        exc = exc.cause
    if isinstance(exc, (ValidationError, ShareNotFoundError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, GatewayError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, (StorageError, ConfigurationError)):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    code = _status_for(exc)
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, code, exc.message)
    return JSONResponse(status_code=code, content={"success": False, "error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append(".".join(loc) or "body")
    message = f"Invalid or missing fields: {', '.join(fields)}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message},
    )


def create_app(
    settings: Optional[PortalSettings] = None,
    registry: Optional[ChainRegistry] = None,
) -> FastAPI:
    """Build the application.

    Settings are loaded eagerly: a missing custodian key raises
    ``ConfigurationError`` here and the process never starts serving.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_json)
    registry = registry or ChainRegistry.from_catalog(rpc_base_url=settings.rpc_base_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Portal wallet API (%s)", settings.environment)
        store = ShareStore(settings.share_store_path)
        await store.open()
        gateway = PortalGateway(settings, registry)
        app.state.service = WalletService(
            settings=settings,
            gateway=gateway,
            share_store=store,
            registry=registry,
        )
        try:
            yield
        finally:
            await gateway.close()
            logger.info("Shutting down Portal wallet API")

    app = FastAPI(title="Portal Wallet API", version="0.1.0", lifespan=lifespan)

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.dependency_overrides[wallets_router.get_service] = lambda: app.state.service
    app.dependency_overrides[chains_router.get_registry] = lambda: registry

    app.include_router(wallets_router.router, prefix="/api/wallets", tags=["wallets"])
    app.include_router(chains_router.router, prefix="/api/chains", tags=["chains"])

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy", "chains": len(registry)}

    return app


__all__ = ["create_app", "portal_error_handler", "request_validation_handler"]
