"""
Portal custodian/enclave gateway.

Typed async client over the three Portal HTTP surfaces:

- custodian API (``/me/clients``...), authenticated with the long-lived
  custodian key;
- client API (``/me/signing-share-pairs``, ``/me/fund``), authenticated
  per call with a client API key or session token;
- enclave API (``/generate``, ``/assets/send``), authenticated per call
  with a client API key or session token.

Every failure is normalized into a ``GatewayError`` whose message is
``"Failed to <operation>: <reason>"``. Nothing is retried here.

Example usage:
    ```python
    async with PortalGateway(settings, registry) as gateway:
        client = await gateway.create_client()
        wallet = await gateway.create_wallet(client.client_api_key)
    ```
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from .chains import ChainRegistry
from .config import PortalSettings
from .models.assets import AssetSnapshot
from .models.base import PortalModel
from .models.client import (
    ClientDetail,
    ClientList,
    CreateClientResponse,
    CreateWalletResponse,
    SessionToken,
    SignedTransaction,
    UpdateWalletStatusRequest,
)
from .models.errors import APIError, GatewayError, TransportError, UnknownChainError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=PortalModel)

USER_AGENT = "portal-wallet/0.1.0"


class PortalGateway:
    """Async HTTP client for the Portal custodian and enclave services.

    Args:
        settings: Process settings (base URLs, custodian key, timeout)
        registry: Chain registry used to resolve RPC endpoints
    """

    def __init__(self, settings: PortalSettings, registry: ChainRegistry):
        self._registry = registry
        common_headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        timeout = settings.request_timeout_seconds

        self._custodian = httpx.AsyncClient(
            base_url=settings.custodian_url,
            headers={**common_headers, "Authorization": f"Bearer {settings.custodian_api_key}"},
            timeout=timeout,
        )
        self._client_api = httpx.AsyncClient(
            base_url=settings.client_url, headers=common_headers, timeout=timeout
        )
        self._enclave = httpx.AsyncClient(
            base_url=settings.enclave_url, headers=common_headers, timeout=timeout
        )

    @property
    def registry(self) -> ChainRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Low-level HTTP
    # ------------------------------------------------------------------

    async def _request(
        self,
        http: httpx.AsyncClient,
        method: str,
        path: str,
        operation: str,
        *,
        bearer: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
        expected_status: Optional[int] = None,
    ) -> Any:
        """Issue one request and return its decoded JSON body (or None).

        Raises:
            TransportError: the request never produced a response
            APIError: the response status signals failure
        """
        headers = {"Authorization": f"Bearer {bearer}"} if bearer else None
        try:
            response = await http.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed in transport: %s", method, path, exc.__class__.__name__)
            raise TransportError(str(exc) or exc.__class__.__name__, operation) from exc

        if response.status_code >= 400:
            body = _decode_body(response)
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise APIError.from_response(operation, response.status_code, body)

        if expected_status is not None and response.status_code != expected_status:
            raise APIError(
                f"expected status {expected_status}, got {response.status_code}",
                operation,
                response.status_code,
            )

        return _decode_body(response)

    @staticmethod
    def _parse(model: Type[M], body: Any, operation: str, source: str) -> M:
        if not body:
            raise GatewayError(f"No data received from {source} API", operation)
        try:
            return model.model_validate(body)
        except PydanticValidationError as exc:
            raise GatewayError(
                f"Unexpected response from {source} API ({exc.error_count()} invalid field(s))",
                operation,
            ) from exc

    def _require_rpc_url(self, chain_id: str) -> str:
        rpc_url = self._registry.resolve_rpc_url(chain_id)
        if not rpc_url:
            raise UnknownChainError(chain_id)
        return rpc_url

    # ------------------------------------------------------------------
    # Custodian API
    # ------------------------------------------------------------------

    async def create_client(self) -> CreateClientResponse:
        """Provision a new custodial client. Not idempotent."""
        operation = "create client"
        body = await self._request(self._custodian, "POST", "/me/clients", operation)
        client = self._parse(CreateClientResponse, body, operation, "custodian")
        logger.info("Created Portal client %s", client.id)
        return client

    async def get_client(self, client_id: str) -> ClientDetail:
        operation = "get client"
        body = await self._request(
            self._custodian, "GET", f"/me/clients/{quote(client_id, safe='')}", operation
        )
        return self._parse(ClientDetail, body, operation, "custodian")

    async def get_clients(self) -> List[ClientDetail]:
        operation = "get clients"
        body = await self._request(self._custodian, "GET", "/me/clients", operation)
        return self._parse(ClientList, body, operation, "custodian").results

    async def create_session_token(self, client_id: str) -> SessionToken:
        """Obtain a fresh session token scoped to one client."""
        operation = "create client session token"
        body = await self._request(
            self._custodian,
            "POST",
            f"/me/clients/{quote(client_id, safe='')}/sessions",
            operation,
        )
        return self._parse(SessionToken, body, operation, "custodian")

    async def get_wallet_assets(self, client_id: str, chain_id: str) -> AssetSnapshot:
        operation = "get wallet assets"
        path = (
            f"/me/clients/{quote(client_id, safe='')}"
            f"/chains/{quote(chain_id, safe='')}/assets"
        )
        body = await self._request(self._custodian, "GET", path, operation)
        return self._parse(AssetSnapshot, body, operation, "custodian")

    # ------------------------------------------------------------------
    # Client API
    # ------------------------------------------------------------------

    async def update_wallet_status(
        self,
        client_api_key: str,
        request: UpdateWalletStatusRequest,
    ) -> None:
        """Mark signing-share pairs as stored by the client (custodied)."""
        await self._request(
            self._client_api,
            "PATCH",
            "/me/signing-share-pairs",
            "update wallet status",
            bearer=client_api_key,
            json=request.to_dict(),
            expected_status=204,
        )

    async def fund_wallet(
        self,
        session_token: str,
        chain_id: str,
        token: str,
        amount: str,
    ) -> None:
        """Request a faucet-style transfer into the client's wallet."""
        if chain_id not in self._registry:
            raise UnknownChainError(chain_id)
        await self._request(
            self._client_api,
            "POST",
            "/me/fund",
            "fund wallet",
            bearer=session_token,
            json={"chainId": chain_id, "token": token, "amount": amount},
            expected_status=200,
        )
        logger.info("Funded wallet on %s with %s %s", chain_id, amount, token)

    # ------------------------------------------------------------------
    # Enclave API
    # ------------------------------------------------------------------

    async def create_wallet(self, client_api_key: str) -> CreateWalletResponse:
        """Run remote key generation for both curves in one call."""
        operation = "create wallet"
        body = await self._request(
            self._enclave, "POST", "/generate", operation, bearer=client_api_key, json={}
        )
        return self._parse(CreateWalletResponse, body, operation, "enclave")

    async def transfer_assets(
        self,
        session_token: str,
        share: str,
        chain_id: str,
        to: str,
        amount: str,
        token: str,
    ) -> SignedTransaction:
        """Sign and broadcast a transfer with the given signing share."""
        rpc_url = self._require_rpc_url(chain_id)
        operation = "transfer assets"
        body = await self._request(
            self._enclave,
            "POST",
            "/assets/send",
            operation,
            bearer=session_token,
            json={
                "share": share,
                "chain": chain_id,
                "to": to,
                "amount": amount,
                "token": token,
                "rpcUrl": rpc_url,
            },
        )
        return self._parse(SignedTransaction, body, operation, "enclave")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        for http in (self._custodian, self._client_api, self._enclave):
            if not http.is_closed:
                await http.aclose()

    async def __aenter__(self) -> "PortalGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
