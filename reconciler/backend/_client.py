"""
Store API client — the commerce backend's public store endpoints.

StoreApi is the seam every component talks to; HttpStoreApi is the real
thing on httpx. Every call returns Result: a non-2xx reply, an undecodable
body and a transport failure all come back as ``Error(BackendError)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import httpx
import structlog
from combinators import lift as L
from kungfu import Result, Ok, Error

from reconciler._types import JsonObject
from reconciler.backend._types import CART_FIELDS
from reconciler.errors import BackendError

if TYPE_CHECKING:
    from reconciler.config import Settings

logger = structlog.get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# StoreApi Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class StoreApi(Protocol):
    """Consumed backend operations. Bodies are returned already unwrapped."""

    async def get_cart(
        self, cart_id: str, fields: str = CART_FIELDS
    ) -> Result[JsonObject, BackendError]: ...

    async def get_payment_session(
        self, session_id: str
    ) -> Result[JsonObject, BackendError]: ...

    async def authorize_payment_collection(
        self, collection_id: str, body: JsonObject
    ) -> Result[JsonObject, BackendError]: ...

    async def complete_cart(
        self, cart_id: str, payment_data: JsonObject
    ) -> Result[JsonObject, BackendError]:
        """Idempotent order placement; returns the raw placement result."""
        ...

    async def get_order(self, order_id: str) -> Result[JsonObject, BackendError]: ...


# ═══════════════════════════════════════════════════════════════════════════════
# HTTP Implementation
# ═══════════════════════════════════════════════════════════════════════════════


def _transport_error(exc: Exception) -> BackendError:
    return BackendError(message=f"{type(exc).__name__}: {exc}")


def _failure(response: httpx.Response) -> BackendError:
    body: Any
    try:
        body = response.json()
    except ValueError:
        body = None
    reason = response.reason_phrase or f"HTTP {response.status_code}"
    message = str(body["message"]) if isinstance(body, dict) and body.get("message") else None
    if message is None:
        detail = reason
    elif response.is_server_error:
        # Transient-failure rules match on the status text, so it leads.
        detail = f"{reason} ({message})"
    else:
        detail = message
    return BackendError(message=detail, status=response.status_code, body=body)


class HttpStoreApi:
    """
    httpx-backed StoreApi.

    Example:
        async with httpx.AsyncClient(base_url=url, headers=...) as client:
            api = HttpStoreApi(client)
            match await api.get_cart("cart_01"):
                case Ok(cart): ...
    """

    __slots__ = ("_client",)

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> HttpStoreApi:
        return cls(
            httpx.AsyncClient(
                base_url=settings.backend_url,
                headers={
                    "x-publishable-api-key": settings.publishable_key,
                    "content-type": "application/json",
                },
                timeout=settings.request_timeout_seconds,
                transport=transport,
            )
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: JsonObject | None = None,
    ) -> Result[JsonObject, BackendError]:
        async def call() -> httpx.Response:
            return await self._client.request(method, path, params=params, json=json)

        match await L.catching_async(call, on_error=_transport_error):
            case Error(err):
                logger.warning("store_api_unreachable", path=path, error=err.message)
                return Error(err)
            case Ok(response):
                pass

        if not response.is_success:
            return Error(_failure(response))
        if not response.content:
            return Ok({})
        try:
            body = response.json()
        except ValueError as exc:
            return Error(BackendError(f"Undecodable body: {exc}", response.status_code))
        if not isinstance(body, dict):
            return Error(BackendError("Expected a JSON object", response.status_code, body))
        return Ok(body)

    async def get_cart(
        self, cart_id: str, fields: str = CART_FIELDS
    ) -> Result[JsonObject, BackendError]:
        result = await self._send(
            "GET", f"/store/carts/{cart_id}", params={"fields": fields}
        )
        return result.then(lambda body: _unwrap(body, "cart"))

    async def get_payment_session(
        self, session_id: str
    ) -> Result[JsonObject, BackendError]:
        result = await self._send("GET", f"/store/payment-sessions/{session_id}")
        return result.then(lambda body: _unwrap(body, "payment_session"))

    async def authorize_payment_collection(
        self, collection_id: str, body: JsonObject
    ) -> Result[JsonObject, BackendError]:
        return await self._send(
            "POST",
            f"/store/payment-collections/{collection_id}/authorize",
            json=body,
        )

    async def complete_cart(
        self, cart_id: str, payment_data: JsonObject
    ) -> Result[JsonObject, BackendError]:
        match await self._send(
            "POST",
            f"/store/carts/{cart_id}/complete",
            json={"payment_data": payment_data},
        ):
            case Error(err):
                return Error(
                    BackendError(
                        f"Failed to complete cart: {err.message}", err.status, err.body
                    )
                )
            case Ok(body):
                # The backend answers 200 with the cart and an error when it
                # refuses to complete.
                if body.get("type") == "cart" and body.get("error"):
                    detail = body["error"]
                    message = (
                        detail.get("message") if isinstance(detail, dict) else detail
                    )
                    return Error(
                        BackendError(f"Failed to complete cart: {message}", 200, body)
                    )
                return Ok(body)

    async def get_order(self, order_id: str) -> Result[JsonObject, BackendError]:
        result = await self._send("GET", f"/store/orders/{order_id}")
        return result.then(lambda body: _unwrap(body, "order"))


def _unwrap(body: JsonObject, key: str) -> Result[JsonObject, BackendError]:
    inner = body.get(key)
    if not isinstance(inner, dict):
        return Error(BackendError(f"Response has no {key!r} object", body=body))
    return Ok(inner)


__all__ = ("StoreApi", "HttpStoreApi")
