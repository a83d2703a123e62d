from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from appointment_desk.services.exceptions import (
    ServerError,
    TransportError,
    UnexpectedError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayResponse:
    status_code: int
    data: Any = None


def _server_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class AppointmentGatewayClient:
    """Async HTTP client responsible for communicating with the appointment service."""

    def __init__(
        self,
        base_url: str | None,
        *,
        timeout: float = 10.0,
        use_mock_data: bool = True,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/") if base_url else None
        self._timeout = timeout
        self.use_mock_data = use_mock_data or not self._base_url
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        if not self.use_mock_data and self._base_url:
            self._client = self._build_client()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self.use_mock_data or not self._base_url:
            raise RuntimeError("HTTP client requested while running in mock mode")
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def get(
        self, path: str, params: Dict[str, Any] | None = None
    ) -> GatewayResponse:
        if self.use_mock_data:
            raise RuntimeError("Real HTTP call requested while mock mode is enabled")
        client = await self._ensure_client()
        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.exception("Appointment service returned error %s", exc.response.status_code)
            raise ServerError(
                f"Request failed with status code {exc.response.status_code}",
                status_code=exc.response.status_code,
                server_message=_server_message(exc.response),
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach appointment service: %s", exc)
            raise TransportError(
                str(exc) or "Unable to reach appointment service", cause=exc
            ) from exc

        if not response.content:
            return GatewayResponse(status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            logger.exception("Appointment service returned a body that is not JSON")
            raise UnexpectedError("Malformed response from appointment service", cause=exc) from exc
        return GatewayResponse(status_code=response.status_code, data=data)

    async def simulate_latency(self) -> None:
        """Allow services to await for latency even when mocking responses."""

        await asyncio.sleep(0)
