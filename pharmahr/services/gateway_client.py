"""
Async HTTP client for the persistence gateway.

Every call is ``POST {url}`` with ``{"action": ..., **fields}``.  A body
carrying ``error`` (or a non-2xx status) raises :class:`GatewayError` with
the gateway's message unchanged, so callers can show it to the operator.

In demo mode nothing leaves the process: reads come back empty, writes
report success, and only ``admin``/``admin`` can sign in.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pharmahr.core.config import settings
from pharmahr.core.enums import Role
from pharmahr.core.exceptions import GatewayError
from pharmahr.services.session import OperatorSession

logger = logging.getLogger(__name__)

DEMO_CREDENTIALS = ("admin", "admin")


class GatewayClient:
    def __init__(
        self,
        url: str | None = None,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        demo: bool = False,
    ) -> None:
        self.url = url or settings.GATEWAY_URL
        self.token = token
        self.demo = demo
        self._client = httpx.AsyncClient(transport=transport)

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Calls ───────────────────────────────────────────────────────
    async def call(self, action: str, **fields: Any) -> Any:
        """Run one gateway action and return its decoded JSON result."""
        if self.demo:
            return self._demo_result(action, fields)

        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            resp = await self._client.post(
                self.url, json={"action": action, **fields}, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("Gateway unreachable for %s: %s", action, e)
            raise GatewayError(f"Gateway unreachable: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            raise GatewayError(
                f"Gateway returned {resp.status_code} with a non-JSON body",
                status_code=resp.status_code,
            ) from None

        if isinstance(data, dict) and data.get("error"):
            raise GatewayError(str(data["error"]), status_code=resp.status_code)
        if resp.is_error:
            raise GatewayError(f"Gateway returned {resp.status_code}", status_code=resp.status_code)
        return data

    async def ping(self) -> bool:
        result = await self.call("test")
        return bool(result and result.get("success"))

    async def login(self, username: str, password: str) -> OperatorSession:
        """Sign in and keep the returned token for later calls."""
        if self.demo:
            if (username, password) != DEMO_CREDENTIALS:
                raise GatewayError("Invalid credentials (demo: admin/admin)", status_code=401)
            return OperatorSession(username="admin", name="Administrator (demo)", role=Role.ADMIN)

        result = await self.call("login", username=username, password=password)
        session = OperatorSession.from_login(result)
        self.token = session.token
        logger.info("Signed in as %s (%s)", session.username, session.role.value)
        return session

    @staticmethod
    def _demo_result(action: str, fields: dict) -> Any:
        if action.startswith("get"):
            return []
        return {"success": True, **({"id": fields["id"]} if fields.get("id") else {})}
