"""HTTP client for the Superteam Earn agent API."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

from .config import Settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class ApiResponse:
    """Uniform envelope around a marketplace response.

    ``ok`` mirrors HTTP-level success; callers must check it. ``data`` is the
    decoded JSON body, or an empty dict when the body is not JSON.
    """

    ok: bool
    status: int
    data: Any


class EarnApiClient:
    """Issue authenticated requests against the marketplace API.

    Every call is a single attempt. Non-2xx statuses are returned in the
    envelope, network faults (``httpx.TransportError``) propagate.
    """

    def __init__(self, settings: Settings, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = settings.base_url.rstrip("/")
        self.api_key = settings.api_key
        self.timeout = timeout

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Union[str, int]]] = None,
        auth: bool = True,
    ) -> ApiResponse:
        """Send one request and wrap the result.

        Args:
            path: Path relative to the base URL (e.g. "/api/agents/listings/live")
            method: HTTP method, GET by default
            body: Optional JSON body
            params: Optional query parameters
            auth: Attach the bearer token when one is configured

        Returns:
            ApiResponse with ok/status/data
        """
        headers = {"Content-Type": "application/json"}
        if auth and self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async with httpx.AsyncClient() as client:
            response = await client.request(
                method,
                f"{self.base_url}{path}",
                json=body,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            logger.info(f"{method} {path} returned {response.status_code}")

        return ApiResponse(
            ok=response.is_success,
            status=response.status_code,
            data=data,
        )
