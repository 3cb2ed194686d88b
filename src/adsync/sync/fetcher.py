"""
WindowFetcher - calls the remote per-window Meta Ads sync operation.

Every call ends in a WindowOutcome. Non-success bodies, HTTP errors,
unparseable JSON, network failures and timeouts all collapse to
succeeded=False; the reason is logged here and carried as diagnostic
text only. Nothing raised by the transport reaches the caller.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from adsync.sync.windows import Window

logger = logging.getLogger(__name__)


@dataclass
class WindowOutcome:
    """Result of one (project, window) fetch."""

    window_key: str
    succeeded: bool
    error: Optional[str] = None
    elapsed_seconds: float = 0.0


class WindowFetcher:
    """POSTs one project/window pair to the remote sync operation."""

    def __init__(
        self,
        url: str,
        access_token: str,
        api_key: str = "",
        timeout: float = 55.0,
        forward_access_token: bool = False,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            url: Full URL of the remote sync operation.
            access_token: Meta access token (sent only with forward_access_token).
            api_key: Bearer token for the remote operation, if it needs one.
            timeout: Upper bound in seconds for one call, connect to last byte.
            forward_access_token: Send access_token in the body. Only needed
                when the remote operation has no token of its own.
            client: Shared httpx.AsyncClient. If None, one client is opened
                per call.
        """
        self.url = url
        self.access_token = access_token
        self.api_key = api_key
        self.timeout = timeout
        self.forward_access_token = forward_access_token
        self._client = client

    def build_payload(self, project, window: Window) -> Dict[str, Any]:
        payload = {
            "project_id": project.id,
            "ad_account_id": project.ad_account_id,
            "time_range": window.time_range(),
            "period_key": window.key,
        }
        if self.forward_access_token:
            payload["access_token"] = self.access_token
        return payload

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def fetch(self, project, window: Window) -> WindowOutcome:
        """Run the remote sync for one window. Never raises."""
        started = time.monotonic()
        try:
            body = await asyncio.wait_for(
                self._post(self.build_payload(project, window)),
                timeout=self.timeout,
            )
            error = _failure_reason(body)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            error = f"timed out after {self.timeout:.0f}s"
        except httpx.HTTPError as exc:
            error = f"request failed: {exc}"
        except ValueError as exc:
            error = f"unparseable response: {exc}"
        except Exception as exc:
            error = f"unexpected error: {exc!r}"

        elapsed = time.monotonic() - started
        if error:
            logger.warning(
                "Window %s for project %s failed: %s", window.key, project.id, error
            )
        return WindowOutcome(
            window_key=window.key,
            succeeded=error is None,
            error=error,
            elapsed_seconds=elapsed,
        )

    async def _post(self, payload: Dict[str, Any]) -> Any:
        if self._client is not None:
            response = await self._client.post(
                self.url, json=payload, headers=self._headers()
            )
            return response.json()

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.url, json=payload, headers=self._headers())
            return response.json()

    @classmethod
    def from_settings(cls, settings, client: Optional[httpx.AsyncClient] = None) -> "WindowFetcher":
        return cls(
            url=settings.sync_function_url,
            access_token=settings.meta_access_token,
            api_key=settings.sync_function_key,
            timeout=settings.fetch_timeout_seconds,
            forward_access_token=settings.forward_access_token,
            client=client,
        )


def _failure_reason(body: Any) -> Optional[str]:
    """None if the remote operation reported success, else why not."""
    if not isinstance(body, dict):
        return f"malformed response: expected object, got {type(body).__name__}"
    if body.get("success") is True:
        return None
    return str(body.get("error") or "remote operation reported failure")
