"""Gist Client — the remote document service (GitHub Gist API) over httpx.

Invariants:
    - One attempt per call, no retry; a non-2xx answer raises RemoteServiceError
      carrying the status code and the response body
    - Transport failures (DNS, timeout, refused) raise RemoteServiceError with status 0
    - The token is passed per call and never stored on the client
    - Gists are created private with a fixed description and a single named file

Design Decisions:
    - One pooled httpx.AsyncClient per GistClient; tests inject one over httpx.MockTransport
    - Returns decoded JSON dicts; interpreting the payload is RemoteSync's job
"""

import logging
from typing import Any

import httpx

from decision_log.core.errors import RemoteServiceError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GIST_FILENAME = "decision-log-backup.json"
GIST_DESCRIPTION = "Decision Log Backup"


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
        "Content-Type": "application/json",
    }


class GistClient:
    """Thin async wrapper over the four Gist endpoints the sync flow needs."""

    def __init__(
        self,
        base_url: str = GITHUB_API_URL,
        filename: str = GIST_FILENAME,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.filename = filename
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds, connect=5.0),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self, action: str, method: str, path: str, token: str,
        payload: dict | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method, path, headers=_headers(token), json=payload,
            )
        except httpx.HTTPError as e:
            logger.warning(
                f"Gist request failed: {method} {path}: {e}",
                extra={"operation": f"{method} {path}"},
            )
            raise RemoteServiceError(f"Failed to {action}", 0, str(e)) from e
        if not response.is_success:
            logger.warning(
                f"Gist API {response.status_code} on {method} {path}",
                extra={"operation": f"{method} {path}", "error_code": "REMOTE_SERVICE_ERROR"},
            )
            raise RemoteServiceError(
                f"Failed to {action}",
                response.status_code,
                response.text,
            )
        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(
                f"Failed to {action}", response.status_code, "response is not JSON",
            ) from e

    def _file_payload(self, content: str) -> dict[str, Any]:
        return {"files": {self.filename: {"content": content}}}

    async def get_user(self, token: str) -> dict[str, Any]:
        return await self._request("verify token", "GET", "/user", token)

    async def create_gist(self, token: str, content: str) -> dict[str, Any]:
        payload = {
            "description": GIST_DESCRIPTION,
            "public": False,
            **self._file_payload(content),
        }
        return await self._request("create gist", "POST", "/gists", token, payload)

    async def update_gist(self, token: str, gist_id: str, content: str) -> dict[str, Any]:
        return await self._request(
            "update gist", "PATCH", f"/gists/{gist_id}", token, self._file_payload(content),
        )

    async def get_gist(self, token: str, gist_id: str) -> dict[str, Any]:
        return await self._request("fetch gist", "GET", f"/gists/{gist_id}", token)

    def file_content(self, gist: dict[str, Any]) -> str | None:
        """Content of the backup file in a fetched gist, or None if absent."""
        entry = (gist.get("files") or {}).get(self.filename)
        if not entry:
            return None
        return entry.get("content")
