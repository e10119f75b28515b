"""
HTTP request layer for the GitLab REST API v4.

One ``PlatformClient`` is opened per tool invocation and closed when it ends;
it never retries and never caches. Every failure surfaces as PlatformError.
"""

from __future__ import annotations

import json
import sys
import time
import urllib.parse
import uuid

import httpx

from gitlab_review.config import VERSION, Settings
from gitlab_review.exceptions import PlatformError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    return token[:6] + "..." if len(token) > 6 else token


def _log_http_event(settings, **fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not settings.http_log:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _server_message(response):
    """Return the structured ``message``/``error`` field of an error body, if any."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    for key in ("message", "error"):
        value = body.get(key)
        if value:
            return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return None


def _status_error(response):
    """Build a PlatformError for a non-2xx response."""
    message = _server_message(response)
    if message is None:
        reason = response.reason_phrase or "Error"
        message = f"HTTP {response.status_code}: {reason}"
    return PlatformError(message, status_code=response.status_code)


def _expect_object_response(result, operation):
    """Ensure callers only get JSON objects (dict) back."""
    if isinstance(result, dict):
        return result
    raise PlatformError(
        f"Unexpected {operation} response shape: expected JSON object, got {type(result).__name__}."
    )


def merge_request_path(reference, *segments):
    """API path for a merge request; the project path is one encoded segment."""
    project = urllib.parse.quote(reference.project_path, safe="")
    path = f"/projects/{project}/merge_requests/{reference.mr_iid}"
    if segments:
        path += "/" + "/".join(segments)
    return path


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class PlatformClient:
    """Authenticated request issuer bound to ``<host>/api/v4``."""

    def __init__(self, settings: Settings, *, transport=None):
        self.settings = settings
        self._http = httpx.AsyncClient(
            base_url=settings.api_url,
            headers={
                "PRIVATE-TOKEN": settings.token,
                "Accept": "application/json",
                "User-Agent": f"gitlab-review/{VERSION}",
            },
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def get(self, path):
        return await self._request("GET", path)

    async def post(self, path, body):
        return await self._request("POST", path, body)

    async def _request(self, method, path, body=None):
        request_id = str(uuid.uuid4())
        start = time.perf_counter()
        _log_http_event(
            self.settings, phase="request", method=method, path=path, request_id=request_id
        )
        try:
            response = await self._http.request(
                method, path, json=body, headers={"X-Request-Id": request_id}
            )
        except httpx.HTTPError as e:
            _log_http_event(
                self.settings,
                phase="network_error",
                method=method,
                path=path,
                error=type(e).__name__,
                request_id=request_id,
            )
            raise PlatformError(str(e) or f"{type(e).__name__} while calling GitLab") from e

        _log_http_event(
            self.settings,
            phase="response",
            method=method,
            path=path,
            status=response.status_code,
            bytes=len(response.content),
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=request_id,
        )
        if not response.is_success:
            raise _status_error(response)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            content_type = response.headers.get("Content-Type", "")
            raise PlatformError(
                f"Unexpected response from GitLab (not valid JSON, Content-Type: {content_type!r})",
                status_code=response.status_code,
            ) from None
