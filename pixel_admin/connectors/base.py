"""
pixel_admin/connectors/base.py

Shared HTTP mechanics for backend clients.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from pixel_admin.config import BackendSettings
from pixel_admin.errors import BackendRequestError

logger = logging.getLogger(__name__)


def extract_error_detail(response: requests.Response) -> str | None:
    """
    Return the optional `message`/`error` field of a failed response body.
    """

    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class BaseBackendClient:
    """
    Thin `requests` wrapper: one attempt per call, any non-2xx is a failure.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        settings: BackendSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._base_url = settings.base_url.rstrip("/")
        self._timeout_seconds = settings.timeout_seconds

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _request_json(
        self,
        *,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return the parsed JSON body.
        """

        response = self._request(method=method, path=path, json_body=json_body)
        try:
            return response.json()
        except ValueError as exc:
            raise BackendRequestError(
                f"{self.source}: response was not valid JSON.",
                status_code=response.status_code,
            ) from exc

    def _request(
        self,
        *,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> requests.Response:
        """
        Execute one HTTP request and raise on transport errors or non-2xx.
        """

        url = self._url(path)
        headers = {"Content-Type": "application/json"} if json_body is not None else None
        try:
            response = self._session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.error(
                "Backend request failed source=%s method=%s url=%s error=%s",
                self.source,
                method,
                url,
                exc,
            )
            raise BackendRequestError(f"{self.source}: request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            detail = extract_error_detail(response)
            logger.error(
                "Backend request rejected source=%s method=%s status=%s url=%s detail=%s",
                self.source,
                method,
                response.status_code,
                url,
                detail,
            )
            raise BackendRequestError(
                f"{self.source}: HTTP {response.status_code} for {method} {path}",
                status_code=response.status_code,
                detail=detail,
            )
        return response
