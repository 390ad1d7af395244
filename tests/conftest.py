from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from pixel_admin.errors import BackendRequestError
from pixel_admin.schemas.pixels import ClientDataExport, GeneratePixelResponse, PixelRecord

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = _NO_JSON) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; replays queued responses in order."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self._responses = list(responses)
        self.requests: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> FakeResponse:
        self.requests.append(kwargs)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeBackend:
    """In-memory backend; steps named in `fail` answer with HTTP 500."""

    def __init__(
        self,
        *,
        pixels: list[PixelRecord] | None = None,
        export_data: dict[str, Any] | None = None,
        fail: set[str] | None = None,
        detail: str | None = None,
    ) -> None:
        self.pixels = list(pixels or [])
        self.export_data = export_data if export_data is not None else {"clientName": "acme"}
        self.fail = set(fail or ())
        self.detail = detail
        self.calls: list[tuple[str, Any]] = []

    def _maybe_fail(self, step: str) -> None:
        if step in self.fail:
            raise BackendRequestError(f"{step} failed", status_code=500, detail=self.detail)

    def list_pixels(self) -> list[PixelRecord]:
        self.calls.append(("list", None))
        self._maybe_fail("list")
        return list(self.pixels)

    def bulk_delete(self, pixel_ids: list[str]) -> None:
        self.calls.append(("bulk_delete", list(pixel_ids)))
        self._maybe_fail("bulk_delete")

    def download_client_data(self, pixel_id: str) -> ClientDataExport:
        self.calls.append(("download", pixel_id))
        self._maybe_fail("download")
        return ClientDataExport(data=self.export_data)

    def delete_from_simpleaudience(self, pixel_id: str) -> None:
        self.calls.append(("simpleaudience", pixel_id))
        self._maybe_fail("simpleaudience")

    def delete_from_database(self, pixel_id: str) -> None:
        self.calls.append(("database", pixel_id))
        self._maybe_fail("database")

    def generate_pixel(self, *, client: str, website: str) -> GeneratePixelResponse:
        self.calls.append(("generate", (client, website)))
        self._maybe_fail("generate")
        return GeneratePixelResponse(pixel_snippet=f"<script data-client='{client}'></script>")

    @property
    def step_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture()
def make_record() -> Callable[..., PixelRecord]:
    def _make(
        pixel_id: str,
        client_name: str = "acme",
        *,
        website: str = "https://acme.example",
        created_at: str = "2025-01-01T00:00:00Z",
        industry: str | None = None,
        event_count: int = 0,
        visitor_count: int = 0,
    ) -> PixelRecord:
        return PixelRecord.model_validate(
            {
                "id": pixel_id,
                "clientName": client_name,
                "website": website,
                "createdAt": created_at,
                "industry": industry,
                "eventCount": event_count,
                "visitorCount": visitor_count,
            }
        )

    return _make


@pytest.fixture()
def fake_backend_factory() -> Callable[..., FakeBackend]:
    return FakeBackend


@pytest.fixture()
def fake_session_factory() -> Callable[..., FakeSession]:
    return FakeSession


@pytest.fixture()
def fake_response_factory() -> Callable[..., FakeResponse]:
    return FakeResponse
