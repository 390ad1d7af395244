"""
tests/test_pixel_backend.py

Request/response handling of PixelBackendClient against a fake session.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
import requests

from pixel_admin.config import BackendSettings
from pixel_admin.connectors.pixel_backend import PixelBackendClient
from pixel_admin.errors import BackendRequestError

_SETTINGS = BackendSettings(base_url="http://backend.test/", timeout_seconds=5.0)


def _pixel_payload(**overrides) -> dict:
    payload = {
        "id": "p1",
        "clientName": "acme",
        "website": "https://acme.example",
        "createdAt": "2025-01-01T10:00:00Z",
        "eventCount": 10,
        "visitorCount": 4,
        "sheetUrl": "https://docs.google.com/spreadsheets/d/abc",
        "unexpected": "ignored",
    }
    payload.update(overrides)
    return payload


def test_list_pixels_parses_camel_case(fake_session_factory, fake_response_factory) -> None:
    session = fake_session_factory(fake_response_factory(200, {"pixels": [_pixel_payload()]}))
    client = PixelBackendClient(settings=_SETTINGS, session=session)

    pixels = client.list_pixels()

    assert len(pixels) == 1
    pixel = pixels[0]
    assert pixel.client_name == "acme"
    assert pixel.event_count == 10
    assert pixel.created_at.utcoffset() == timedelta(0)
    assert pixel.industry is None
    assert session.requests[0]["method"] == "GET"
    assert session.requests[0]["url"] == "http://backend.test/admin/pixels"
    assert session.requests[0]["timeout"] == 5.0


def test_list_pixels_treats_missing_key_as_empty(fake_session_factory, fake_response_factory) -> None:
    client = PixelBackendClient(settings=_SETTINGS, session=fake_session_factory(fake_response_factory(200, {})))
    assert client.list_pixels() == []


def test_list_pixels_rejects_malformed_records(fake_session_factory, fake_response_factory) -> None:
    bad = _pixel_payload(eventCount=-1)
    client = PixelBackendClient(
        settings=_SETTINGS,
        session=fake_session_factory(fake_response_factory(200, {"pixels": [bad]})),
    )
    with pytest.raises(BackendRequestError):
        client.list_pixels()


def test_bulk_delete_posts_pixel_ids(fake_session_factory, fake_response_factory) -> None:
    session = fake_session_factory(fake_response_factory(204))
    client = PixelBackendClient(settings=_SETTINGS, session=session)

    client.bulk_delete(["p1", "p2"])

    request = session.requests[0]
    assert request["method"] == "POST"
    assert request["url"] == "http://backend.test/admin/pixels/delete"
    assert request["json"] == {"pixelIds": ["p1", "p2"]}
    assert request["headers"] == {"Content-Type": "application/json"}


def test_step_endpoints_quote_the_pixel_id(fake_session_factory, fake_response_factory) -> None:
    session = fake_session_factory(fake_response_factory(200), fake_response_factory(200))
    client = PixelBackendClient(settings=_SETTINGS, session=session)

    client.delete_from_simpleaudience("a/b")
    client.delete_from_database("p1")

    assert session.requests[0]["url"] == "http://backend.test/admin/pixels/a%2Fb/delete-from-simpleaudience"
    assert session.requests[1]["url"] == "http://backend.test/admin/pixels/p1/delete-from-database"
    assert all(request["method"] == "POST" for request in session.requests)


def test_download_returns_data_payload(fake_session_factory, fake_response_factory) -> None:
    session = fake_session_factory(fake_response_factory(200, {"data": {"clientName": "acme", "events": []}}))
    client = PixelBackendClient(settings=_SETTINGS, session=session)

    export = client.download_client_data("p1")

    assert export.client_name == "acme"
    assert export.data["events"] == []


def test_non_2xx_carries_status_and_message(fake_session_factory, fake_response_factory) -> None:
    session = fake_session_factory(fake_response_factory(404, {"message": "Pixel not found"}))
    client = PixelBackendClient(settings=_SETTINGS, session=session)

    with pytest.raises(BackendRequestError) as ctx:
        client.delete_from_database("p1")

    assert ctx.value.status_code == 404
    assert ctx.value.detail == "Pixel not found"


def test_non_2xx_without_json_body(fake_session_factory, fake_response_factory) -> None:
    client = PixelBackendClient(settings=_SETTINGS, session=fake_session_factory(fake_response_factory(500)))

    with pytest.raises(BackendRequestError) as ctx:
        client.delete_from_simpleaudience("p1")

    assert ctx.value.status_code == 500
    assert ctx.value.detail is None


def test_transport_errors_are_wrapped(fake_session_factory) -> None:
    client = PixelBackendClient(
        settings=_SETTINGS,
        session=fake_session_factory(requests.ConnectionError("refused")),
    )
    with pytest.raises(BackendRequestError):
        client.list_pixels()


def test_invalid_json_is_a_failure(fake_session_factory, fake_response_factory) -> None:
    client = PixelBackendClient(settings=_SETTINGS, session=fake_session_factory(fake_response_factory(200)))
    with pytest.raises(BackendRequestError):
        client.download_client_data("p1")


def test_generate_surfaces_backend_error(fake_session_factory, fake_response_factory) -> None:
    session = fake_session_factory(fake_response_factory(400, {"error": "Client already exists"}))
    client = PixelBackendClient(settings=_SETTINGS, session=session)

    with pytest.raises(BackendRequestError) as ctx:
        client.generate_pixel(client="acme", website="https://acme.example")

    assert ctx.value.detail == "Client already exists"
    assert session.requests[0]["json"] == {"client": "acme", "website": "https://acme.example"}
