"""Unit tests for remote call classification (httpx.MockTransport)."""

from __future__ import annotations

import httpx
import pytest

from adapters.http_client import build_async_client, make_request, parse_error_envelope
from core.config import AppSettings
from core.domain.errors import (
    DecodeError,
    RemoteErrorKind,
    ServiceError,
    TransportError,
    UnknownRemoteError,
)


def _client(handler) -> httpx.AsyncClient:
    settings = AppSettings(_env_file=None, jira_host="jira.example.test", username="u", password="p")
    return build_async_client(settings, transport=httpx.MockTransport(handler))


class TestParseErrorEnvelope:
    def test_envelope(self) -> None:
        body = '{"errorMessages": ["No project could be found with key \'X\'."], "errors": {}}'

        assert parse_error_envelope(body) == ["No project could be found with key 'X'."]

    @pytest.mark.parametrize(
        "body",
        [
            "<html>Bad gateway</html>",
            '{"message": "nope"}',
            '{"errorMessages": "not a list"}',
            '{"errorMessages": [1, 2]}',
            "[]",
            "",
        ],
    )
    def test_not_an_envelope(self, body: str) -> None:
        assert parse_error_envelope(body) is None


class TestMakeRequest:
    @pytest.mark.asyncio
    async def test_success_returns_raw_payload(self) -> None:
        payload = {"id": "1", "nested": {"anything": [1, 2]}}

        async with _client(lambda request: httpx.Response(200, json=payload)) as client:
            result = await make_request(lambda: client.get("/x"), context="/x")

        assert result == payload

    @pytest.mark.asyncio
    async def test_request_uses_host_and_basic_auth(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        async with _client(handler) as client:
            await make_request(lambda: client.get("/rest/api/3/myself"), context="myself")

        assert str(seen[0].url) == "https://jira.example.test/rest/api/3/myself"
        assert seen[0].headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_envelope_becomes_service_error(self) -> None:
        body = {"errorMessages": ["You do not have permission."], "errors": {}}

        async with _client(lambda request: httpx.Response(403, json=body)) as client:
            with pytest.raises(ServiceError) as excinfo:
                await make_request(lambda: client.get("/x"), context="/x")

        error = excinfo.value
        assert error.kind is RemoteErrorKind.SERVICE
        assert error.error_messages == ("You do not have permission.",)
        assert error.status_code == 403
        assert isinstance(error.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_unrecognised_error_keeps_cause(self) -> None:
        async with _client(lambda request: httpx.Response(500, text="boom")) as client:
            with pytest.raises(UnknownRemoteError) as excinfo:
                await make_request(lambda: client.get("/x"), context="/x")

        error = excinfo.value
        assert str(error) == "Failed when invoking Jira API."
        assert error.status_code == 500
        assert isinstance(error.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_network_error_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(TransportError) as excinfo:
                await make_request(lambda: client.get("/x"), context="/x")

        assert excinfo.value.retryable
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_non_json_success_is_decode_error(self) -> None:
        async with _client(lambda request: httpx.Response(200, text="<html/>")) as client:
            with pytest.raises(DecodeError):
                await make_request(lambda: client.get("/x"), context="/x")

    @pytest.mark.asyncio
    async def test_redirect_loop_becomes_unknown_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        async with _client(handler) as client:
            with pytest.raises(UnknownRemoteError) as excinfo:
                await make_request(lambda: client.get("/x"), context="/x")

        error = excinfo.value
        assert error.kind is RemoteErrorKind.UNKNOWN
        assert error.status_code is None
        assert not error.retryable
        assert isinstance(error.__cause__, httpx.TooManyRedirects)

    @pytest.mark.asyncio
    async def test_corrupt_encoded_body_becomes_unknown_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.DecodingError("Error -3 while decompressing data", request=request)

        async with _client(handler) as client:
            with pytest.raises(UnknownRemoteError) as excinfo:
                await make_request(lambda: client.get("/x"), context="/x")

        assert isinstance(excinfo.value.__cause__, httpx.DecodingError)
