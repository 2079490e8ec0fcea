from __future__ import annotations

import json

import httpx
import pytest

from tabby_inline.core.client import CompletionClient, prepare_request
from tabby_inline.core.config import EndpointConfig
from tabby_inline.core.exceptions import MalformedResponseError, TransportError
from tabby_inline.core.request_builder import build_request
from tests.helpers import BASE_URL, TOKEN, json_response, mock_client

ENDPOINT = EndpointConfig(base_url=BASE_URL, token=TOKEN)


class TestPrepareRequest:
    def test_targets_completions_path_with_auth_headers(self) -> None:
        request = build_request("python", "import ", None)

        url, headers, body = prepare_request(ENDPOINT, request)

        assert url == "http://localhost:8080/v1/completions"
        assert headers == {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": "access_token secret-token",
        }
        assert json.loads(body) == {
            "language": "python",
            "segments": {"prefix": "import "},
        }


class TestFetchCompletions:
    @pytest.mark.asyncio
    async def test_posts_request_and_returns_choices_in_order(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(
                {
                    "id": "cmpl-1",
                    "choices": [
                        {"index": 0, "text": "return a + b"},
                        {"index": 1, "text": "pass"},
                    ],
                }
            )

        async with mock_client(handler) as http:
            client = CompletionClient(ENDPOINT, client=http)
            result = await client.fetch_completions(
                build_request("python", "def add(a, b):\n    ", "")
            )

        assert result == ("return a + b", "pass")
        assert len(seen) == 1
        sent = seen[0]
        assert sent.method == "POST"
        assert str(sent.url) == "http://localhost:8080/v1/completions"
        assert sent.headers["authorization"] == "access_token secret-token"
        assert sent.headers["accept"] == "application/json"
        assert json.loads(sent.content)["segments"] == {
            "prefix": "def add(a, b):\n    ",
            "suffix": "",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload", [{"choices": []}, {}, {"choices": None}, {"id": "x"}]
    )
    async def test_missing_or_empty_choices_is_empty_result(self, payload: dict) -> None:
        async with mock_client(lambda _: json_response(payload)) as http:
            client = CompletionClient(ENDPOINT, client=http)
            result = await client.fetch_completions(build_request("python", "x"))

        assert result == ()

    @pytest.mark.asyncio
    async def test_non_2xx_raises_transport_error_with_server_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response({"error": {"message": "model not loaded"}}, 503)

        async with mock_client(handler) as http:
            client = CompletionClient(ENDPOINT, client=http)
            with pytest.raises(TransportError) as exc_info:
                await client.fetch_completions(build_request("python", "x"))

        error = exc_info.value
        assert error.status == 503
        assert error.parsed_error == "model not loaded"
        assert "model not loaded" in str(error)
        assert "503" in str(error)

    @pytest.mark.asyncio
    async def test_unauthorized_has_friendly_message(self) -> None:
        async with mock_client(lambda _: httpx.Response(401, text="nope")) as http:
            client = CompletionClient(ENDPOINT, client=http)
            with pytest.raises(TransportError, match="Invalid access token"):
                await client.fetch_completions(build_request("python", "x"))

    @pytest.mark.asyncio
    async def test_network_failure_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as http:
            client = CompletionClient(ENDPOINT, client=http)
            with pytest.raises(TransportError) as exc_info:
                await client.fetch_completions(build_request("python", "x"))

        assert exc_info.value.status is None
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>oops</html>"),
            httpx.Response(200, text=""),
            httpx.Response(200, json=["return a"]),
            httpx.Response(200, json={"choices": "return a"}),
            httpx.Response(200, json={"choices": [{"index": 0}]}),
            httpx.Response(200, json={"choices": [{"text": 42}]}),
        ],
    )
    async def test_unexpected_body_raises_malformed_response(
        self, response: httpx.Response
    ) -> None:
        async with mock_client(lambda _: response) as http:
            client = CompletionClient(ENDPOINT, client=http)
            with pytest.raises(MalformedResponseError):
                await client.fetch_completions(build_request("python", "x"))

    @pytest.mark.asyncio
    async def test_borrowed_client_is_not_closed(self) -> None:
        http = mock_client(lambda _: json_response({"choices": []}))
        async with CompletionClient(ENDPOINT, client=http) as client:
            await client.fetch_completions(build_request("python", "x"))

        assert not http.is_closed
        await http.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self) -> None:
        client = CompletionClient(ENDPOINT)
        async with client:
            owned = client._get_client()

        assert owned.is_closed
