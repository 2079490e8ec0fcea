from __future__ import annotations

import json
import logging
import types
from typing import Any, NamedTuple

import httpx
from pydantic import ValidationError

from tabby_inline.core.config import EndpointConfig
from tabby_inline.core.exceptions import (
    MalformedResponseError,
    TransportError,
    TransportErrorBuilder,
)
from tabby_inline.core.types import CompletionRequest, CompletionResponse, SuggestionSet

logger = logging.getLogger(__name__)


class PreparedRequest(NamedTuple):
    url: str
    headers: dict[str, str]
    body: bytes


def prepare_request(
    endpoint: EndpointConfig, request: CompletionRequest
) -> PreparedRequest:
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": f"access_token {endpoint.token}",
    }
    body = json.dumps(request.to_payload()).encode("utf-8")
    return PreparedRequest(endpoint.completions_url, headers, body)


def parse_response(url: str, response: httpx.Response) -> SuggestionSet:
    try:
        data: Any = response.json()
    except ValueError as e:
        raise MalformedResponseError(
            endpoint=url, reason=f"invalid JSON ({e})", body_text=response.text
        ) from e

    if not isinstance(data, dict):
        raise MalformedResponseError(
            endpoint=url,
            reason=f"expected a JSON object, got {type(data).__name__}",
            body_text=response.text,
        )

    try:
        parsed = CompletionResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            endpoint=url,
            reason=f"unexpected 'choices' shape ({e.error_count()} errors)",
            body_text=response.text,
        ) from e

    return parsed.suggestions()


class CompletionClient:
    def __init__(
        self,
        endpoint: EndpointConfig,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: Where to send requests and which token to use.
            client: Optional httpx client to borrow. If not provided, one will
                be created on first use and closed by ``close()``.
            timeout: Per-request timeout in seconds for an owned client.
        """
        self._endpoint = endpoint
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    @property
    def endpoint(self) -> EndpointConfig:
        return self._endpoint

    async def __aenter__(self) -> CompletionClient:
        self._get_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                limits=httpx.Limits(max_keepalive_connections=2, max_connections=4),
            )
            self._owns_client = True
        return self._client

    async def fetch_completions(self, request: CompletionRequest) -> SuggestionSet:
        """Send one completion request and return the suggestions in server order.

        Raises:
            TransportError: the server could not be reached or answered non-2xx.
            MalformedResponseError: the body is not the expected JSON shape.
        """
        url, headers, body = prepare_request(self._endpoint, request)
        logger.debug(
            "POST %s language=%s prefix=%d chars suffix=%s",
            url,
            request.language,
            len(request.prefix),
            "absent" if request.suffix is None else f"{len(request.suffix)} chars",
        )

        try:
            response = await self._get_client().post(url, content=body, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportErrorBuilder.build_http_error(
                endpoint=url, response=e.response
            ) from e
        except httpx.RequestError as e:
            raise TransportErrorBuilder.build_request_error(
                endpoint=url, error=e
            ) from e

        suggestions = parse_response(url, response)
        logger.debug("Received %d suggestions from %s", len(suggestions), url)
        return suggestions

    async def close(self) -> None:
        if self._owns_client and self._client:
            await self._client.aclose()
            self._client = None


__all__ = [
    "CompletionClient",
    "MalformedResponseError",
    "PreparedRequest",
    "TransportError",
    "parse_response",
    "prepare_request",
]
