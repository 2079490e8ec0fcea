from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
import json
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

EMPTY_RESULT_NOTICE = "No suggestions"


class TabbyInlineError(Exception):
    """Base class for every error surfaced to the user as a message."""


class ConfigurationError(TabbyInlineError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        fields = ", ".join(missing)
        super().__init__(
            f"Completion endpoint is not configured (missing: {fields}). "
            "Set TABBY_INLINE_BASE_URL and TABBY_INLINE_TOKEN or edit the config file."
        )


class UnsupportedLanguageError(TabbyInlineError):
    def __init__(self, classification: str | None) -> None:
        self.classification = classification
        label = classification or "plain text"
        super().__init__(f"Completions are not available for {label} buffers")


class NoSuggestionsToCycleError(TabbyInlineError):
    def __init__(self) -> None:
        super().__init__("No suggestions available")


class NoSuggestionsToAcceptError(TabbyInlineError):
    def __init__(self) -> None:
        super().__init__("No suggestion to accept")


class MalformedResponseError(TabbyInlineError):
    def __init__(self, *, endpoint: str, reason: str, body_text: str | None) -> None:
        self.endpoint = endpoint
        self.reason = reason
        self.body_text = body_text or ""
        super().__init__(
            f"Malformed completion response from {endpoint}: {reason}"
        )


class ErrorDetail(BaseModel):
    model_config = ConfigDict(extra="ignore")
    message: str | None = None


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    error: ErrorDetail | dict[str, Any] | str | None = None
    message: str | None = None
    detail: str | None = None

    @property
    def primary_message(self) -> str | None:
        if e := self.error:
            match e:
                case str(m):
                    return m
                case {"message": str(m)}:
                    return m
                case ErrorDetail(message=str(m)):
                    return m
        if m := self.message:
            return m
        if d := self.detail:
            return d
        return None


class TransportError(TabbyInlineError):
    def __init__(
        self,
        *,
        endpoint: str,
        status: int | None,
        reason: str | None,
        headers: Mapping[str, str] | None,
        body_text: str | None,
        parsed_error: str | None,
    ) -> None:
        self.endpoint = endpoint
        self.status = status
        self.reason = reason
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.body_text = body_text or ""
        self.parsed_error = parsed_error
        super().__init__(self._fmt())

    def _fmt(self) -> str:
        if self.status == HTTPStatus.UNAUTHORIZED:
            return "Invalid access token. Please check your token and try again."

        if self.status is None:
            return f"Could not reach completion server at {self.endpoint}: {self.reason or 'N/A'}"

        try:
            status_label = f"{self.status} {HTTPStatus(self.status).phrase}"
        except ValueError:
            status_label = str(self.status)
        message = self.parsed_error or self._excerpt(self.body_text) or "N/A"
        return f"Completion request failed [{status_label}]: {message}"

    @staticmethod
    def _excerpt(s: str, *, n: int = 200) -> str:
        s = s.strip().replace("\n", " ")
        return s[:n] + ("…" if len(s) > n else "")


class TransportErrorBuilder:
    @classmethod
    def build_http_error(
        cls, *, endpoint: str, response: httpx.Response
    ) -> TransportError:
        try:
            body_text = response.text
        except httpx.ResponseNotRead:
            body_text = None

        return TransportError(
            endpoint=endpoint,
            status=response.status_code,
            reason=response.reason_phrase,
            headers=dict(response.headers.items()),
            body_text=body_text,
            parsed_error=cls._parse_server_error(body_text),
        )

    @classmethod
    def build_request_error(
        cls, *, endpoint: str, error: httpx.RequestError
    ) -> TransportError:
        return TransportError(
            endpoint=endpoint,
            status=None,
            reason=str(error) or repr(error),
            headers={},
            body_text=None,
            parsed_error="Network error",
        )

    @classmethod
    def build_unexpected_error(
        cls, *, endpoint: str, error: Exception
    ) -> TransportError:
        return TransportError(
            endpoint=endpoint,
            status=None,
            reason=f"{type(error).__name__}: {error}",
            headers={},
            body_text=None,
            parsed_error=None,
        )

    @staticmethod
    def _parse_server_error(body_text: str | None) -> str | None:
        if not body_text:
            return None
        try:
            data = json.loads(body_text)
            error_model = ErrorResponse.model_validate(data)
            return error_model.primary_message
        except (json.JSONDecodeError, ValidationError):
            return None
