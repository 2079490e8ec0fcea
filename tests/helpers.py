from __future__ import annotations

from collections.abc import Callable
import json
from typing import Any

import httpx

BASE_URL = "http://localhost:8080"
TOKEN = "secret-token"


class FakePresenter:
    def __init__(self) -> None:
        self.shown: str | None = None
        self.history: list[str] = []
        self.release_count = 0

    def present(self, text: str) -> None:
        self.shown = text
        self.history.append(text)

    def release(self) -> None:
        self.shown = None
        self.release_count += 1


class FakeBuffer:
    def __init__(
        self,
        before: str = "",
        after: str | None = None,
        classification: str | None = "python",
    ) -> None:
        self.before = before
        self.after = after
        self.language_classification = classification
        self.inserted: list[str] = []

    def text_before_cursor(self) -> str:
        return self.before

    def text_after_cursor(self) -> str | None:
        return self.after

    def insert_at_cursor(self, text: str) -> None:
        self.inserted.append(text)
        self.before += text


class Notifications:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def __call__(self, message: str, severity: str) -> None:
        self.messages.append((message, severity))

    @property
    def texts(self) -> list[str]:
        return [message for message, _ in self.messages]


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
    )


def mock_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
