from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Literal, Protocol

import httpx

from tabby_inline.core.client import CompletionClient
from tabby_inline.core.config import EndpointConfig, TabbyInlineConfig
from tabby_inline.core.error_handler import ErrorHandler
from tabby_inline.core.exceptions import (
    EMPTY_RESULT_NOTICE,
    TabbyInlineError,
    TransportErrorBuilder,
)
from tabby_inline.core.languages import resolve_language
from tabby_inline.core.request_builder import build_request
from tabby_inline.core.state import SuggestionPresenter, SuggestionState
from tabby_inline.core.types import CompletionRequest, SuggestionSet

logger = logging.getLogger(__name__)

Severity = Literal["information", "warning", "error"]
Notifier = Callable[[str, Severity], None]


class EditorBuffer(Protocol):
    @property
    def language_classification(self) -> str | None: ...

    def text_before_cursor(self) -> str: ...

    def text_after_cursor(self) -> str | None: ...

    def insert_at_cursor(self, text: str) -> None: ...


class CompletionSession:
    """Suggestion lifecycle for one editing session.

    Requests are tagged with a generation number. Only the response of the
    most recently issued request is ever loaded; older ones are dropped when
    they arrive.
    """

    def __init__(
        self,
        config: TabbyInlineConfig,
        presenter: SuggestionPresenter,
        notifier: Notifier,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._notify = notifier
        self._http_client = http_client
        self._client: CompletionClient | None = None
        self._generation = 0
        self.state = SuggestionState(presenter)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_suggestions(self) -> bool:
        return not self.state.is_empty

    def _report(self, error: TabbyInlineError, context: str) -> None:
        logger.warning(ErrorHandler.format_error_message(error, context))
        self._notify(str(error), ErrorHandler.severity_for(error))

    def _client_for(self, endpoint: EndpointConfig) -> CompletionClient:
        if self._client is None or self._client.endpoint != endpoint:
            self._client = CompletionClient(
                endpoint, client=self._http_client, timeout=self._config.timeout
            )
        return self._client

    def prepare(self, buffer: EditorBuffer) -> tuple[EndpointConfig, CompletionRequest]:
        """Validate configuration and build the request for the buffer.

        Raises:
            ConfigurationError: base URL or token missing.
            UnsupportedLanguageError: the buffer language has no mapping.
        """
        endpoint = self._config.endpoint()
        language = resolve_language(
            buffer.language_classification, self._config.languages
        )
        request = build_request(
            language, buffer.text_before_cursor(), buffer.text_after_cursor()
        )
        return endpoint, request

    async def request_completion(self, buffer: EditorBuffer) -> SuggestionSet | None:
        """Fetch suggestions for the cursor context and load them.

        Returns the loaded set, or None when the request failed or its
        response was superseded by a newer request.
        """
        try:
            endpoint, request = self.prepare(buffer)
        except TabbyInlineError as e:
            self._report(e, "Completion request")
            return None

        self._generation += 1
        generation = self._generation
        logger.info("Requesting completions (generation %d)", generation)

        try:
            suggestions = await self._client_for(endpoint).fetch_completions(request)
        except TabbyInlineError as e:
            if generation != self._generation:
                logger.info(
                    "Ignoring failure of stale generation %d: %s", generation, e
                )
                return None
            self._report(e, "Completion request")
            return None
        except Exception as e:
            if generation != self._generation:
                logger.info(
                    "Ignoring failure of stale generation %d: %r", generation, e
                )
                return None
            logger.exception("Unexpected failure of generation %d", generation)
            self._report(
                TransportErrorBuilder.build_unexpected_error(
                    endpoint=endpoint.completions_url, error=e
                ),
                "Completion request",
            )
            return None

        if generation != self._generation:
            logger.info(
                "Discarding stale generation %d (latest is %d)",
                generation,
                self._generation,
            )
            return None

        self.state.load(suggestions)
        if not suggestions:
            self._notify(EMPTY_RESULT_NOTICE, "information")
        return suggestions

    def cycle(self) -> str | None:
        try:
            return self.state.cycle()
        except TabbyInlineError as e:
            self._report(e, "Cycle suggestions")
            return None

    def accept(self, buffer: EditorBuffer) -> str | None:
        try:
            text = self.state.accept()
        except TabbyInlineError as e:
            self._report(e, "Accept suggestion")
            return None
        buffer.insert_at_cursor(text)
        return text

    def clear(self) -> None:
        self.state.clear()

    def invalidate(self) -> None:
        """Forget shown suggestions and any response still in flight."""
        self._generation += 1
        self.state.clear()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
