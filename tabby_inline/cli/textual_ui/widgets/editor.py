from __future__ import annotations

import logging
from typing import Any, ClassVar

from textual import events
from textual.binding import Binding
from textual.widgets import TextArea
from textual.widgets.text_area import LanguageDoesNotExist
from textual.worker import Worker

from tabby_inline.cli.autocompletion.base import CompletionResult
from tabby_inline.cli.autocompletion.inline import InlineCompletionController
from tabby_inline.core.types import SuggestionSet

logger = logging.getLogger(__name__)


class CompletionTextArea(TextArea):
    """Code editor that previews and inserts remote completions inline."""

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("ctrl+space", "request_completion", "Complete", show=True),
        Binding("ctrl+n", "cycle_suggestion", "Next suggestion", show=True),
    ]

    def __init__(
        self, text: str = "", *, classification: str | None = None, **kwargs: Any
    ) -> None:
        kwargs.setdefault("show_line_numbers", True)
        kwargs.setdefault("tab_behavior", "indent")
        super().__init__(text, **kwargs)
        self._classification = classification
        self._controller: InlineCompletionController | None = None
        if classification and classification in self.available_languages:
            try:
                self.language = classification
            except LanguageDoesNotExist:
                logger.info("No syntax highlighting available for %s", classification)

    @property
    def language_classification(self) -> str | None:
        return self._classification

    @language_classification.setter
    def language_classification(self, classification: str | None) -> None:
        self._classification = classification

    def set_completion_controller(
        self, controller: InlineCompletionController | None
    ) -> None:
        self._controller = controller

    def text_before_cursor(self) -> str:
        return self.get_text_range(self.document.start, self.cursor_location)

    def text_after_cursor(self) -> str | None:
        end = self.document.end
        if self.cursor_location == end:
            return None
        return self.get_text_range(self.cursor_location, end)

    def insert_at_cursor(self, text: str) -> None:
        self.insert(text, maintain_selection_offset=False)

    def action_request_completion(self) -> Worker[SuggestionSet | None] | None:
        if self._controller is None:
            return None
        return self.run_worker(
            self._controller.session.request_completion(self),
            name="completion",
            group="completion",
            exit_on_error=False,
        )

    def action_cycle_suggestion(self) -> None:
        if self._controller is not None:
            self._controller.session.cycle()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self._controller is not None:
            self._controller.on_text_changed()

    async def _on_key(self, event: events.Key) -> None:
        controller = self._controller
        if controller:
            match controller.on_key(event):
                case CompletionResult.REQUEST:
                    event.prevent_default()
                    event.stop()
                    self.action_request_completion()
                    return
                case CompletionResult.HANDLED:
                    event.prevent_default()
                    event.stop()
                    return

        await super()._on_key(event)
