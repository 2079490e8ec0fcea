from __future__ import annotations

from textual import events

from tabby_inline.cli.autocompletion.base import CompletionResult
from tabby_inline.core.session import CompletionSession, EditorBuffer

REQUEST_KEYS = frozenset({"ctrl+space", "ctrl+at"})
ACCEPT_KEYS = frozenset({"tab", "right"})
CLEAR_KEYS = frozenset({"escape"})


class InlineCompletionController:
    """Maps editor keys onto the suggestion lifecycle.

    Accept and clear keys are only claimed while a suggestion is shown, so
    tab and right keep their usual meaning otherwise. Cycling is left to the
    editor's ``ctrl+n`` binding.
    """

    def __init__(self, session: CompletionSession, buffer: EditorBuffer) -> None:
        self._session = session
        self._buffer = buffer

    @property
    def session(self) -> CompletionSession:
        return self._session

    def on_key(self, event: events.Key) -> CompletionResult:
        keys = {event.key, *event.aliases}

        if keys & REQUEST_KEYS:
            return CompletionResult.REQUEST

        if not self._session.has_suggestions:
            return CompletionResult.IGNORED

        if keys & ACCEPT_KEYS:
            self._session.accept(self._buffer)
            return CompletionResult.HANDLED

        if keys & CLEAR_KEYS:
            self._session.clear()
            return CompletionResult.HANDLED

        return CompletionResult.IGNORED

    def on_text_changed(self) -> None:
        self._session.invalidate()
