from __future__ import annotations

from typing import Protocol

from tabby_inline.core.exceptions import (
    NoSuggestionsToAcceptError,
    NoSuggestionsToCycleError,
)
from tabby_inline.core.types import SuggestionSet


class SuggestionPresenter(Protocol):
    def present(self, text: str) -> None: ...

    def release(self) -> None: ...


class SuggestionState:
    """The loaded suggestions and the one currently shown.

    While ``suggestions`` is non-empty, ``index`` is a valid position in it and
    the presenter shows ``suggestions[index]``. Empty means nothing is shown.
    """

    def __init__(self, presenter: SuggestionPresenter) -> None:
        self._presenter = presenter
        self._suggestions: SuggestionSet = ()
        self._index = 0

    @property
    def suggestions(self) -> SuggestionSet:
        return self._suggestions

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_empty(self) -> bool:
        return not self._suggestions

    @property
    def current(self) -> str | None:
        if not self._suggestions:
            return None
        return self._suggestions[self._index]

    def load(self, suggestions: SuggestionSet) -> None:
        self._suggestions = tuple(suggestions)
        self._index = 0
        if self._suggestions:
            self._presenter.present(self._suggestions[0])
        else:
            self._presenter.release()

    def cycle(self) -> str:
        if not self._suggestions:
            raise NoSuggestionsToCycleError()

        self._index = (self._index + 1) % len(self._suggestions)
        selected = self._suggestions[self._index]
        self._presenter.present(selected)
        return selected

    def accept(self) -> str:
        if not self._suggestions:
            raise NoSuggestionsToAcceptError()

        accepted = self._suggestions[self._index]
        self._reset()
        return accepted

    def clear(self) -> None:
        # Dismissing forgets the set: a later cycle() has nothing to show.
        self._reset()

    def _reset(self) -> None:
        self._suggestions = ()
        self._index = 0
        self._presenter.release()
