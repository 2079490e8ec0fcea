from __future__ import annotations

from textual.widgets import TextArea


def render_ghost_text(text: str) -> str:
    """Single-line preview of a suggestion.

    Ghost text is drawn inside the cursor line, so only the first line of a
    multi-line suggestion is shown, followed by a count of the hidden lines.
    """
    first, *rest = text.split("\n")
    if not rest:
        return first
    hidden = len(rest)
    return f"{first} (+{hidden} more line{'s' if hidden > 1 else ''})"


class GhostTextPresenter:
    """Shows the selected suggestion as de-emphasised text at the cursor.

    The preview lives in ``TextArea.suggestion``, which is drawn with the
    ``text-area--suggestion`` style and is never part of the document.
    """

    def __init__(self, text_area: TextArea) -> None:
        self._text_area = text_area
        self._presented: str | None = None

    @property
    def presented(self) -> str | None:
        return self._presented

    def present(self, text: str) -> None:
        self._presented = text
        self._text_area.suggestion = render_ghost_text(text)
        self._text_area.refresh()

    def release(self) -> None:
        if self._presented is None and not self._text_area.suggestion:
            return
        self._presented = None
        self._text_area.suggestion = ""
        self._text_area.refresh()
