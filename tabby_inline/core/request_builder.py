from __future__ import annotations

from tabby_inline.core.types import CompletionRequest, Segments


def build_request(
    language: str, prefix: str, suffix: str | None = None
) -> CompletionRequest:
    """Assemble the completion request for the text around the cursor.

    Pass ``suffix=None`` when the cursor is at the end of the buffer. An empty
    string is a real (empty) suffix and is sent as such.
    """
    return CompletionRequest(
        language=language, segments=Segments(prefix=prefix, suffix=suffix)
    )
