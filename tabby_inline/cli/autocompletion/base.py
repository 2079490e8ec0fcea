from __future__ import annotations

from enum import StrEnum


class CompletionResult(StrEnum):
    IGNORED = "ignored"
    HANDLED = "handled"
    REQUEST = "request"
