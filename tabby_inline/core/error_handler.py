"""User-facing error formatting.

Errors raised while the editor is running are shown as notifications; errors
that stop the program before the editor starts are printed as a Rich panel.

Usage:
    from tabby_inline.core.error_handler import ErrorHandler

    try:
        config = TabbyInlineConfig.load()
    except ValidationError as e:
        ErrorHandler.display_error(e, context="Configuration")
"""

from __future__ import annotations

from typing import Literal

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from tabby_inline.core.exceptions import (
    ConfigurationError,
    NoSuggestionsToAcceptError,
    NoSuggestionsToCycleError,
    TransportError,
    UnsupportedLanguageError,
)

_console = Console(stderr=True)

COLORS = {
    "error": "#FF4444",
    "warning": "#FFB800",
    "muted": "#888888",
}


class ErrorHandler:
    @staticmethod
    def display_error(
        error: Exception,
        context: str = "Operation",
        console: Console | None = None,
    ) -> None:
        """Print a formatted error panel.

        Args:
            error: The exception that occurred
            context: What was happening (e.g. "Configuration", "Open file")
            console: Optional console (defaults to stderr)
        """
        con = console or _console

        content = Text()
        content.append(f"{type(error).__name__}\n", style=f"bold {COLORS['error']}")
        content.append(str(error), style=COLORS["muted"])

        if isinstance(error, TransportError) and error.status is not None:
            content.append("\n\nEndpoint: ", style=COLORS["muted"])
            content.append(error.endpoint, style="bold")

        con.print(
            Panel(
                content,
                title=f"[{COLORS['error']}]{context} failed[/{COLORS['error']}]",
                border_style=COLORS["error"],
                padding=(1, 2),
            )
        )

    @staticmethod
    def severity_for(error: Exception) -> Literal["information", "warning", "error"]:
        if isinstance(error, (NoSuggestionsToCycleError, NoSuggestionsToAcceptError)):
            return "information"
        if isinstance(error, (ConfigurationError, UnsupportedLanguageError)):
            return "warning"
        return "error"

    @staticmethod
    def format_error_message(error: Exception, context: str = "Error") -> str:
        """Plain text version of an error for log lines."""
        return f"[{context}] {type(error).__name__}: {error}"


__all__ = ["COLORS", "ErrorHandler"]
