from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar

import httpx
from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer, Static

from tabby_inline.cli.autocompletion.inline import InlineCompletionController
from tabby_inline.cli.textual_ui.widgets.editor import CompletionTextArea
from tabby_inline.cli.textual_ui.widgets.ghost_text import GhostTextPresenter
from tabby_inline.core.config import TabbyInlineConfig
from tabby_inline.core.languages import classify_path
from tabby_inline.core.session import CompletionSession, Severity

logger = logging.getLogger(__name__)


class EditorApp(App[None]):
    """Single-file editor with inline completions."""

    TITLE = "tabby-inline"

    CSS = """
    #editor {
        height: 1fr;
    }

    #status {
        height: 1;
        padding: 0 1;
        background: $panel;
        color: $text-muted;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        config: TabbyInlineConfig,
        path: Path | None = None,
        *,
        text: str | None = None,
        classification: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__()
        self.config = config
        self.path = path
        self._initial_text = text
        self._classification = classification or (
            classify_path(path) if path is not None else None
        )
        self._http_client = http_client
        self.editor: CompletionTextArea | None = None
        self.session: CompletionSession | None = None

    def _read_initial_text(self) -> str:
        if self._initial_text is not None:
            return self._initial_text
        if self.path is not None and self.path.exists():
            return self.path.read_text(encoding="utf-8")
        return ""

    def compose(self) -> ComposeResult:
        self.editor = CompletionTextArea(
            self._read_initial_text(), classification=self._classification, id="editor"
        )
        yield self.editor
        yield Static(self._status_text(), id="status")
        yield Footer()

    def on_mount(self) -> None:
        editor = self.query_one("#editor", CompletionTextArea)
        self.session = CompletionSession(
            self.config,
            GhostTextPresenter(editor),
            self.report,
            http_client=self._http_client,
        )
        editor.set_completion_controller(
            InlineCompletionController(self.session, editor)
        )
        editor.focus()

    async def on_unmount(self) -> None:
        if self.session is not None:
            await self.session.close()

    def _status_text(self) -> str:
        name = str(self.path) if self.path else "[scratch]"
        language = self._classification or "plain text"
        server = self.config.base_url or "no completion server configured"
        return f"{name} · {language} · {server}"

    def report(self, message: str, severity: Severity) -> None:
        self.notify(message, severity=severity, markup=False)

    def action_save(self) -> None:
        if self.path is None or self.editor is None:
            self.notify("Nothing to save: no file was opened", severity="warning")
            return
        try:
            self.path.write_text(self.editor.text, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to save %s: %s", self.path, e)
            self.notify(f"Could not save {self.path}: {e}", severity="error", markup=False)
            return
        self.notify(f"Saved {self.path}", markup=False)
