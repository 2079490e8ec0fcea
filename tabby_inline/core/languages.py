from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from tabby_inline.core.exceptions import UnsupportedLanguageError

# Editor classification -> language id understood by the completion server.
DEFAULT_LANGUAGE_MAP: dict[str, str] = {
    "bash": "shellscript",
    "c": "c",
    "c++": "cpp",
    "cpp": "cpp",
    "csharp": "csharp",
    "css": "css",
    "dart": "dart",
    "go": "go",
    "haskell": "haskell",
    "html": "html",
    "java": "java",
    "javascript": "javascript",
    "json": "json",
    "kotlin": "kotlin",
    "lua": "lua",
    "markdown": "markdown",
    "php": "php",
    "python": "python",
    "ruby": "ruby",
    "rust": "rust",
    "scala": "scala",
    "sh": "shellscript",
    "sql": "sql",
    "swift": "swift",
    "toml": "toml",
    "typescript": "typescript",
    "yaml": "yaml",
}

# File suffix -> editor classification, used when opening a file.
EXTENSION_CLASSIFICATIONS: dict[str, str] = {
    ".c": "c",
    ".h": "c",
    ".cc": "c++",
    ".cpp": "c++",
    ".cxx": "c++",
    ".hpp": "c++",
    ".cs": "csharp",
    ".css": "css",
    ".dart": "dart",
    ".go": "go",
    ".hs": "haskell",
    ".htm": "html",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".mjs": "javascript",
    ".json": "json",
    ".kt": "kotlin",
    ".lua": "lua",
    ".md": "markdown",
    ".php": "php",
    ".py": "python",
    ".pyi": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".scala": "scala",
    ".sh": "bash",
    ".bash": "bash",
    ".sql": "sql",
    ".swift": "swift",
    ".toml": "toml",
    ".ts": "typescript",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def classify_path(path: Path) -> str | None:
    return EXTENSION_CLASSIFICATIONS.get(path.suffix.lower())


def resolve_language(
    classification: str | None, mapping: Mapping[str, str] | None = None
) -> str:
    """Map an editor language classification to the wire language id.

    Raises:
        UnsupportedLanguageError: the classification has no entry in ``mapping``.
    """
    table = DEFAULT_LANGUAGE_MAP if mapping is None else mapping
    if classification is None:
        raise UnsupportedLanguageError(None)
    language = table.get(classification) or table.get(classification.lower())
    if not language:
        raise UnsupportedLanguageError(classification)
    return language
