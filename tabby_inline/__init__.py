"""tabby-inline - inline AI code completions for a textual editor."""

from __future__ import annotations

from pathlib import Path

__version__ = "0.1.0"
TABBY_INLINE_ROOT = Path(__file__).parent

__all__ = ["TABBY_INLINE_ROOT", "__version__"]
