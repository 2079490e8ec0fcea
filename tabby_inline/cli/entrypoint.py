"""tabby-inline CLI entrypoint.

Opens a file in the inline-completion editor.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from pydantic import ValidationError

from tabby_inline import __version__
from tabby_inline.core.config import TabbyInlineConfig
from tabby_inline.core.error_handler import ErrorHandler
from tabby_inline.core.utils import setup_logging


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tabby-inline",
        description="Edit a file with inline AI code completions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  ctrl+space   request completions at the cursor
  ctrl+n       show the next suggestion
  tab / right  accept the shown suggestion
  escape       dismiss the suggestions
  ctrl+s       save
        """,
    )
    parser.add_argument("file", nargs="?", type=Path, help="File to edit")
    parser.add_argument("--base-url", help="Completion server base URL")
    parser.add_argument("--token", help="Access token for the completion server")
    parser.add_argument(
        "--language",
        help="Language of the buffer (default: guessed from the file extension)",
    )
    parser.add_argument("--log-file", type=Path, help="Write debug logs to this file")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def load_config_or_exit(args: argparse.Namespace) -> TabbyInlineConfig:
    try:
        config = TabbyInlineConfig.load(
            base_url=args.base_url, token=args.token, log_file=args.log_file
        )
    except ValidationError as e:
        ErrorHandler.display_error(e, context="Configuration")
        sys.exit(1)
    if args.log_file:
        config.log_level = "DEBUG"
    return config


def main(argv: list[str] | None = None) -> None:
    args = parse_arguments(argv)
    config = load_config_or_exit(args)
    setup_logging(config.log_level, config.log_file)

    text = ""
    if args.file is not None and args.file.exists():
        try:
            text = args.file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            ErrorHandler.display_error(e, context="Open file")
            sys.exit(1)

    from tabby_inline.cli.textual_ui.app import EditorApp

    EditorApp(config, args.file, text=text, classification=args.language).run()


if __name__ == "__main__":
    main()
