"""
Main entry point for caretpilot.

    python -m caretpilot.main complete FILE --line 12 --column 4
    python -m caretpilot.main set-key sk-...
    python -m caretpilot.main show-key
"""

import argparse
import logging
import sys

# Local imports from our package structure
from .core.context import TextDocument, extract_context_with_marker
from .core.credentials import FileCredentialStore, default_store
from .core.llm_client import SuggestionClient

logger = logging.getLogger(__name__)


class LoggingRenderer:
    """Renderer that writes suggestions to a stream instead of drawing ghost text."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def show_suggestion(self, text):
        self.stream.write(text + "\n")

    def hide(self):
        logger.info("No suggestion to show")


def _complete(args):
    with open(args.file, "r", encoding="utf-8") as f:
        document = TextDocument(f.read())

    if not 0 <= args.line < document.line_count:
        logger.error("Line %d is outside the document (0..%d)", args.line, document.line_count - 1)
        return 2
    if args.column < 0:
        logger.error("Column %d must not be negative", args.column)
        return 2
    caret = document.offset_of(args.line, args.column)
    context = extract_context_with_marker(document, caret)

    renderer = LoggingRenderer()
    with SuggestionClient(credentials=default_store(), endpoint=args.endpoint, model=args.model) as client:
        suggestions = client.get_suggestions(context)
    if suggestions:
        renderer.show_suggestion(suggestions[0])
    else:
        renderer.hide()
    return 0


def _set_key(args):
    FileCredentialStore().set_api_key(args.key.strip())
    return 0


def _show_key(args):
    key = default_store().get_api_key()
    if not key:
        print("No API key configured")
    else:
        print(f"API key configured: {key[:3]}...{key[-4:]}" if len(key) > 8 else "API key configured")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="caretpilot", description="Inline AI code completion.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    complete = sub.add_parser("complete", help="Print a suggestion for a caret position in a file")
    complete.add_argument("file")
    complete.add_argument("--line", type=int, required=True, help="Zero-based caret line")
    complete.add_argument("--column", type=int, default=0, help="Zero-based caret column")
    complete.add_argument("--endpoint", default=None, help="Override the chat-completions URL")
    complete.add_argument("--model", default=None, help="Override the model id")
    complete.set_defaults(func=_complete)

    set_key = sub.add_parser("set-key", help="Store the API key in the credentials file")
    set_key.add_argument("key")
    set_key.set_defaults(func=_set_key)

    show_key = sub.add_parser("show-key", help="Report whether an API key is configured")
    show_key.set_defaults(func=_show_key)
    return parser


def main(argv=None):
    """
    Entry point for the caretpilot command line.
    """
    args = build_parser().parse_args(argv)

    # Configure logging (adjust level as needed); logs go to stderr, suggestions to stdout
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
