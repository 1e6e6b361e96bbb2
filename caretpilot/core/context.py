"""
context.py

Builds the caret-marked text window that is sent to the model, plus a small
in-memory document that satisfies the host accessor shape.
"""

import bisect
import contextlib
import threading

from ..config import settings


class TextDocument:
    """
    Minimal host document: line bookkeeping over an immutable string.

    Offsets are character offsets into `text`. Line end offsets exclude the
    line terminator, the same as most editor document models.
    """

    def __init__(self, text=""):
        self.text = text
        self.read_lock = threading.RLock()
        # Start offset of every line; a trailing newline opens one more (empty) line
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    @property
    def line_count(self):
        return len(self._line_starts)

    def line_number(self, offset):
        offset = max(0, min(offset, len(self.text)))
        return bisect.bisect_right(self._line_starts, offset) - 1

    def line_start_offset(self, line):
        return self._line_starts[line]

    def line_end_offset(self, line):
        if line + 1 < len(self._line_starts):
            return self._line_starts[line + 1] - 1
        return len(self.text)

    def get_text(self, start, end):
        return self.text[start:end]

    def offset_of(self, line, column):
        """Offset for a zero-based (line, column), column clamped to the line."""
        start = self.line_start_offset(line)
        return max(start, min(start + column, self.line_end_offset(line)))


def extract_context_with_marker(document, caret_offset, read_lock=None, lines_around=None, marker=None):
    """
    Return up to `lines_around` lines before and after the caret's line, with
    `marker` inserted at the exact caret position.

    :param document:     Host accessor exposing line_count, line_number(offset),
                         line_start_offset(line), line_end_offset(line), get_text(start, end).
    :param caret_offset: Absolute caret offset in the document.
    :param read_lock:    Context manager held around every document read. Falls back
                         to `document.read_lock` when present.
    """
    if lines_around is None:
        lines_around = getattr(settings, "CONTEXT_LINES", 10)
    if marker is None:
        marker = getattr(settings, "CARET_MARKER", "<CARET>")
    if read_lock is None:
        read_lock = getattr(document, "read_lock", None) or contextlib.nullcontext()

    with read_lock:
        caret_line = document.line_number(caret_offset)

        start_line = max(0, caret_line - lines_around)
        last_line = document.line_count - 1
        end_line = min(last_line, caret_line + lines_around)

        start_offset = document.line_start_offset(start_line)
        end_offset = document.line_end_offset(end_line)
        block = document.get_text(start_offset, end_offset)

    relative = min(max(caret_offset - start_offset, 0), len(block))
    return block[:relative] + marker + block[relative:]
