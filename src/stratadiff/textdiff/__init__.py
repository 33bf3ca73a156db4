"""Text diff primitives: unified hunks and line-ending handling."""

from stratadiff.textdiff.line_endings import LineEnding, detect_line_endings, normalize_to_lf
from stratadiff.textdiff.unified import DEFAULT_CONTEXT_LINES, unified_hunks

__all__ = [
    "DEFAULT_CONTEXT_LINES",
    "LineEnding",
    "detect_line_endings",
    "normalize_to_lf",
    "unified_hunks",
]
