"""Line-ending-aware text differ."""

from __future__ import annotations

import logging

from stratadiff.engine.errors import DiffError
from stratadiff.engine.source import File, read_all
from stratadiff.textdiff.line_endings import LineEnding, detect_line_endings, normalize_to_lf
from stratadiff.textdiff.unified import unified_hunks
from stratadiff.tree.models import DiffNode

_log = logging.getLogger(__name__)

COMMENT_MIXED_ENDINGS = "WARNING: Files have mixed line endings which are not shown in diff"
COMMENT_NORMALIZED = "Diff shown with normalized line endings"


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="backslashreplace")


def compare_text(node: DiffNode, file1: File, file2: File) -> bool:
    """Compare two text inputs, attaching hunks and line-ending notes to *node*."""
    try:
        content1 = read_all(file1.reader)
    except DiffError as exc:
        raise exc.wrap("reading file1") from exc
    try:
        content2 = read_all(file2.reader)
    except DiffError as exc:
        raise exc.wrap("reading file2") from exc
    if content1 == content2:
        return True

    # --- Line endings ---
    ending1 = detect_line_endings(content1)
    ending2 = detect_line_endings(content2)
    endings_differ = (
        ending1 != ending2 and ending1 != LineEnding.NONE and ending2 != LineEnding.NONE
    )
    if endings_differ:
        node.comments.append(f"Line endings differ (-{ending1.value},+{ending2.value})")
    elif ending1 == LineEnding.MIXED and ending2 == LineEnding.MIXED:
        node.comments.append(COMMENT_MIXED_ENDINGS)

    normalized1 = normalize_to_lf(content1)
    normalized2 = normalize_to_lf(content2)
    if normalized1 == normalized2:
        _log.debug("%s: only line endings differ", file1.name)
        return False

    # --- Content ---
    hunks = unified_hunks(_decode(normalized1), _decode(normalized2))
    if hunks:
        node.unified_diff = hunks
        if endings_differ:
            node.comments.append(COMMENT_NORMALIZED)
    return False
