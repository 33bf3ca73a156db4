"""Byte-equality differ: the first probe for every pair."""

from __future__ import annotations

from stratadiff.engine.errors import DiffError
from stratadiff.engine.source import File, read_all
from stratadiff.tree.models import DiffNode

COMMENT_BINARY_DIFFER = "Binary files differ"
COMMENT_NO_SEMANTIC_DIFF = "Bytes differ but no semantic diff generated"


def compare_binary(node: DiffNode, file1: File, file2: File) -> bool:
    """Return True if both inputs are byte-identical, else note the difference on *node*."""
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
    # TODO: produce a hexdump-style diff for small binary payloads.
    node.comments.append(COMMENT_BINARY_DIFFER)
    return False
