"""Diff tree model."""

from stratadiff.tree.models import (
    COMMENT_ONLY_IN_FIRST,
    COMMENT_ONLY_IN_SECOND,
    DiffNode,
    NodeStatus,
)

__all__ = [
    "COMMENT_ONLY_IN_FIRST",
    "COMMENT_ONLY_IN_SECOND",
    "DiffNode",
    "NodeStatus",
]
