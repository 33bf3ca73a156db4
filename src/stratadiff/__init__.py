"""stratadiff: recursive semantic diffs of files, archives and class files."""

from stratadiff.engine import (
    DiffError,
    DiffOptions,
    File,
    NoDiff,
    diff,
)
from stratadiff.tree import DiffNode, NodeStatus

__version__ = "0.1.0"

__all__ = [
    "DiffError",
    "DiffNode",
    "DiffOptions",
    "File",
    "NoDiff",
    "NodeStatus",
    "__version__",
    "diff",
]
