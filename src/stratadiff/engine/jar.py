"""JAR differ: zip semantics with class files compared by disassembly."""

from __future__ import annotations

import logging

from stratadiff.engine.archive import ArchiveEntry, recurse_entry
from stratadiff.engine.binary import COMMENT_NO_SEMANTIC_DIFF
from stratadiff.engine.classfile import ClassFormatError, disassemble_class
from stratadiff.engine.context import CompareContext
from stratadiff.engine.errors import DiffError
from stratadiff.engine.source import File
from stratadiff.engine.zip import compare_zip_like
from stratadiff.textdiff.unified import unified_hunks
from stratadiff.tree.models import DiffNode

_log = logging.getLogger(__name__)

COMMENT_INVALID_CLASS = "Binary files differ (not valid class files)"


def is_jar(name: str) -> bool:
    return name.endswith(".jar")


def is_class_file(name: str) -> bool:
    return name.endswith(".class")


def compare_class_files(node: DiffNode, content1: bytes, content2: bytes) -> bool:
    """Diff two class files through their disassemblies.

    Unparseable input is reported as a plain binary difference.
    """
    if content1 == content2:
        return True
    try:
        disassembly1 = disassemble_class(content1)
        disassembly2 = disassemble_class(content2)
    except ClassFormatError as exc:
        _log.debug("%s: class parse failed: %s", node.source1, exc)
        node.comments.append(COMMENT_INVALID_CLASS)
        return False
    hunks = unified_hunks(disassembly1, disassembly2)
    if hunks:
        node.unified_diff = hunks
    else:
        node.comments.append(COMMENT_NO_SEMANTIC_DIFF)
    return False


def _compare_jar_entry(
    ctx: CompareContext, node: DiffNode, entry1: ArchiveEntry, entry2: ArchiveEntry, name: str
) -> bool:
    if is_class_file(entry1.name):
        try:
            content1, content2 = entry1.load(), entry2.load()
        except DiffError as exc:
            raise exc.wrap(f"comparing {name}") from exc
        return compare_class_files(node, content1, content2)
    return recurse_entry(ctx, node, entry1, entry2, name)


def compare_jar(ctx: CompareContext, node: DiffNode, file1: File, file2: File) -> bool:
    """Compare two JAR archives."""
    return compare_zip_like(ctx, node, file1, file2, _compare_jar_entry)
