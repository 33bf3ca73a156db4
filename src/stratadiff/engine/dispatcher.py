"""Recursive dispatch: byte probe, type detection, depth gate, typed differ."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, TextIO

from stratadiff.engine.binary import COMMENT_NO_SEMANTIC_DIFF, compare_binary
from stratadiff.engine.context import CompareContext
from stratadiff.engine.errors import DiffError, NoDiff, UnknownTypeError
from stratadiff.engine.filetype import FileType, detect_file_type
from stratadiff.engine.gz import compare_gzip
from stratadiff.engine.jar import compare_jar, is_jar
from stratadiff.engine.source import File
from stratadiff.engine.tar import compare_tar
from stratadiff.engine.text import compare_text
from stratadiff.engine.zip import compare_zip
from stratadiff.tree.models import DiffNode

_log = logging.getLogger(__name__)


@dataclass
class DiffOptions:
    """Options for :func:`diff`.

    ``output`` receives the ASCII rendering, ``output_json`` the canonical
    JSON. ``output_node`` is overwritten in place with the root result.
    ``max_depth`` of 0 means unlimited archive recursion. Setting ``cancel``
    aborts the comparison with :class:`~stratadiff.engine.errors.Cancelled`.
    """

    output: Optional[TextIO] = None
    output_json: Optional[TextIO] = None
    output_node: Optional[DiffNode] = None
    max_depth: int = 0
    cancel: Optional[threading.Event] = None


def compare_files(ctx: CompareContext, node: DiffNode, file1: File, file2: File) -> bool:
    """Compare one pair, populating *node*. Returns True when the inputs are byte-equal."""
    ctx.check()

    # Byte probe first: type-aware differs may canonicalise away real differences.
    if compare_binary(node, file1, file2):
        return True

    try:
        type1 = detect_file_type(file1.reader)
    except DiffError as exc:
        raise exc.wrap("detecting type of file1") from exc
    try:
        type2 = detect_file_type(file2.reader)
    except DiffError as exc:
        raise exc.wrap("detecting type of file2") from exc

    if type1 != type2:
        node.comments = [f"File types differ: {type1.value} vs {type2.value}"]
        return False

    if ctx.at_depth_limit and type1.is_archive:
        _log.debug("%s: depth limit %d reached at depth %d", file1.name, ctx.max_depth, ctx.depth)
        node.comments.append(f"Archive not expanded (depth limit {ctx.max_depth} reached)")
        return False

    typed = DiffNode(source1=node.source1, source2=node.source2)
    _log.debug("%s: comparing as %s at depth %d", file1.name, type1.value, ctx.depth)
    if type1 == FileType.GZIP:
        compare_gzip(ctx, typed, file1, file2)
    elif type1 == FileType.ZIP and is_jar(file1.name) and is_jar(file2.name):
        compare_jar(ctx, typed, file1, file2)
    elif type1 == FileType.ZIP:
        compare_zip(ctx, typed, file1, file2)
    elif type1 == FileType.TAR:
        compare_tar(ctx, typed, file1, file2)
    elif type1 == FileType.TEXT:
        compare_text(typed, file1, file2)
    elif type1 == FileType.BINARY:
        return False  # already reported by the byte probe
    else:
        raise UnknownTypeError(f"unknown file type: {type1!r}")

    if typed.has_content:
        node.adopt(typed)
    else:
        node.comments = [COMMENT_NO_SEMANTIC_DIFF]
    return False


def diff(left: File, right: File, options: Optional[DiffOptions] = None) -> DiffNode:
    """Compare *left* and *right* recursively through containers.

    Returns the root :class:`DiffNode`. Raises :class:`NoDiff` when the inputs
    are byte-equal, in which case no sink is written to. Readers are borrowed:
    their positions are changed and not restored.
    """
    opts = options or DiffOptions()
    if opts.max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {opts.max_depth}")

    root = DiffNode(source1=left.name, source2=right.name)
    ctx = CompareContext(max_depth=opts.max_depth, cancel=opts.cancel)
    try:
        match = compare_files(ctx, root, left, right)
    except DiffError as exc:
        raise exc.wrap("comparing files") from exc
    if match:
        raise NoDiff()

    if opts.output_node is not None:
        opts.output_node.source1 = root.source1
        opts.output_node.source2 = root.source2
        opts.output_node.adopt(root)
    if opts.output_json is not None:
        from stratadiff.output import json_report

        opts.output_json.write(json_report.render(root))
    if opts.output is not None:
        from stratadiff.output import text

        opts.output.write(text.render(root))
    return root
