"""Gzip differ: decompress both sides and recurse on the payloads."""

from __future__ import annotations

import gzip
import io
import logging
import zlib

from stratadiff.engine.context import CompareContext
from stratadiff.engine.errors import DecompressError, DiffError
from stratadiff.engine.source import File
from stratadiff.tree.models import DiffNode

_log = logging.getLogger(__name__)


def decompressed_name(name: str) -> str:
    """``x.tgz`` -> ``x.tar``; otherwise drop a trailing ``.gz``."""
    if name.endswith(".tgz"):
        return name[: -len(".tgz")] + ".tar"
    if name.endswith(".gz"):
        return name[: -len(".gz")]
    return name


def _inflate(file: File, label: str) -> bytes:
    try:
        file.reader.seek(0)
        stream = gzip.GzipFile(fileobj=file.reader, mode="rb")
    except OSError as exc:
        raise DecompressError(f"creating gzip reader for {label}: {exc}") from exc
    try:
        with stream:
            return stream.read()
    except (OSError, EOFError, zlib.error) as exc:
        raise DecompressError(f"reading gzip content of {label}: {exc}") from exc


def compare_gzip(ctx: CompareContext, node: DiffNode, file1: File, file2: File) -> bool:
    """Compare the decompressed payloads of two gzip streams."""
    from stratadiff.engine.dispatcher import compare_files

    content1 = _inflate(file1, "file1")
    content2 = _inflate(file2, "file2")
    _log.debug("gzip %s: %d vs %d decompressed bytes", file1.name, len(content1), len(content2))

    child = DiffNode(
        source1=decompressed_name(file1.name),
        source2=decompressed_name(file2.name),
    )
    child_file1 = File(name=child.source1, reader=io.BytesIO(content1))
    child_file2 = File(name=child.source2, reader=io.BytesIO(content2))
    try:
        match = compare_files(ctx.child(), child, child_file1, child_file2)
    except DiffError as exc:
        raise exc.wrap("comparing decompressed content") from exc
    if not match:
        node.details.append(child)
    return match
