"""Magic-byte file type detection."""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO

from stratadiff.engine.errors import IOFailure

GZIP_MAGIC = b"\x1f\x8b"
ZIP_MAGIC = b"PK\x03\x04"
TAR_MAGIC = b"ustar"
TAR_MAGIC_OFFSET = 257
PEEK_SIZE = 1024


class FileType(str, Enum):
    BINARY = "binary"
    TEXT = "text"
    GZIP = "gzip"
    ZIP = "zip"
    TAR = "tar"

    @property
    def is_archive(self) -> bool:
        return self in (FileType.GZIP, FileType.ZIP, FileType.TAR)


def is_binary(buf: bytes) -> bool:
    """NUL bytes, or more than 25% control bytes (<= 0x1F), mean binary.

    An empty buffer counts as text.
    """
    if not buf:
        return False
    if b"\x00" in buf:
        return True
    control = sum(1 for byte in buf if byte <= 0x1F)
    return control * 4 > len(buf)


def detect_type(peek: bytes) -> FileType:
    """Classify a prefix of at most :data:`PEEK_SIZE` bytes."""
    if peek.startswith(GZIP_MAGIC):
        return FileType.GZIP
    if peek.startswith(ZIP_MAGIC):
        return FileType.ZIP
    end = TAR_MAGIC_OFFSET + len(TAR_MAGIC)
    if len(peek) >= end and peek[TAR_MAGIC_OFFSET:end] == TAR_MAGIC:
        return FileType.TAR
    if is_binary(peek[:PEEK_SIZE]):
        return FileType.BINARY
    return FileType.TEXT


def detect_file_type(reader: BinaryIO) -> FileType:
    """Peek the head of *reader* and classify it. The reader is left at offset 0."""
    try:
        reader.seek(0)
        peek = reader.read(PEEK_SIZE)
        reader.seek(0)
    except OSError as exc:
        raise IOFailure(str(exc)) from exc
    return detect_type(peek)
