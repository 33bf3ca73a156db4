"""Zip differ: central-directory listing and per-entry comparison."""

from __future__ import annotations

import logging
import stat
import struct
import zipfile
import zlib
from datetime import datetime, timezone
from typing import List, Optional

from stratadiff.engine.archive import ArchiveEntry, EntryComparer, compare_entries, recurse_entry
from stratadiff.engine.context import CompareContext
from stratadiff.engine.errors import ArchiveFormatError, IOFailure
from stratadiff.engine.source import File
from stratadiff.engine.tar import LISTING_TIME_FORMAT
from stratadiff.tree.models import DiffNode

_log = logging.getLogger(__name__)

_EXTENDED_TIMESTAMP_ID = 0x5455

# Creator systems (high byte of "version made by")
_CREATOR_FAT = 0
_CREATOR_UNIX = 3
_CREATOR_NTFS = 11
_CREATOR_VFAT = 14
_CREATOR_MACOSX = 19

_MSDOS_READONLY = 0x01
_MSDOS_DIR = 0x10


def format_method(method: int) -> str:
    if method == zipfile.ZIP_STORED:
        return "Store"
    if method == zipfile.ZIP_DEFLATED:
        return "Deflate"
    return f"0x{method:04X}"


def entry_mode(info: zipfile.ZipInfo) -> int:
    """Unix mode bits for an entry, derived from its creator system."""
    mode = 0
    if info.create_system in (_CREATOR_UNIX, _CREATOR_MACOSX):
        mode = info.external_attr >> 16
    elif info.create_system in (_CREATOR_FAT, _CREATOR_NTFS, _CREATOR_VFAT):
        attrs = info.external_attr & 0xFF
        if attrs & _MSDOS_DIR:
            mode = stat.S_IFDIR | 0o777
        else:
            mode = stat.S_IFREG | 0o666
        if attrs & _MSDOS_READONLY:
            mode &= ~0o222
    if info.filename.endswith("/"):
        mode = stat.S_IFDIR | stat.S_IMODE(mode)
    elif stat.S_IFMT(mode) == 0:
        mode |= stat.S_IFREG
    return mode


def _extended_mtime(extra: bytes) -> Optional[int]:
    """Unix mtime from an extended-timestamp extra field, if present."""
    pos = 0
    while pos + 4 <= len(extra):
        header_id, size = struct.unpack_from("<HH", extra, pos)
        body = extra[pos + 4 : pos + 4 + size]
        pos += 4 + size
        if header_id == _EXTENDED_TIMESTAMP_ID and len(body) >= 5 and body[0] & 1:
            return struct.unpack_from("<I", body, 1)[0]
    return None


def format_mtime(info: zipfile.ZipInfo) -> str:
    ts = _extended_mtime(info.extra)
    if ts is not None:
        return datetime.fromtimestamp(ts, tz=timezone.utc).strftime(LISTING_TIME_FORMAT)
    try:
        return datetime(*info.date_time).strftime(LISTING_TIME_FORMAT)
    except ValueError:
        # MS-DOS dates can encode impossible days (e.g. month 0).
        return "%04d-%02d-%02d %02d:%02d:%02d.000000" % info.date_time


def format_zip_listing(info: zipfile.ZipInfo) -> str:
    """One listing line: ``-rw-r--r-- Deflate  4            1980-01-01 00:00:00.000000 foo.txt``."""
    return "%-10s %-8s %-12d %-26s %s\n" % (
        stat.filemode(entry_mode(info)),
        format_method(info.compress_type),
        info.file_size,
        format_mtime(info),
        info.filename,
    )


def _content_loader(archive: zipfile.ZipFile, info: zipfile.ZipInfo, label: str):
    def load() -> bytes:
        try:
            with archive.open(info) as member:
                return member.read()
        except (zipfile.BadZipFile, NotImplementedError, RuntimeError, zlib.error, EOFError) as exc:
            raise ArchiveFormatError(f"opening {info.filename} in {label}: {exc}") from exc
        except OSError as exc:
            raise IOFailure(f"opening {info.filename} in {label}: {exc}") from exc

    return load


def open_zip(file: File, label: str) -> zipfile.ZipFile:
    try:
        file.reader.seek(0)
        return zipfile.ZipFile(file.reader, mode="r")
    except zipfile.BadZipFile as exc:
        raise ArchiveFormatError(f"opening zip {label}: {exc}") from exc
    except OSError as exc:
        raise IOFailure(f"opening zip {label}: {exc}") from exc


def index_zip(archive: zipfile.ZipFile, label: str) -> List[ArchiveEntry]:
    """Central-directory entries of *archive*, in directory order."""
    return [
        ArchiveEntry(
            name=info.filename,
            listing=format_zip_listing(info),
            load=_content_loader(archive, info, label),
        )
        for info in archive.infolist()
    ]


def compare_zip_like(
    ctx: CompareContext,
    node: DiffNode,
    file1: File,
    file2: File,
    compare_entry: EntryComparer = recurse_entry,
) -> bool:
    """Compare two zip containers with a pluggable per-entry comparison."""
    with open_zip(file1, "file1") as zip1, open_zip(file2, "file2") as zip2:
        entries1 = index_zip(zip1, "file1")
        entries2 = index_zip(zip2, "file2")
        _log.debug("zip %s: %d vs %d entries", file1.name, len(entries1), len(entries2))
        return compare_entries(ctx, node, entries1, entries2, compare_entry)


def compare_zip(ctx: CompareContext, node: DiffNode, file1: File, file2: File) -> bool:
    """Compare two zip archives entry by entry."""
    return compare_zip_like(ctx, node, file1, file2)
