"""Tar differ: offset-indexed listing and per-entry comparison."""

from __future__ import annotations

import logging
import stat
import tarfile
from datetime import datetime, timedelta, timezone
from typing import List

from stratadiff.engine.archive import ArchiveEntry, compare_entries
from stratadiff.engine.context import CompareContext
from stratadiff.engine.errors import ArchiveFormatError, IOFailure
from stratadiff.engine.source import File
from stratadiff.tree.models import DiffNode

_log = logging.getLogger(__name__)

LISTING_TIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_REGULAR_TYPES = (tarfile.REGTYPE, tarfile.AREGTYPE)

_TYPE_MODE_BITS = {
    tarfile.DIRTYPE: stat.S_IFDIR,
    tarfile.SYMTYPE: stat.S_IFLNK,
    tarfile.CHRTYPE: stat.S_IFCHR,
    tarfile.BLKTYPE: stat.S_IFBLK,
    tarfile.FIFOTYPE: stat.S_IFIFO,
}


def format_mtime(seconds: float) -> str:
    """UTC timestamp with fixed microsecond precision (26 characters)."""
    return (_EPOCH + timedelta(seconds=seconds)).strftime(LISTING_TIME_FORMAT)


def format_tar_listing(member: tarfile.TarInfo) -> str:
    """One listing line: ``-rw-r--r-- 0 0            5 1970-01-01 00:00:00.000000 file.txt``."""
    mode = stat.filemode(_TYPE_MODE_BITS.get(member.type, stat.S_IFREG) | (member.mode & 0o7777))
    return "%-10s %d %d %12d %-26s %s\n" % (
        mode,
        member.uid,
        member.gid,
        member.size,
        format_mtime(member.mtime),
        member.name,
    )


def _content_loader(file: File, member: tarfile.TarInfo, label: str):
    offset, size = member.offset_data, member.size

    def load() -> bytes:
        try:
            file.reader.seek(offset)
            data = file.reader.read(size)
        except OSError as exc:
            raise IOFailure(f"reading content of {member.name} from {label}: {exc}") from exc
        if len(data) != size:
            raise ArchiveFormatError(
                f"reading content of {member.name} from {label}: "
                f"expected {size} bytes, got {len(data)}"
            )
        return data

    return load


def index_tar(file: File, label: str) -> List[ArchiveEntry]:
    """Enumerate members of *file*, recording where each member's content starts."""
    try:
        file.reader.seek(0)
        with tarfile.open(fileobj=file.reader, mode="r:") as archive:
            members = archive.getmembers()
    except (tarfile.TarError, EOFError) as exc:
        raise ArchiveFormatError(f"reading {label}: {exc}") from exc
    except OSError as exc:
        raise IOFailure(f"reading {label}: {exc}") from exc

    entries: List[ArchiveEntry] = []
    for member in members:
        entries.append(ArchiveEntry(
            name=member.name,
            listing=format_tar_listing(member),
            load=_content_loader(file, member, label),
            typeflag=member.type.decode("latin-1"),
            regular=member.type in _REGULAR_TYPES,
        ))
    return entries


def compare_tar(ctx: CompareContext, node: DiffNode, file1: File, file2: File) -> bool:
    """Compare two tar archives entry by entry."""
    entries1 = index_tar(file1, "tar1")
    entries2 = index_tar(file2, "tar2")
    _log.debug("tar %s: %d vs %d entries", file1.name, len(entries1), len(entries2))
    return compare_entries(ctx, node, entries1, entries2)
