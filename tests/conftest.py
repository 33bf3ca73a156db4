"""Shared test fixtures: in-memory builders for tar, gzip, zip and class files."""

from __future__ import annotations

import gzip
import io
import struct
import tarfile
import zipfile
from typing import Iterable, Optional, Sequence, Tuple

import pytest

Entries = Iterable[Tuple[str, bytes]]


def build_tar(entries: Entries) -> bytes:
    """Uncompressed ustar archive; every member 0644, uid/gid 0, mtime 0."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.USTAR_FORMAT) as archive:
        for name, data in entries:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            info.mtime = 0
            archive.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def build_gzip(data: bytes, level: int = 9) -> bytes:
    return gzip.compress(data, compresslevel=level, mtime=0)


def build_zip(entries: Entries, method: int = zipfile.ZIP_STORED) -> bytes:
    """Zip archive with Unix 0644 entries dated 1980-01-01 00:00:00."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w") as archive:
        for name, data in entries:
            info = zipfile.ZipInfo(name, date_time=(1980, 1, 1, 0, 0, 0))
            info.create_system = 3
            info.external_attr = 0o100644 << 16
            info.compress_type = method
            archive.writestr(info, data)
    return buf.getvalue()


def _utf8(s: str) -> bytes:
    raw = s.encode("utf-8")
    return b"\x01" + struct.pack(">H", len(raw)) + raw


def build_class(
    strings: Sequence[str] = ("Code", "Hello"),
    code: Optional[bytes] = b"\x2a\xb1",
    major: int = 52,
    access_flags: int = 0x0021,
    with_long: bool = False,
) -> bytes:
    """Minimal class file with one method whose Code attribute holds *code*.

    ``strings[0]`` must be ``"Code"`` for the attribute to be recognised.
    With *with_long* a Long constant (two pool slots) follows the strings.
    """
    pool = b"".join(_utf8(s) for s in strings)
    count = len(strings) + 1
    if with_long:
        pool += b"\x05" + struct.pack(">q", 42)
        count += 2
        pool += _utf8("after-long")
        count += 1

    out = b"\xca\xfe\xba\xbe" + struct.pack(">HH", 0, major)
    out += struct.pack(">H", count) + pool
    out += struct.pack(">HHH", access_flags, 0, 0)  # access, this_class, super_class
    out += struct.pack(">H", 0)  # interfaces
    out += struct.pack(">H", 0)  # fields
    if code is None:
        out += struct.pack(">H", 0)
    else:
        body = struct.pack(">HHI", 2, 1, len(code)) + code + struct.pack(">HH", 0, 0)
        out += struct.pack(">H", 1)  # methods
        out += struct.pack(">HHH", 0x0001, 2, 2)
        out += struct.pack(">H", 1)  # attributes
        out += struct.pack(">HI", 1, len(body)) + body
    out += struct.pack(">H", 0)  # class attributes
    return out


@pytest.fixture
def make_tar():
    return build_tar


@pytest.fixture
def make_gzip():
    return build_gzip


@pytest.fixture
def make_zip():
    return build_zip


@pytest.fixture
def make_class():
    return build_class
