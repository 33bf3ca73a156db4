"""Input unit for comparisons.

Readers are *borrowed*: the engine seeks them freely and never restores the
position, and never closes them. Callers that need the position afterwards
must save it themselves. Sharing one reader between two concurrent
comparisons corrupts both.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from stratadiff.engine.errors import IOFailure


@dataclass
class File:
    """A display name plus a seekable byte source. Only content drives detection."""

    name: str
    reader: BinaryIO

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "File":
        return cls(name=name, reader=io.BytesIO(data))

    @classmethod
    def from_path(cls, path: Union[str, Path], name: Optional[str] = None) -> "File":
        """Load *path* into memory. *name* defaults to the path as given."""
        p = Path(path)
        try:
            data = p.read_bytes()
        except OSError as exc:
            raise IOFailure(f"reading {p}: {exc}") from exc
        return cls.from_bytes(name if name is not None else str(path), data)


def read_all(reader: BinaryIO) -> bytes:
    """Rewind *reader* and return its full content."""
    try:
        reader.seek(0)
        return reader.read()
    except OSError as exc:
        raise IOFailure(str(exc)) from exc
