"""Engine: type detection, per-format differs, recursive dispatch."""

from stratadiff.engine.context import CompareContext
from stratadiff.engine.dispatcher import DiffOptions, compare_files, diff
from stratadiff.engine.errors import (
    ArchiveFormatError,
    Cancelled,
    DecompressError,
    DiffError,
    IOFailure,
    NoDiff,
    UnknownTypeError,
)
from stratadiff.engine.filetype import FileType, detect_file_type
from stratadiff.engine.source import File

__all__ = [
    "ArchiveFormatError",
    "Cancelled",
    "CompareContext",
    "DecompressError",
    "DiffError",
    "DiffOptions",
    "File",
    "FileType",
    "IOFailure",
    "NoDiff",
    "UnknownTypeError",
    "compare_files",
    "detect_file_type",
    "diff",
]
