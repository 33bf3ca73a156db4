"""Line-ending classification and normalisation."""

from __future__ import annotations

from enum import Enum


class LineEnding(str, Enum):
    NONE = "none"
    LF = "LF"
    CR = "CR"
    CRLF = "CRLF"
    MIXED = "mixed"


def detect_line_endings(data: bytes) -> LineEnding:
    """Classify the line terminators used in *data*.

    Zero terminators is ``NONE``; more than one distinct kind is ``MIXED``.
    """
    crlf = data.count(b"\r\n")
    has_crlf = crlf > 0
    has_cr = data.count(b"\r") > crlf
    has_lf = data.count(b"\n") > crlf

    kinds = [kind for kind, present in (
        (LineEnding.CRLF, has_crlf),
        (LineEnding.CR, has_cr),
        (LineEnding.LF, has_lf),
    ) if present]
    if len(kinds) > 1:
        return LineEnding.MIXED
    if kinds:
        return kinds[0]
    return LineEnding.NONE


def normalize_to_lf(data: bytes) -> bytes:
    """Rewrite CRLF, then lone CR, to LF."""
    return data.replace(b"\r\n", b"\n").replace(b"\r", b"\n")
