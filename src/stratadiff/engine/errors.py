"""Error kinds raised by the diff engine.

Every failure that aborts a comparison is a :class:`DiffError`. Layers add
context by re-raising ``err.wrap("comparing x") from err`` so that users see
a short chain like ``comparing files: comparing a.txt: reading tar1: ...``
instead of a stack.
"""

from __future__ import annotations


class NoDiff(Exception):
    """Sentinel raised by :func:`stratadiff.diff` when both inputs are byte-equal.

    Deliberately not a :class:`DiffError` so ``except DiffError`` never
    swallows the "nothing to report" outcome.
    """

    def __init__(self, message: str = "no diff found") -> None:
        super().__init__(message)


class DiffError(Exception):
    """Base class for fatal comparison errors."""

    def wrap(self, context: str) -> "DiffError":
        """Return an error of the same kind prefixed with *context*."""
        return type(self)(f"{context}: {self}")


class IOFailure(DiffError):
    """Reading or seeking an input failed."""


class DecompressError(DiffError):
    """A gzip stream could not be opened or inflated."""


class ArchiveFormatError(DiffError):
    """A tar or zip archive is malformed."""


class UnknownTypeError(DiffError):
    """The type detector returned a variant the dispatcher cannot handle."""


class Cancelled(DiffError):
    """The caller cancelled the comparison."""
