"""Per-invocation comparison state: depth limit, current depth, cancellation."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Optional

from stratadiff.engine.errors import Cancelled


@dataclass(frozen=True)
class CompareContext:
    """Immutable compare context threaded through every differ.

    ``max_depth`` of 0 disables the archive depth gate. ``child()`` is the
    only way depth advances, so sibling comparisons never observe each
    other's recursion.
    """

    max_depth: int = 0
    depth: int = 0
    cancel: Optional[threading.Event] = None

    def child(self) -> "CompareContext":
        return replace(self, depth=self.depth + 1)

    @property
    def at_depth_limit(self) -> bool:
        return self.max_depth > 0 and self.depth >= self.max_depth

    def check(self) -> None:
        """Raise :class:`Cancelled` if the caller has set the cancel event."""
        if self.cancel is not None and self.cancel.is_set():
            raise Cancelled("comparison cancelled")
