"""Diff tree data model: approximately diffoscope-compatible."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

COMMENT_ONLY_IN_FIRST = "Entry only in first archive"
COMMENT_ONLY_IN_SECOND = "Entry only in second archive"


class NodeStatus(str, Enum):
    BOTH = "both"
    ONLY_FIRST = "only_first"
    ONLY_SECOND = "only_second"


@dataclass
class DiffNode:
    """One node of the diff tree.

    A node describes a pair of sources and how they differ. Equality is
    never represented by a node: the engine reports it out-of-band, so a
    node in a finished tree always carries a diff, comments, or details.
    """

    source1: str
    source2: str
    unified_diff: Optional[str] = None
    comments: List[str] = field(default_factory=list)
    details: List["DiffNode"] = field(default_factory=list)

    @property
    def status(self) -> NodeStatus:
        """Presence signal carried by the reserved only-in comments."""
        for comment in self.comments:
            if comment == COMMENT_ONLY_IN_FIRST:
                return NodeStatus.ONLY_FIRST
            if comment == COMMENT_ONLY_IN_SECOND:
                return NodeStatus.ONLY_SECOND
        return NodeStatus.BOTH

    @property
    def has_content(self) -> bool:
        return self.unified_diff is not None or bool(self.comments) or bool(self.details)

    def adopt(self, other: "DiffNode") -> None:
        """Replace this node's content with *other*'s (sources are kept)."""
        self.unified_diff = other.unified_diff
        self.comments = list(other.comments)
        self.details = list(other.details)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON schema, omitting empty optional fields."""
        data: Dict[str, Any] = {"source1": self.source1, "source2": self.source2}
        if self.unified_diff is not None:
            data["unified_diff"] = self.unified_diff
        if self.comments:
            data["comments"] = list(self.comments)
        if self.details:
            data["details"] = [d.to_dict() for d in self.details]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiffNode":
        return cls(
            source1=data["source1"],
            source2=data["source2"],
            unified_diff=data.get("unified_diff"),
            comments=list(data.get("comments", [])),
            details=[cls.from_dict(d) for d in data.get("details", [])],
        )

    def __str__(self) -> str:
        from stratadiff.output.text import render

        return render(self)
