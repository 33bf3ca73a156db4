"""Canonical JSON reporter (approximately diffoscope-compatible)."""

from __future__ import annotations

import json
from typing import Any, Dict

from stratadiff.tree.models import DiffNode


def to_dict(node: DiffNode) -> Dict[str, Any]:
    """Convert the tree to a JSON-serialisable dict, omitting empty fields."""
    return node.to_dict()


def render(node: DiffNode) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(node), indent=2, ensure_ascii=False) + "\n"


def parse(text: str) -> DiffNode:
    """Rebuild a tree from :func:`render` output."""
    return DiffNode.from_dict(json.loads(text))
