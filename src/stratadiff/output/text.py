"""Canonical ASCII rendering of a diff tree.

Layout::

    --- archive.tar.gz
    +++ archive.tar.gz
    │   --- archive.tar
    ├─┐ +++ archive.tar
    │ ├── config.txt
    │ │ @@ -1 +1 @@
    │ │ -debug=on
    │ │ +debug=off
"""

from __future__ import annotations

from typing import Iterator, List, Tuple

from stratadiff.tree.models import DiffNode

DETAIL_GLYPH = "│ "
BRANCH_GLYPH = "├── "
BRANCH_CORNER_GLYPH = "├─┐ "
COMMENT_GLYPH = "│┄ "

# Line kinds, used by the terminal reporter for styling.
HEADER = "header"
COMMENT = "comment"
ENTRY = "entry"
HUNK = "hunk"

Line = Tuple[str, str, str]  # (prefix, body, kind)


def iter_lines(node: DiffNode) -> Iterator[Line]:
    """Yield every output line of *node*'s tree as ``(prefix, body, kind)``.

    The root unified diff is yielded as a single multi-line body, as it is
    written verbatim.
    """
    yield "", "--- " + node.source1, HEADER
    yield "", "+++ " + node.source2, HEADER
    for comment in node.comments:
        yield COMMENT_GLYPH, comment, COMMENT
    if node.unified_diff is not None:
        yield "", node.unified_diff, HUNK
    yield from _iter_details(node.details, "", 0)


def _iter_details(nodes: List[DiffNode], prefix: str, depth: int) -> Iterator[Line]:
    for child in nodes:
        if child.details and depth == 0 and child.unified_diff is None:
            # Container header
            yield prefix + DETAIL_GLYPH, "  --- " + child.source1, HEADER
            yield prefix + BRANCH_CORNER_GLYPH, "+++ " + child.source2, HEADER
            yield from _iter_details(child.details, prefix + DETAIL_GLYPH, depth + 1)
            continue

        yield prefix + BRANCH_GLYPH, child.source1, ENTRY
        for comment in child.comments:
            yield prefix + COMMENT_GLYPH, comment, COMMENT
        if child.details:
            yield from _iter_details(child.details, prefix + DETAIL_GLYPH, depth + 1)
        elif child.unified_diff is not None:
            content = child.unified_diff
            if content.endswith("\n"):
                content = content[:-1]
            for line in content.split("\n"):
                yield prefix + DETAIL_GLYPH, line, HUNK


def render(node: DiffNode) -> str:
    """Return the ASCII tree for *node*, one newline-terminated line per entry."""
    return "".join(prefix + body + "\n" for prefix, body, _ in iter_lines(node))
