"""Listing diff and per-entry recursion shared by the tar, zip and JAR differs.

Each archive differ indexes its inputs into :class:`ArchiveEntry` lists and
hands them to :func:`compare_entries`, which owns the ordering rules:

* if both archives hold the same entries in a different order, the node
  gets a single order comment and nothing else;
* otherwise a ``file list`` child carries the listing diff (sorted when the
  relative order is inconsistent), followed by one child per differing
  entry in lexicographic order.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from stratadiff.engine.context import CompareContext
from stratadiff.engine.errors import DiffError
from stratadiff.engine.order import check_order_consistency
from stratadiff.engine.source import File
from stratadiff.textdiff.unified import unified_hunks
from stratadiff.tree.models import COMMENT_ONLY_IN_FIRST, COMMENT_ONLY_IN_SECOND, DiffNode

_log = logging.getLogger(__name__)

COMMENT_ORDER_DIFFERS = "Entry order differs (listings shown in sorted order)"
COMMENT_UNMATCHED_DUPLICATE = "Unmatched duplicate entry"
FILE_LIST = "file list"


@dataclass
class ArchiveEntry:
    """One indexed archive member.

    ``load`` materialises the member's content; it raises a
    :class:`DiffError` that already names the member and archive.
    """

    name: str
    listing: str
    load: Callable[[], bytes]
    typeflag: Optional[str] = None
    regular: bool = True


# (ctx, node, entry1, entry2, display name) -> match
EntryComparer = Callable[[CompareContext, DiffNode, ArchiveEntry, ArchiveEntry, str], bool]


def recurse_entry(
    ctx: CompareContext, node: DiffNode, entry1: ArchiveEntry, entry2: ArchiveEntry, name: str
) -> bool:
    """Default entry comparison: materialise both members and dispatch one level deeper."""
    from stratadiff.engine.dispatcher import compare_files

    try:
        file1 = File(name=name, reader=io.BytesIO(entry1.load()))
        file2 = File(name=name, reader=io.BytesIO(entry2.load()))
        return compare_files(ctx.child(), node, file1, file2)
    except DiffError as exc:
        raise exc.wrap(f"comparing {name}") from exc


def _group_by_name(entries: Sequence[ArchiveEntry]) -> Dict[str, List[ArchiveEntry]]:
    grouped: Dict[str, List[ArchiveEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.name, []).append(entry)
    return grouped


def _only_in(name: str, first: bool, duplicated: bool) -> DiffNode:
    comments = [COMMENT_ONLY_IN_FIRST if first else COMMENT_ONLY_IN_SECOND]
    if duplicated:
        comments.append(COMMENT_UNMATCHED_DUPLICATE)
    return DiffNode(source1=name, source2=name, comments=comments)


def compare_entries(
    ctx: CompareContext,
    node: DiffNode,
    entries1: Sequence[ArchiveEntry],
    entries2: Sequence[ArchiveEntry],
    compare_entry: EntryComparer = recurse_entry,
) -> bool:
    """Compare two indexed archives, populating *node*. Returns True on a full match."""
    names1 = [e.name for e in entries1]
    names2 = [e.name for e in entries2]

    # --- Ordering ---
    if not check_order_consistency(names1, names2):
        if sorted(names1) == sorted(names2):
            _log.debug("%s: same %d entries in a different order", node.source1, len(names1))
            node.comments.append(COMMENT_ORDER_DIFFERS)
            return False
        entries1 = sorted(entries1, key=lambda e: e.name)
        entries2 = sorted(entries2, key=lambda e: e.name)

    # --- Listing ---
    match = True
    listing1 = "".join(e.listing for e in entries1)
    listing2 = "".join(e.listing for e in entries2)
    if listing1 != listing2:
        match = False
        hunks = unified_hunks(listing1, listing2)
        if hunks:
            node.details.append(DiffNode(source1=FILE_LIST, source2=FILE_LIST, unified_diff=hunks))

    # --- Entries ---
    grouped1 = _group_by_name(entries1)
    grouped2 = _group_by_name(entries2)
    for name in sorted(set(grouped1) | set(grouped2)):
        ctx.check()
        list1 = grouped1.get(name, [])
        list2 = grouped2.get(name, [])
        count = max(len(list1), len(list2))
        for i in range(count):
            source = name if count == 1 else f"{name} [occurrence {i + 1}]"
            has1, has2 = i < len(list1), i < len(list2)
            if has1 != has2:
                match = False
                duplicated = len(list1) > 1 if has1 else len(list2) > 1
                node.details.append(_only_in(source, has1, duplicated))
                continue

            entry1, entry2 = list1[i], list2[i]
            if entry1.typeflag != entry2.typeflag:
                match = False
                node.details.append(DiffNode(
                    source1=source,
                    source2=source,
                    comments=[f"Entry types differ: {entry1.typeflag} vs {entry2.typeflag}"],
                ))
                continue
            if not entry1.regular:
                continue

            entry_node = DiffNode(source1=source, source2=source)
            if not compare_entry(ctx, entry_node, entry1, entry2, source):
                match = False
                node.details.append(entry_node)
    return match
