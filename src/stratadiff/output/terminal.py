"""Rich terminal reporter: the ASCII tree with diff colouring."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.text import Text

from stratadiff.output.text import COMMENT, ENTRY, HEADER, HUNK, iter_lines
from stratadiff.tree.models import DiffNode, NodeStatus

_GLYPH_STYLE = "dim"
_KIND_STYLE = {
    HEADER: "bold",
    COMMENT: "yellow",
    ENTRY: "bold cyan",
}
_STATUS_STYLE = {
    NodeStatus.ONLY_FIRST: "bold red",
    NodeStatus.ONLY_SECOND: "bold green",
}


def _hunk_style(line: str) -> str:
    if line.startswith("@@"):
        return "magenta"
    if line.startswith("-"):
        return "red"
    if line.startswith("+"):
        return "green"
    return ""


def _entry_styles(node: DiffNode) -> dict:
    """Map entry names to a style reflecting one-sided presence."""
    styles = {}
    stack = list(node.details)
    while stack:
        child = stack.pop()
        style = _STATUS_STYLE.get(child.status)
        if style:
            styles[child.source1] = style
        stack.extend(child.details)
    return styles


def render(node: DiffNode, console: Optional[Console] = None) -> None:
    """Print the diff tree to the terminal using Rich."""
    console = console or Console()
    entry_styles = _entry_styles(node)

    for prefix, body, kind in iter_lines(node):
        # The root diff is one body ending in a newline; splitting it keeps
        # the blank separator line of the plain rendering.
        lines = body.split("\n") if kind == HUNK else [body]
        for line in lines:
            text = Text(prefix, style=_GLYPH_STYLE)
            if kind == HUNK:
                text.append(line, style=_hunk_style(line))
            elif kind == ENTRY:
                text.append(line, style=entry_styles.get(line, _KIND_STYLE[ENTRY]))
            else:
                text.append(line, style=_KIND_STYLE[kind])
            console.print(text, soft_wrap=True, highlight=False)
