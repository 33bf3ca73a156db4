"""Header-less unified diff synthesis.

Produces only the ``@@`` hunks of a unified diff: no ``---``/``+++`` file
header, no mode lines and no ``\\ No newline at end of file`` marker. Output
depends on the inputs alone, so repeated runs are byte-identical.
"""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import List

DEFAULT_CONTEXT_LINES = 3


def _split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, keeping terminators (``str.splitlines`` also splits on \\r, \\f, ...)."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _format_range(start: int, stop: int) -> str:
    """Hunk range in git's convention: ``N`` for one line, ``N-1,0`` for none."""
    beginning = start + 1
    length = stop - start
    if length == 1:
        return str(beginning)
    if not length:
        beginning -= 1
    return f"{beginning},{length}"


def _terminated(line: str) -> str:
    return line if line.endswith("\n") else line + "\n"


def unified_hunks(left: str, right: str, context: int = DEFAULT_CONTEXT_LINES) -> str:
    """Return the unified diff hunks between *left* and *right*.

    Returns ``""`` when the inputs are equal or no hunk can be produced.
    A final line lacking a newline is emitted as if it had one.
    """
    if left == right:
        return ""
    a = _split_lines(left)
    b = _split_lines(right)
    matcher = SequenceMatcher(None, a, b, autojunk=False)

    out: List[str] = []
    for group in matcher.get_grouped_opcodes(context):
        first, last = group[0], group[-1]
        out.append(
            f"@@ -{_format_range(first[1], last[2])} +{_format_range(first[3], last[4])} @@\n"
        )
        for tag, i1, i2, j1, j2 in group:
            if tag == "equal":
                out.extend(" " + _terminated(line) for line in a[i1:i2])
                continue
            if tag in ("replace", "delete"):
                out.extend("-" + _terminated(line) for line in a[i1:i2])
            if tag in ("replace", "insert"):
                out.extend("+" + _terminated(line) for line in b[j1:j2])
    return "".join(out)
