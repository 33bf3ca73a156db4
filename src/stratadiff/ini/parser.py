"""Line-oriented parser for setup.cfg-style INI files.

Behaves like Python's ``configparser`` configured with
``inline_comment_prefixes=('#', ';')``, ``interpolation=None``,
``allow_unnamed_section=True``, ``strict=False`` and ``optionxform=str``:

* ``[name]`` opens (or re-opens) a section; keys before the first header
  land in the default section ``""``.
* ``key = value`` or ``key: value``; the first ``=`` or ``:`` splits.
* ``#`` and ``;`` start full-line comments, and inline comments when
  preceded by whitespace.
* Lines indented deeper than their key continue its value. Comments inside
  a value are skipped; blank lines are kept only if more continuation
  follows.
* A ``[`` line without a closing bracket but with a separator is a plain
  key/value pair whose key starts with ``[``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, TextIO, Union

from stratadiff.ini.models import DEFAULT_SECTION, IniFile

_log = logging.getLogger(__name__)

_COMMENT_PREFIXES = ("#", ";")
_SEPARATORS = "=:"


# --- Errors ---


class IniError(Exception):
    """Raised when INI input is malformed."""

    reason = "malformed input"

    def __init__(self, lineno: int) -> None:
        self.lineno = lineno
        super().__init__(f"line {lineno}: {self.reason}")


class UnclosedSectionError(IniError):
    reason = "unclosed section header"


class EmptySectionNameError(IniError):
    reason = "empty section name"


class NoSeparatorError(IniError):
    reason = "no key-value separator found"


class EmptyKeyError(IniError):
    reason = "empty key name"


# --- Helpers ---


def find_inline_comment(text: str) -> int:
    """Index of the first ``#``/``;`` preceded by whitespace, or -1."""
    for i in range(1, len(text)):
        if text[i] in _COMMENT_PREFIXES and text[i - 1].isspace():
            return i
    return -1


def _find_separator(text: str) -> int:
    positions = [text.find(sep) for sep in _SEPARATORS if sep in text]
    return min(positions) if positions else -1


class _Parser:
    def __init__(self) -> None:
        self.result = IniFile()
        self.section: Optional[str] = None
        self.key: Optional[str] = None
        self.value: List[str] = []
        self.key_indent = 0
        self.in_multiline = False
        self.blank_lines = 0

    def flush(self) -> None:
        if self.key is None:
            return
        if self.section is None:
            self.section = DEFAULT_SECTION
        self.result.set(self.section, self.key, "\n".join(self.value))
        self.key = None
        self.value = []

    def feed(self, raw: str, lineno: int) -> None:
        trimmed = raw.lstrip()
        indent = len(raw) - len(trimmed)
        is_comment = trimmed.startswith(_COMMENT_PREFIXES)

        # --- Continuation ---
        if self.in_multiline:
            if is_comment:
                return
            if not trimmed:
                self.blank_lines += 1
                return
            if indent > self.key_indent:
                self.value.extend([""] * self.blank_lines)
                self.blank_lines = 0
                idx = find_inline_comment(trimmed)
                if idx != -1:
                    trimmed = trimmed[:idx]
                self.value.append(trimmed.strip())
                return
            self.flush()
            self.in_multiline = False
            self.blank_lines = 0

        if not trimmed or is_comment:
            return

        line = trimmed
        idx = find_inline_comment(line)
        if idx != -1:
            line = line[:idx].strip()
            if not line:
                return

        # --- Section header ---
        if line.startswith("["):
            end = line.rfind("]")
            if end > 1:
                self.section = line[1:end]
                self.result.ensure_section(self.section)
                return
            if not any(sep in line for sep in _SEPARATORS):
                if end == -1:
                    raise UnclosedSectionError(lineno)
                raise EmptySectionNameError(lineno)
            # configparser quirk: falls through to key/value

        # --- Key/value ---
        sep = _find_separator(line)
        if sep == -1:
            raise NoSeparatorError(lineno)
        key = line[:sep].strip()
        if not key:
            raise EmptyKeyError(lineno)
        self.flush()
        self.key = key
        self.key_indent = indent
        self.in_multiline = True
        self.value = [line[sep + 1 :].strip()]


def parse_string(text: str) -> IniFile:
    """Parse INI *text*. Raises an :class:`IniError` subclass on malformed input."""
    parser = _Parser()
    for lineno, raw in enumerate(text.split("\n"), start=1):
        parser.feed(raw.rstrip("\r"), lineno)
    parser.flush()
    _log.debug("parsed %d section(s)", len(parser.result.sections_map))
    return parser.result


def parse(stream: TextIO) -> IniFile:
    """Parse an open text stream."""
    return parse_string(stream.read())


def load(path: Union[str, Path]) -> IniFile:
    """Read and parse the INI file at *path*."""
    return parse_string(Path(path).read_text(encoding="utf-8"))
