"""setup.cfg-compatible INI parsing."""

from stratadiff.ini.models import DEFAULT_SECTION, IniFile
from stratadiff.ini.parser import (
    EmptyKeyError,
    EmptySectionNameError,
    IniError,
    NoSeparatorError,
    UnclosedSectionError,
    load,
    parse,
    parse_string,
)

__all__ = [
    "DEFAULT_SECTION",
    "EmptyKeyError",
    "EmptySectionNameError",
    "IniError",
    "IniFile",
    "NoSeparatorError",
    "UnclosedSectionError",
    "load",
    "parse",
    "parse_string",
]
