"""INI data model: ordered sections of ordered raw string values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

DEFAULT_SECTION = ""  # keys that appear before any [section] header


@dataclass
class IniFile:
    """Parsed INI content.

    Values are raw strings: no interpolation, no type coercion. Multi-line
    values keep their continuation lines joined by ``"\\n"``.
    """

    sections_map: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def ensure_section(self, name: str) -> Dict[str, str]:
        return self.sections_map.setdefault(name, {})

    def set(self, section: str, key: str, value: str) -> None:
        self.ensure_section(section)[key] = value

    def get(self, section: str, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.sections_map.get(section, {}).get(key, default)

    def has_section(self, name: str) -> bool:
        return name in self.sections_map

    def sections(self) -> List[str]:
        """Section names in declaration order, the default section excluded."""
        return [name for name in self.sections_map if name != DEFAULT_SECTION]

    def items(self, section: str) -> List[Tuple[str, str]]:
        return list(self.sections_map.get(section, {}).items())

    def __iter__(self) -> Iterator[str]:
        return iter(self.sections_map)

    def __contains__(self, name: object) -> bool:
        return name in self.sections_map

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        """Plain ``{section: {key: value}}`` copy; an empty default section is dropped."""
        return {
            name: dict(values)
            for name, values in self.sections_map.items()
            if values or name != DEFAULT_SECTION
        }

    def dumps(self) -> str:
        """Re-emit as INI text that parses back to the same mapping.

        Continuation lines are indented with a tab; blank lines inside a
        value are written as empty lines.
        """
        out: List[str] = []
        for name, values in self.to_dict().items():
            if name != DEFAULT_SECTION:
                if out:
                    out.append("")
                out.append(f"[{name}]")
            for key, value in values.items():
                first, *rest = value.split("\n")
                out.append(f"{key} = {first}".rstrip())
                out.extend(f"\t{line}" if line else "" for line in rest)
        return "\n".join(out) + "\n" if out else ""
