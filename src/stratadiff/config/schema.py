"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Tuple

OutputFormat = Literal["text", "json", "yaml"]

OUTPUT_FORMATS: Tuple[str, ...] = ("text", "json", "yaml")


@dataclass
class DiffConfig:
    max_depth: int = 0  # 0 = recurse into every nested archive


@dataclass
class OutputConfig:
    format: OutputFormat = "text"
    color: bool = True  # colourise text output on a terminal


@dataclass
class StrataDiffConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
