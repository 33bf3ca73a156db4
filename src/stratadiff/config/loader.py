"""Load configuration from .stratadiff.toml and STRATADIFF_* env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from stratadiff.config.defaults import CONFIG_FILENAME
from stratadiff.config.schema import OUTPUT_FORMATS, DiffConfig, OutputConfig, StrataDiffConfig

_log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    section_data = data.get(section, {})
    if not isinstance(section_data, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in section_data.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: StrataDiffConfig) -> None:
    depth = cfg.diff.max_depth
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise ConfigError(f"diff.max_depth must be a non-negative integer, got {depth!r}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got {cfg.output.format!r}"
        )
    if not isinstance(cfg.output.color, bool):
        raise ConfigError(f"output.color must be true or false, got {cfg.output.color!r}")


def _merge_env_overrides(cfg: StrataDiffConfig) -> None:
    """Apply STRATADIFF_* environment variable overrides. Invalid values are ignored."""
    if val := os.environ.get("STRATADIFF_MAX_DEPTH"):
        try:
            depth = int(val)
        except ValueError:
            _log.debug("ignoring STRATADIFF_MAX_DEPTH=%r", val)
        else:
            if depth >= 0:
                cfg.diff.max_depth = depth
    if val := os.environ.get("STRATADIFF_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
        else:
            _log.debug("ignoring STRATADIFF_FORMAT=%r", val)


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> StrataDiffConfig:
    """Load, validate, and return a StrataDiffConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = StrataDiffConfig()
    else:
        _log.debug("loading config from %s", config_path)
        raw = _parse_toml(config_path)
        cfg = StrataDiffConfig(
            version=str(raw.get("version", "1.0")),
            diff=_build_section(raw, DiffConfig, "diff"),
            output=_build_section(raw, OutputConfig, "output"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
