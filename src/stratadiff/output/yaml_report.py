"""YAML reporter: the JSON mapping, dumped for human review."""

from __future__ import annotations

import yaml

from stratadiff.output.json_report import to_dict
from stratadiff.tree.models import DiffNode


class _BlockDumper(yaml.SafeDumper):
    """Safe dumper that writes multi-line strings (hunks) as literal blocks."""


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_BlockDumper.add_representer(str, _str_representer)


def render(node: DiffNode) -> str:
    """Return the tree as a YAML document."""
    return yaml.dump(
        to_dict(node),
        Dumper=_BlockDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
