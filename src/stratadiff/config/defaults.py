"""Starter .stratadiff.toml template."""

CONFIG_FILENAME = ".stratadiff.toml"

DEFAULT_TOML = """\
# stratadiff configuration
version = "1.0"

[diff]
max_depth = 0             # 0 = unlimited; N stops expanding archives N levels down

[output]
format = "text"           # text | json | yaml
color = true              # colourise text output on a terminal
"""
