"""Reporters: canonical ASCII tree, JSON, YAML and rich terminal output."""
