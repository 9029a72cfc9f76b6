"""YAML dump helpers for fixture files.

Fixture documents are JSON-shaped; raw ``bytes`` that slip through are
written as hex strings, matching the JSON fixtures.
"""

from __future__ import annotations

from pathlib import Path

import yaml


class PlainDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=None)


def _bytes_representer(dumper: yaml.SafeDumper, data: bytes) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data.hex(), style=None)


PlainDumper.add_representer(str, _str_representer)
PlainDumper.add_representer(bytes, _bytes_representer)


def dump_yaml(data: dict) -> str:
    return yaml.dump(data, Dumper=PlainDumper, sort_keys=False, width=4096)


def load_yaml(text: str) -> dict:
    return yaml.safe_load(text)


def write_yaml(path: Path, data: dict) -> None:
    path.write_text(dump_yaml(data))
