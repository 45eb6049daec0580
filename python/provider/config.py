"""Configuration documents in Terraform JSON syntax.

    {
      "resource": {"jks_keystore": {"app": {"password": "...", "common_name": "app"}}},
      "data":     {"jks_keystore": {"app": {"file": "...", "password": "..."}}}
    }
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

MANAGED = "managed"
DATA = "data"

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


class ConfigError(Exception):
    """Configuration document is missing, malformed or names unsupported types."""


@dataclass(frozen=True)
class BlockConfig:
    mode: str
    type_name: str
    name: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def address(self) -> str:
        base = f"{self.type_name}.{self.name}"
        return f"data.{base}" if self.mode == DATA else base


def _parse_blocks(mode: str, section: Any) -> list[BlockConfig]:
    if not isinstance(section, dict):
        raise ConfigError(f'"{mode}" section must be an object of resource types')
    blocks = []
    for type_name, instances in section.items():
        if not isinstance(instances, dict):
            raise ConfigError(f'"{type_name}" must be an object of named blocks')
        for name, attrs in instances.items():
            if not _NAME_RE.match(name):
                raise ConfigError(f'invalid block name "{name}" for "{type_name}"')
            if not isinstance(attrs, dict):
                raise ConfigError(f'block "{type_name}.{name}" must be an object')
            blocks.append(BlockConfig(mode, type_name, name, dict(attrs)))
    return blocks


def parse_config(doc: Any) -> list[BlockConfig]:
    if not isinstance(doc, dict):
        raise ConfigError("configuration root must be an object")
    unknown = set(doc) - {"resource", "data", "terraform", "provider"}
    if unknown:
        raise ConfigError(f"unsupported top-level keys: {', '.join(sorted(unknown))}")
    blocks = _parse_blocks(MANAGED, doc.get("resource", {}))
    blocks += _parse_blocks(DATA, doc.get("data", {}))
    return blocks


def load_config(path: str) -> list[BlockConfig]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            doc = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"configuration file {path} is not valid JSON: {e}") from e
    return parse_config(doc)
