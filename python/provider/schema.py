"""Declarative attribute schema for resources and data sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from provider.diagnostics import Diagnostics


@dataclass(frozen=True)
class Attribute:
    name: str
    description: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    # Changing a configured value forces delete + create instead of update.
    requires_replace_if_configured: bool = False

    @property
    def configurable(self) -> bool:
        return self.required or self.optional


@dataclass(frozen=True)
class Schema:
    description: str
    attributes: tuple[Attribute, ...] = field(default_factory=tuple)

    def attribute(self, name: str) -> Optional[Attribute]:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def names(self) -> list[str]:
        return [a.name for a in self.attributes]

    def configurable(self) -> list[Attribute]:
        return [a for a in self.attributes if a.configurable]

    def sensitive_names(self) -> set[str]:
        return {a.name for a in self.attributes if a.sensitive}

    def validate_config(self, config: Mapping[str, Any]) -> Diagnostics:
        """Check a configuration block against the schema (string attributes only)."""
        diags = Diagnostics()
        for name, value in config.items():
            attr = self.attribute(name)
            if attr is None:
                diags.add_error("Unsupported argument", f'An argument named "{name}" is not expected here.', name)
                continue
            if not attr.configurable:
                diags.add_error(
                    "Invalid configuration",
                    f'"{name}" is computed by the provider and cannot be set.',
                    name,
                )
                continue
            if value is not None and not isinstance(value, str):
                diags.add_error("Incorrect attribute value type", f'"{name}" must be a string.', name)
        for attr in self.attributes:
            if attr.required and config.get(attr.name) is None:
                diags.add_error(
                    "Missing required argument",
                    f'The argument "{attr.name}" is required, but no definition was found.',
                    attr.name,
                )
        return diags

    def normalize(self, config: Mapping[str, Any]) -> dict[str, Any]:
        """Config values for every configurable attribute; unset ones become None."""
        return {a.name: config.get(a.name) for a in self.configurable()}
