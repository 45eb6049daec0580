"""Abstract resource and data source bases.

A resource or data source is constructed empty, then `configure()` hands it
the provider's shared data (keytool runner, scratch root). Lifecycle methods
never raise for operational failures; they report them as diagnostics.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from common.logger import get_logger
from provider.schema import Schema
from provider.types import ProviderData, Response, StateData


class BaseResource(ABC):
    """Abstract managed resource."""

    type_suffix: str = ""

    def __init__(self) -> None:
        self.provider_data: ProviderData = ProviderData()

    def configure(self, provider_data: Optional[ProviderData]) -> "BaseResource":
        # Unconfigured provider: keep defaults.
        if provider_data is None:
            return self
        get_logger(__name__).debug("resource configure: type=%s", self.type_suffix)
        self.provider_data = provider_data
        return self

    def type_name(self, provider_type_name: str) -> str:
        return f"{provider_type_name}_{self.type_suffix}"

    @abstractmethod
    def schema(self) -> Schema:
        ...

    @abstractmethod
    def create(self, plan: Mapping[str, Any]) -> Response:
        """Create from planned configuration; returns the new state."""
        ...

    @abstractmethod
    def read(self, state: StateData) -> Response:
        """Refresh prior state."""
        ...

    @abstractmethod
    def update(self, plan: Mapping[str, Any], state: StateData) -> Response:
        """Apply planned configuration on top of prior state."""
        ...

    @abstractmethod
    def delete(self, state: StateData) -> Response:
        """Destroy the resource; a successful response carries no state."""
        ...

    def requires_replace(self, plan: Mapping[str, Any], state: StateData) -> list[str]:
        """Attributes whose configured value changed and cannot be updated in place."""
        paths = []
        for attr in self.schema().attributes:
            if not attr.requires_replace_if_configured:
                continue
            value = plan.get(attr.name)
            if value is not None and value != state.get(attr.name):
                paths.append(attr.name)
        return paths

    def has_changes(self, plan: Mapping[str, Any], state: StateData) -> bool:
        return any(plan.get(a.name) != state.get(a.name) for a in self.schema().configurable())


class BaseDataSource(ABC):
    """Abstract read-only data source."""

    type_suffix: str = ""

    def __init__(self) -> None:
        self.provider_data: ProviderData = ProviderData()

    def configure(self, provider_data: Optional[ProviderData]) -> "BaseDataSource":
        if provider_data is None:
            return self
        self.provider_data = provider_data
        return self

    def type_name(self, provider_type_name: str) -> str:
        return f"{provider_type_name}_{self.type_suffix}"

    @abstractmethod
    def schema(self) -> Schema:
        ...

    @abstractmethod
    def read(self, config: Mapping[str, Any]) -> Response:
        ...
