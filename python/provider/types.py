"""Common types for provider lifecycle calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict

from keystore.base import KeytoolBase
from provider.diagnostics import Diagnostics

StateData = dict[str, Any]


class KeystoreResourceState(TypedDict):
    """Persisted attributes of a jks_keystore resource."""
    id: str
    password: str
    file: str
    common_name: Optional[str]
    organization: Optional[str]
    organizational_unit: Optional[str]
    locality: Optional[str]
    state: Optional[str]
    country: Optional[str]


@dataclass
class Response:
    """Result of a lifecycle call: new state on success, error diagnostics otherwise."""
    state: Optional[StateData] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


@dataclass(frozen=True)
class ProviderData:
    """Values the provider hands to every resource and data source it configures."""
    keytool: Optional[KeytoolBase] = None
    tmp_dir: Optional[str] = None
