from provider.config import BlockConfig, ConfigError, load_config, parse_config
from provider.diagnostics import Diagnostic, Diagnostics
from provider.engine import Engine, Plan, PlannedChange
from provider.keystore_data_source import KeystoreDataSource
from provider.keystore_resource import KeystoreResource
from provider.provider import KeystoreProvider
from provider.state import StateFile
from provider.types import ProviderData, Response

__all__ = [
    "KeystoreProvider",
    "KeystoreResource",
    "KeystoreDataSource",
    "Engine",
    "Plan",
    "PlannedChange",
    "StateFile",
    "BlockConfig",
    "ConfigError",
    "load_config",
    "parse_config",
    "Diagnostic",
    "Diagnostics",
    "ProviderData",
    "Response",
]
