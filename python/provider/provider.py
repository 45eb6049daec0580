"""Provider: type name, version and the resource/data source registries."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import Callable, Optional

from keystore.base import KeytoolBase
from provider.base_resource import BaseDataSource, BaseResource
from provider.config import ConfigError
from provider.keystore_data_source import KeystoreDataSource
from provider.keystore_resource import KeystoreResource
from provider.types import ProviderData

PROVIDER_TYPE_NAME = "jks"


def _package_version() -> str:
    try:
        return version("jks-keystore-provider")
    except PackageNotFoundError:
        return "dev"


class KeystoreProvider:
    """JKS provider."""

    def __init__(
        self,
        version: Optional[str] = None,
        keytool: Optional[KeytoolBase] = None,
        tmp_dir: Optional[str] = None,
    ):
        # "dev" when run from a checkout, the release version when installed.
        self.version = version or _package_version()
        self.provider_data = ProviderData(keytool=keytool, tmp_dir=tmp_dir)

    def metadata(self) -> tuple[str, str]:
        return PROVIDER_TYPE_NAME, self.version

    def resources(self) -> list[Callable[[], BaseResource]]:
        return [KeystoreResource]

    def data_sources(self) -> list[Callable[[], BaseDataSource]]:
        return [KeystoreDataSource]

    def resource_types(self) -> list[str]:
        return [factory().type_name(PROVIDER_TYPE_NAME) for factory in self.resources()]

    def data_source_types(self) -> list[str]:
        return [factory().type_name(PROVIDER_TYPE_NAME) for factory in self.data_sources()]

    def resource(self, type_name: str) -> BaseResource:
        """Instantiate and configure the resource registered under type_name."""
        for factory in self.resources():
            res = factory()
            if res.type_name(PROVIDER_TYPE_NAME) == type_name:
                return res.configure(self.provider_data)
        raise ConfigError(f'The provider does not support resource type "{type_name}".')

    def data_source(self, type_name: str) -> BaseDataSource:
        for factory in self.data_sources():
            ds = factory()
            if ds.type_name(PROVIDER_TYPE_NAME) == type_name:
                return ds.configure(self.provider_data)
        raise ConfigError(f'The provider does not support data source "{type_name}".')
