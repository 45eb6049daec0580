"""jks_keystore data source: describe the key entry of an existing keystore."""

from __future__ import annotations

from typing import Any, Mapping

from keystore.errors import KeystoreError
from keystore.pkcs12 import KeystoreInfo, inspect_keystore
from provider.base_resource import BaseDataSource
from provider.schema import Attribute, Schema
from provider.types import Response

KEYSTORE_DATA_SCHEMA = Schema(
    description="Reads a base64 encoded PKCS12 keystore and exposes its certificate details.",
    attributes=(
        Attribute("file", "Base64 encoded keystore file", required=True, sensitive=True),
        Attribute("password", "Password for the keystore", required=True, sensitive=True),
        Attribute("alias", "Alias (friendly name) of the key entry", computed=True),
        Attribute("subject", "Certificate subject (RFC 4514)", computed=True),
        Attribute("issuer", "Certificate issuer (RFC 4514)", computed=True),
        Attribute("serial", "Certificate serial number (hex)", computed=True),
        Attribute("not_before", "Start of validity (ISO-8601, UTC)", computed=True),
        Attribute("not_after", "End of validity (ISO-8601, UTC)", computed=True),
        Attribute("key_algorithm", "Private key algorithm", computed=True),
        Attribute("key_size", "Private key size in bits", computed=True),
        Attribute("sha256_fingerprint", "SHA-256 certificate fingerprint", computed=True),
    ),
)


class KeystoreDataSource(BaseDataSource):
    type_suffix = "keystore"

    def schema(self) -> Schema:
        return KEYSTORE_DATA_SCHEMA

    def read(self, config: Mapping[str, Any]) -> Response:
        resp = Response()
        try:
            info: KeystoreInfo = inspect_keystore(config.get("file") or "", config.get("password") or "")
        except KeystoreError as e:
            resp.diagnostics.add_error("Error reading keystore", str(e))
            return resp
        resp.state = {"file": config.get("file"), "password": config.get("password"), **info}
        return resp
