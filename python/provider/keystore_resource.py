"""jks_keystore resource: a PKCS12 keystore kept only as base64 text in state."""

from __future__ import annotations

import uuid
from typing import Any, Mapping

from common.logger import get_logger
from keystore.errors import KeystoreError
from keystore.model import DN_ATTRIBUTES, DistinguishedName, KeystoreModel
from provider.base_resource import BaseResource
from provider.schema import Attribute, Schema
from provider.types import KeystoreResourceState, Response, StateData

_DN_DESCRIPTIONS = {
    "common_name": "Common Name (CN)",
    "organization": "Organization (O)",
    "organizational_unit": "Organizational Unit (OU)",
    "locality": "Locality (L)",
    "state": "State (S)",
    "country": "Country (C)",
}

KEYSTORE_SCHEMA = Schema(
    description=(
        "Keystore resource which creates a base64 encoded PKCS12 keystore file valid for "
        "10000 days using the keytool utility. The machine running the provider needs to "
        "have keytool installed. The file is persisted solely within state as base64 text."
    ),
    attributes=(
        Attribute("id", "Generated UUID for the keystore", computed=True),
        Attribute(
            "password",
            "Password for the keystore and the single key in the keystore",
            required=True,
            sensitive=True,
        ),
        Attribute("file", "Base64 encoded keystore file", computed=True, sensitive=True),
    )
    + tuple(
        Attribute(name, _DN_DESCRIPTIONS[name], optional=True, requires_replace_if_configured=True)
        for name in DN_ATTRIBUTES
    ),
)


class KeystoreResource(BaseResource):
    type_suffix = "keystore"

    def schema(self) -> Schema:
        return KEYSTORE_SCHEMA

    def _model(self, password: str, values: Mapping[str, Any], file: Any = None) -> KeystoreModel:
        return KeystoreModel(
            password=password,
            distinguished_name=DistinguishedName.from_mapping(values),
            file=file,
            keytool=self.provider_data.keytool,
            tmp_dir=self.provider_data.tmp_dir,
        )

    def create(self, plan: Mapping[str, Any]) -> Response:
        log = get_logger(__name__)
        resp = Response()
        model = self._model(plan.get("password") or "", plan)
        try:
            b64_file = model.create_keystore_base64()
        except KeystoreError as e:
            resp.diagnostics.add_error("Error during create operation", str(e))
            return resp

        state: KeystoreResourceState = {
            "id": str(uuid.uuid4()),
            "password": model.password,
            "file": b64_file,
            **{name: plan.get(name) for name in DN_ATTRIBUTES},
        }
        log.info("keystore resource: created id=%s", state["id"])
        resp.state = dict(state)
        return resp

    def read(self, state: StateData) -> Response:
        # Nothing lives outside state, so refresh is the identity.
        return Response(state=dict(state))

    def update(self, plan: Mapping[str, Any], state: StateData) -> Response:
        log = get_logger(__name__)
        resp = Response()
        if not self.has_changes(plan, state):
            resp.state = dict(state)
            return resp

        new_state = dict(state)
        new_state.update({name: plan.get(name) for name in DN_ATTRIBUTES})
        new_password = plan.get("password") or ""

        if new_password != state.get("password"):
            old_model = self._model(state.get("password") or "", state, file=state.get("file"))
            try:
                new_state["file"] = old_model.update_keystore_base64(new_password)
            except KeystoreError as e:
                resp.diagnostics.add_error("Error during update operation", str(e))
                return resp
            new_state["password"] = new_password
            log.info("keystore resource: password rotated id=%s", state.get("id"))

        resp.state = new_state
        return resp

    def delete(self, state: StateData) -> Response:
        get_logger(__name__).info("keystore resource: deleted id=%s", state.get("id"))
        return Response()
