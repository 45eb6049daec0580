"""End-to-end tests against the real JDK keytool; skipped when it is not installed."""

import base64
import os
import shutil

import pytest

from keystore.errors import KeystoreDecodeError, KeytoolError
from keystore.keytool import Keytool
from keystore.model import DistinguishedName, KeystoreModel
from keystore.pkcs12 import inspect_keystore

pytestmark = [
    pytest.mark.keytool,
    pytest.mark.skipif(shutil.which("keytool") is None, reason="keytool not installed"),
]


@pytest.fixture
def model(scratch_root):
    return KeystoreModel(
        password="MyPassword12345",
        distinguished_name=DistinguishedName(common_name="MyCommonName", country="DE"),
        keytool=Keytool(),
        tmp_dir=scratch_root,
    )


def test_create_and_rotate(model, scratch_root):
    created = model.create_keystore_base64()
    assert len(base64.b64decode(created)) > 1000
    info = inspect_keystore(created, "MyPassword12345")
    assert "CN=MyCommonName" in info["subject"]
    assert "C=DE" in info["subject"]
    assert info["key_size"] == 2048

    model.file = created
    rotated = model.update_keystore_base64("MyPassword")
    assert rotated != created
    assert inspect_keystore(rotated, "MyPassword")["sha256_fingerprint"] == info["sha256_fingerprint"]
    with pytest.raises(KeystoreDecodeError):
        inspect_keystore(rotated, "MyPassword12345")
    assert os.listdir(scratch_root) == []


def test_wrong_password_rotation_fails(model, scratch_root):
    model.file = model.create_keystore_base64()
    model.password = "WrongPassword"
    with pytest.raises(KeytoolError) as exc:
        model.update_keystore_base64("MyPassword")
    assert exc.value.returncode != 0
    assert os.listdir(scratch_root) == []


def test_missing_binary(scratch_root):
    model = KeystoreModel(
        password="MyPassword12345",
        keytool=Keytool("/nonexistent/bin/keytool"),
        tmp_dir=scratch_root,
    )
    with pytest.raises(KeytoolError, match="Is the keytool installed"):
        model.create_keystore_base64()
