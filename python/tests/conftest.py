import datetime
import os
import re
import shutil
import tempfile

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import BestAvailableEncryption, pkcs12
from cryptography.x509.oid import NameOID

from keystore.base import KeytoolBase
from keystore.errors import KeytoolError

_DN_PAIR_RE = re.compile(r"(CN|OU|O|L)=((?:\\.|[^,\\])*)")
_DN_OIDS = {
    "CN": NameOID.COMMON_NAME,
    "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "L": NameOID.LOCALITY_NAME,
}


class FakeKeytool(KeytoolBase):
    """In-process keytool stand-in producing real PKCS12 files via cryptography."""

    def __init__(self, key_size: int = 2048):
        self.key_size = key_size
        self.calls = []

    def get_path(self) -> str:
        return "fake-keytool"

    def genkeypair(self, keystore_path, password, dname, alias, validity_days, key_alg, key_size):
        self.calls.append(("genkeypair", keystore_path, dname, alias, validity_days, key_alg, key_size))
        key = rsa.generate_private_key(public_exponent=65537, key_size=self.key_size)
        subject = x509.Name(
            [
                x509.NameAttribute(_DN_OIDS[k], re.sub(r"\\(.)", r"\1", v))
                for k, v in _DN_PAIR_RE.findall(dname)
            ]
        )
        now = datetime.datetime.now(datetime.timezone.utc)
        cert = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + datetime.timedelta(days=validity_days))
            .sign(key, hashes.SHA256())
        )
        data = pkcs12.serialize_key_and_certificates(
            alias.encode("utf-8"), key, cert, None, BestAvailableEncryption(password.encode("utf-8"))
        )
        with open(keystore_path, "wb") as f:
            f.write(data)
        return "Generating 2048-bit RSA key pair"

    def importkeystore(self, src_keystore, src_password, dest_keystore, dest_password):
        self.calls.append(("importkeystore", src_keystore, dest_keystore))
        with open(src_keystore, "rb") as f:
            raw = f.read()
        try:
            bundle = pkcs12.load_pkcs12(raw, src_password.encode("utf-8"))
        except ValueError as e:
            raise KeytoolError("keytool command -importkeystore exited with status 1", 1, str(e))
        data = pkcs12.serialize_key_and_certificates(
            bundle.cert.friendly_name,
            bundle.key,
            bundle.cert.certificate,
            None,
            BestAvailableEncryption(dest_password.encode("utf-8")),
        )
        with open(dest_keystore, "wb") as f:
            f.write(data)
        return "Import command completed"


class FailingKeytool(FakeKeytool):
    """keytool that always exits non-zero."""

    def genkeypair(self, keystore_path, *args, **kwargs):
        self.calls.append(("genkeypair", keystore_path))
        raise KeytoolError("keytool command -genkeypair exited with status 1", 1, "keytool error: boom")

    def importkeystore(self, src_keystore, *args, **kwargs):
        self.calls.append(("importkeystore", src_keystore))
        raise KeytoolError("keytool command -importkeystore exited with status 1", 1, "keytool error: boom")


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp(prefix="jks-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def scratch_root(tmp_dir):
    root = os.path.join(tmp_dir, "scratch")
    os.mkdir(root)
    return root


@pytest.fixture
def fake_keytool():
    return FakeKeytool()


@pytest.fixture
def failing_keytool():
    return FailingKeytool()
