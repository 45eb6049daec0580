"""Keystore model: create and re-encrypt PKCS12 keystores through keytool.

The keystore only ever lives in memory as base64 text; keytool needs real
files, so each operation works inside its own scratch directory which is
removed again before returning.
"""

from __future__ import annotations

import base64
import binascii
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional

from common.config import resolve_tmp_dir
from common.logger import get_logger
from keystore.base import KeytoolBase
from keystore.errors import KeystoreDecodeError, KeystoreError, KeystoreFileError
from keystore.keytool import Keytool

KEY_ALIAS = "keystore"
VALIDITY_DAYS = 10000
KEY_ALG = "RSA"
KEY_SIZE = 2048
UNKNOWN = "Unknown"

KEYSTORE_FILENAME = "keystore.pkcs12"
ROTATED_FILENAME = "keystore-rotated.pkcs12"

# Characters keytool's X.500 name parser treats as syntax.
_DN_SPECIAL = ',+="\\<>;'

DN_ATTRIBUTES = (
    "common_name",
    "organization",
    "organizational_unit",
    "locality",
    "state",
    "country",
)


def _escape_dn_value(value: str) -> str:
    return "".join("\\" + ch if ch in _DN_SPECIAL else ch for ch in value)


@dataclass(frozen=True)
class DistinguishedName:
    common_name: Optional[str] = None
    organization: Optional[str] = None
    organizational_unit: Optional[str] = None
    locality: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]]) -> "DistinguishedName":
        return cls(**{name: values.get(name) for name in DN_ATTRIBUTES})

    def to_dname(self) -> str:
        """Render as a keytool -dname string; unset fields become `Unknown`."""
        pairs = [
            ("CN", self.common_name),
            ("OU", self.organizational_unit),
            ("O", self.organization),
            ("L", self.locality),
            ("S", self.state),
            ("C", self.country),
        ]
        return ", ".join(f"{key}={_escape_dn_value(value or UNKNOWN)}" for key, value in pairs)


def decode_keystore_text(text: Optional[str]) -> bytes:
    """Strict base64 decode of a stored keystore."""
    if not text:
        raise KeystoreDecodeError("keystore file text is empty")
    try:
        decoded = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeystoreDecodeError(f"error decoding base64 keystore file\nError: {e}") from e
    if not decoded:
        raise KeystoreDecodeError("keystore file text decodes to zero bytes")
    return decoded


def encode_keystore_bytes(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


@contextmanager
def _scratch_dir(root: Optional[str]) -> Iterator[str]:
    log = get_logger(__name__)
    try:
        workdir = tempfile.mkdtemp(prefix="jks-", dir=root)
    except OSError as e:
        raise KeystoreFileError(
            "error creating scratch directory for keystore files", root or tempfile.gettempdir(), e
        ) from e
    try:
        yield workdir
    finally:
        try:
            shutil.rmtree(workdir)
        except FileNotFoundError:
            pass
        except OSError as e:
            # Never mask the operation's own error with a cleanup failure.
            log.warning("keystore: scratch cleanup failed dir=%s error=%s", workdir, e)


def _read_file(path: str, message: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise KeystoreFileError(message, path, e) from e


def _write_file(path: str, data: bytes, message: str) -> None:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise KeystoreFileError(message, path, e) from e


def _remove_file(path: str, message: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        raise KeystoreFileError(message, path, e) from e


@dataclass
class KeystoreModel:
    """One keystore as configured: password, subject fields and the base64 file."""

    password: str = field(repr=False)
    distinguished_name: DistinguishedName = field(default_factory=DistinguishedName)
    file: Optional[str] = field(default=None, repr=False)
    keytool: Optional[KeytoolBase] = field(default=None, repr=False, compare=False)
    tmp_dir: Optional[str] = field(default=None, repr=False, compare=False)

    def _keytool(self) -> KeytoolBase:
        if self.keytool is None:
            self.keytool = Keytool()
        return self.keytool

    def _scratch_root(self) -> Optional[str]:
        return resolve_tmp_dir(self.tmp_dir)

    def create_keystore_base64(self) -> str:
        """Generate a fresh keystore with one RSA keypair and return it base64 encoded."""
        log = get_logger(__name__)
        if not self.password:
            raise KeystoreError("password must not be empty")

        keytool = self._keytool()
        dname = self.distinguished_name.to_dname()
        log.debug("keystore: create start keytool=%s dname=%s", keytool.get_path(), dname)

        with _scratch_dir(self._scratch_root()) as workdir:
            path = os.path.join(workdir, KEYSTORE_FILENAME)
            keytool.genkeypair(
                keystore_path=path,
                password=self.password,
                dname=dname,
                alias=KEY_ALIAS,
                validity_days=VALIDITY_DAYS,
                key_alg=KEY_ALG,
                key_size=KEY_SIZE,
            )
            raw = _read_file(path, "error reading keystore file after producing keystore file")
            _remove_file(path, "error removing keystore file after reading keystore file")

        log.info("keystore: create ok bytes=%d", len(raw))
        return encode_keystore_bytes(raw)

    def update_keystore_base64(self, new_password: str) -> str:
        """Re-encrypt the current keystore file with new_password and return the new base64 text.

        Uses this model's password as the source password.
        """
        log = get_logger(__name__)
        if not new_password:
            raise KeystoreError("new password must not be empty")

        # Fail on a corrupt blob before keytool is ever started.
        decoded = decode_keystore_text(self.file)

        keytool = self._keytool()
        log.debug("keystore: rotate start keytool=%s bytes=%d", keytool.get_path(), len(decoded))

        with _scratch_dir(self._scratch_root()) as workdir:
            src = os.path.join(workdir, KEYSTORE_FILENAME)
            dest = os.path.join(workdir, ROTATED_FILENAME)
            _write_file(src, decoded, "error writing keystore file before changing password")
            keytool.importkeystore(
                src_keystore=src,
                src_password=self.password,
                dest_keystore=dest,
                dest_password=new_password,
            )
            _remove_file(src, "error removing old keystore file after changing password")
            raw = _read_file(dest, "error reading new keystore file after changing password")
            _remove_file(dest, "error removing keystore file after reading keystore file")

        log.info("keystore: rotate ok bytes=%d", len(raw))
        return encode_keystore_bytes(raw)
