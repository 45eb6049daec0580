"""Read-only inspection of PKCS12 keystores (cryptography's PKCS12 reader)."""

from __future__ import annotations

from typing import Optional, TypedDict

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import pkcs12

from keystore.errors import KeystoreDecodeError
from keystore.model import decode_keystore_text


class KeystoreInfo(TypedDict):
    """Certificate and key details of the single entry in a keystore."""
    alias: Optional[str]
    subject: str
    issuer: str
    serial: str
    not_before: str
    not_after: str
    key_algorithm: str
    key_size: int
    sha256_fingerprint: str


def load_keystore(raw: bytes, password: str) -> pkcs12.PKCS12KeyAndCertificates:
    """Load a PKCS12 container; wrong password or corrupt data raise KeystoreDecodeError."""
    try:
        return pkcs12.load_pkcs12(raw, password.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise KeystoreDecodeError(f"error loading PKCS12 keystore (wrong password or corrupt file)\nError: {e}") from e


def _key_algorithm(key) -> str:
    if isinstance(key, rsa.RSAPrivateKey):
        return "RSA"
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return "EC"
    return type(key).__name__


def _fingerprint(digest: bytes) -> str:
    return ":".join(f"{b:02X}" for b in digest)


def inspect_keystore(file_b64: str, password: str) -> KeystoreInfo:
    """Decode a base64 keystore and describe its key entry."""
    bundle = load_keystore(decode_keystore_text(file_b64), password)
    if bundle.cert is None or bundle.key is None:
        raise KeystoreDecodeError("keystore holds no private key entry")

    cert = bundle.cert.certificate
    alias = bundle.cert.friendly_name
    return {
        "alias": alias.decode("utf-8") if alias else None,
        "subject": cert.subject.rfc4514_string(),
        "issuer": cert.issuer.rfc4514_string(),
        "serial": format(cert.serial_number, "x"),
        "not_before": cert.not_valid_before_utc.isoformat(),
        "not_after": cert.not_valid_after_utc.isoformat(),
        "key_algorithm": _key_algorithm(bundle.key),
        "key_size": getattr(bundle.key, "key_size", 0),
        "sha256_fingerprint": _fingerprint(cert.fingerprint(hashes.SHA256())),
    }
