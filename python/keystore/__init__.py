from keystore.base import KeytoolBase
from keystore.errors import KeystoreDecodeError, KeystoreError, KeystoreFileError, KeytoolError
from keystore.keytool import Keytool
from keystore.model import DistinguishedName, KeystoreModel, decode_keystore_text
from keystore.pkcs12 import KeystoreInfo, inspect_keystore

__all__ = [
    "KeytoolBase",
    "Keytool",
    "KeystoreModel",
    "DistinguishedName",
    "KeystoreInfo",
    "KeystoreError",
    "KeytoolError",
    "KeystoreFileError",
    "KeystoreDecodeError",
    "decode_keystore_text",
    "inspect_keystore",
]
