"""Keystore error taxonomy."""

from __future__ import annotations

from typing import Optional


class KeystoreError(Exception):
    """Base class for every keystore operation failure."""


class KeytoolError(KeystoreError):
    """keytool could not be started or exited non-zero."""

    def __init__(self, message: str, returncode: Optional[int] = None, output: str = ""):
        self.returncode = returncode
        self.output = output
        if output:
            message = f"{message}\nOutput: {output.strip()}"
        super().__init__(message)


class KeystoreFileError(KeystoreError):
    """A scratch file could not be written, read or removed."""

    def __init__(self, message: str, filename: str, cause: OSError):
        self.filename = filename
        self.cause = cause
        super().__init__(f"{message}\nFile name: {filename}\nError: {cause}")


class KeystoreDecodeError(KeystoreError, ValueError):
    """Stored keystore text is not valid base64 or not a readable PKCS12 container."""
