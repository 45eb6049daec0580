"""Keytool runner base class (abstract).

The keystore model depends on this type, so alternative runners (a fake for
tests, a containerised JDK, ...) can be injected without changing model logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeytoolBase(ABC):
    @abstractmethod
    def get_path(self) -> str:
        """Get the path/identifier of the underlying tool (if applicable)."""
        ...

    @abstractmethod
    def genkeypair(
        self,
        keystore_path: str,
        password: str,
        dname: str,
        alias: str,
        validity_days: int,
        key_alg: str,
        key_size: int,
    ) -> str:
        """Create a new keystore at keystore_path holding one keypair. Returns tool output."""
        ...

    @abstractmethod
    def importkeystore(
        self,
        src_keystore: str,
        src_password: str,
        dest_keystore: str,
        dest_password: str,
    ) -> str:
        """Copy src_keystore into a new dest_keystore protected by dest_password. Returns tool output."""
        ...
