"""Keytool: subprocess runner around the JDK `keytool` binary."""

from __future__ import annotations

import subprocess
from typing import Optional, Sequence

from common.config import resolve_keytool_path
from common.logger import get_logger
from keystore.base import KeytoolBase
from keystore.errors import KeytoolError

STORE_TYPE = "PKCS12"


def genkeypair_args(
    keystore_path: str,
    password: str,
    dname: str,
    alias: str,
    validity_days: int,
    key_alg: str,
    key_size: int,
) -> list[str]:
    return [
        "-v",
        "-genkeypair",
        "-alias", alias,
        "-keypass", password,
        "-keystore", keystore_path,
        "-storepass", password,
        "-validity", str(validity_days),
        "-keyalg", key_alg,
        "-keysize", str(key_size),
        "-dname", dname,
    ]


def importkeystore_args(
    src_keystore: str,
    src_password: str,
    dest_keystore: str,
    dest_password: str,
) -> list[str]:
    return [
        "-importkeystore",
        "-srckeystore", src_keystore,
        "-srcstoretype", STORE_TYPE,
        "-srcstorepass", src_password,
        "-destkeystore", dest_keystore,
        "-deststoretype", STORE_TYPE,
        "-deststorepass", dest_password,
        "-destkeypass", dest_password,
    ]


class Keytool(KeytoolBase):
    """Runs keytool as a child process and captures combined stdout/stderr."""

    def __init__(self, binary: Optional[str] = None, cwd: Optional[str] = None):
        self.binary = resolve_keytool_path(binary)
        self.cwd = cwd

    def get_path(self) -> str:
        return self.binary

    def _run(self, command: str, args: Sequence[str]) -> str:
        log = get_logger(__name__)
        # Arguments carry passwords; only the subcommand is logged.
        log.debug("keytool: run start binary=%s command=%s", self.binary, command)
        try:
            proc = subprocess.run(
                [self.binary, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                cwd=self.cwd,
            )
        except OSError as e:
            raise KeytoolError(
                f"error executing keytool command {command}. "
                f"Is the keytool installed on the machine?\nError: {e}"
            ) from e

        if proc.returncode != 0:
            log.debug("keytool: run failed command=%s returncode=%d", command, proc.returncode)
            raise KeytoolError(
                f"keytool command {command} exited with status {proc.returncode}",
                returncode=proc.returncode,
                output=proc.stdout or "",
            )
        log.debug("keytool: run ok command=%s", command)
        return proc.stdout or ""

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
        return self._run(
            "-genkeypair",
            genkeypair_args(keystore_path, password, dname, alias, validity_days, key_alg, key_size),
        )

    def importkeystore(
        self,
        src_keystore: str,
        src_password: str,
        dest_keystore: str,
        dest_password: str,
    ) -> str:
        return self._run(
            "-importkeystore",
            importkeystore_args(src_keystore, src_password, dest_keystore, dest_password),
        )
