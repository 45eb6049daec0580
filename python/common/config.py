"""Environment-driven settings.

A `.env` file in the working directory is loaded once on import.

Env:
- KEYTOOL_PATH: explicit keytool binary
- JAVA_HOME: used as `$JAVA_HOME/bin/keytool` when KEYTOOL_PATH is unset
- JKS_TMPDIR: root for per-operation scratch directories (default: system temp)
- JKS_CONFIG / JKS_STATE: default CLI configuration and state paths
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from os import getenv
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG_FILENAME = "main.tf.json"
DEFAULT_STATE_FILENAME = "terraform.tfstate.json"


def resolve_tmp_dir(explicit: Optional[str] = None) -> Optional[str]:
    """Scratch root: argument, then JKS_TMPDIR; None means the system temp dir."""
    return explicit or getenv("JKS_TMPDIR") or None


def resolve_keytool_path(explicit: Optional[str] = None) -> str:
    """Pick the keytool binary: argument, KEYTOOL_PATH, JAVA_HOME, then PATH lookup."""
    if explicit:
        return explicit
    env_path = getenv("KEYTOOL_PATH")
    if env_path:
        return env_path
    java_home = getenv("JAVA_HOME")
    if java_home:
        candidate = os.path.join(java_home, "bin", "keytool")
        if os.path.isfile(candidate):
            return candidate
    return "keytool"


@dataclass(frozen=True)
class Settings:
    keytool_path: str
    tmp_dir: Optional[str]
    config_path: str
    state_path: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            keytool_path=resolve_keytool_path(),
            tmp_dir=resolve_tmp_dir(),
            config_path=getenv("JKS_CONFIG", DEFAULT_CONFIG_FILENAME),
            state_path=getenv("JKS_STATE", DEFAULT_STATE_FILENAME),
        )
