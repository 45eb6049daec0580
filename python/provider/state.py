"""StateFile: JSON state document on disk, written atomically."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from common.logger import get_logger
from provider.config import ConfigError

STATE_VERSION = 1

StateDocument = dict[str, Any]


def empty_state() -> StateDocument:
    return {"version": STATE_VERSION, "serial": 0, "resources": {}, "data": {}}


class StateFile:
    def __init__(self, file_path: str):
        self.file_path = file_path

    def get_path(self) -> str:
        return self.file_path

    def read(self) -> StateDocument:
        log = get_logger(__name__)
        if not os.path.isfile(self.file_path):
            log.debug("state: file missing, returning empty path=%s", self.file_path)
            return empty_state()

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                doc = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"state file {self.file_path} is not valid JSON: {e}") from e

        if not isinstance(doc, dict) or doc.get("version") != STATE_VERSION:
            raise ConfigError(f"state file {self.file_path} has an unsupported format")
        doc.setdefault("serial", 0)
        doc.setdefault("resources", {})
        doc.setdefault("data", {})
        log.debug(
            "state: read ok path=%s serial=%d resources=%d",
            self.file_path,
            doc["serial"],
            len(doc["resources"]),
        )
        return doc

    def write(self, doc: StateDocument) -> StateDocument:
        """Write doc with an incremented serial. Atomic via tmp+rename."""
        log = get_logger(__name__)
        Path(self.file_path).parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path + ".tmp"

        out = dict(doc)
        out["version"] = STATE_VERSION
        out["serial"] = int(doc.get("serial", 0)) + 1

        # State carries passwords and keystores.
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(out, f, indent=2, sort_keys=True)
            f.write("\n")

        os.replace(tmp_path, self.file_path)
        log.info("state: write ok path=%s serial=%d", self.file_path, out["serial"])
        return out
