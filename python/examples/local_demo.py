import json
import os
import tempfile

import sys
from pathlib import Path

# Ensure `python/` directory is on sys.path when running as a script.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from keystore import DistinguishedName, KeystoreModel, inspect_keystore
from provider import Engine, KeystoreProvider, StateFile, parse_config


def model_demo() -> None:
    """Create a keystore, rotate its password and describe both versions."""
    model = KeystoreModel(
        password=os.environ.get("DEMO_PASSWORD", "changeit-123"),
        distinguished_name=DistinguishedName(common_name="demo.local", organization="Demo"),
    )
    model.file = model.create_keystore_base64()
    print("created:", json.dumps(inspect_keystore(model.file, model.password), indent=2))

    rotated = model.update_keystore_base64("rotated-456")
    print("rotated:", json.dumps(inspect_keystore(rotated, "rotated-456"), indent=2))


def engine_demo() -> None:
    """Apply the same configuration twice; the second run is a no-op."""
    d = tempfile.mkdtemp(prefix="jks-demo-")
    engine = Engine(KeystoreProvider(), StateFile(os.path.join(d, "terraform.tfstate.json")))
    config = parse_config(
        {"resource": {"jks_keystore": {"app": {"password": "changeit-123", "common_name": "app"}}}}
    )
    for _ in range(2):
        result = engine.apply(config)
        print(result.plan.summary(), "written:", result.written)
    print("state:", os.path.join(d, "terraform.tfstate.json"))


if __name__ == "__main__":
    model_demo()
    engine_demo()
