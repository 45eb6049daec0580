#!/usr/bin/env python3
"""
JKS CLI: plan/apply keystore resources against a local state file.

Usage:
  python -m jks_cli plan
  python -m jks_cli apply
  python -m jks_cli show [--show-sensitive]
  python -m jks_cli destroy
  python -m jks_cli inspect --file <base64-or-@path> --password <pwd>

Options:
  --config <file>   Configuration in Terraform JSON syntax (default: main.tf.json or JKS_CONFIG)
  --state <file>    State file (default: terraform.tfstate.json or JKS_STATE)
  --keytool <path>  keytool binary (or KEYTOOL_PATH / JAVA_HOME)
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

# Allow running from repo root or from python/
sys.path.insert(0, str(Path(__file__).resolve().parent))

from common.config import Settings
from keystore import Keytool, KeystoreError, inspect_keystore
from provider import ConfigError, Diagnostics, Engine, KeystoreProvider, StateFile, load_config
from provider.engine import CREATE, DELETE, NOOP, REPLACE, UPDATE

SENSITIVE = "(sensitive value)"

_SYMBOLS = {CREATE: "+", UPDATE: "~", REPLACE: "-/+", DELETE: "-"}


def _print_diagnostics(diags: Diagnostics) -> None:
    for d in diags:
        print(str(d), file=sys.stderr)


def _print_plan(plan) -> None:
    changes = [c for c in plan.changes if c.action != NOOP]
    if not changes:
        print("No changes. Your infrastructure matches the configuration.")
        return
    for c in changes:
        line = f"  {_SYMBOLS[c.action]} {c.address} ({c.action})"
        if c.replace_paths:
            line += f" forces replacement: {', '.join(c.replace_paths)}"
        print(line)
    print(plan.summary())


def _masked(attributes: dict, sensitive: set, show_sensitive: bool) -> dict:
    if show_sensitive:
        return dict(attributes)
    return {k: (SENSITIVE if k in sensitive and v is not None else v) for k, v in attributes.items()}


def _read_file_arg(value: str) -> str:
    """`@path` reads the base64 text from a file."""
    if value.startswith("@"):
        with open(value[1:], "r", encoding="utf-8") as f:
            return f.read().strip()
    return value


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(
        description="JKS CLI - manage PKCS12 keystores generated with keytool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  plan             Show the changes apply would make
  apply            Create, update or replace keystores to match the configuration
  show             Print the state (sensitive values masked)
  destroy          Delete every keystore recorded in state
  inspect          Describe a base64 keystore
        """,
    )
    parser.add_argument("--config", default=settings.config_path, help="Configuration file path")
    parser.add_argument("--state", default=settings.state_path, help="State file path")
    parser.add_argument("--keytool", default=settings.keytool_path, help="keytool binary")
    parser.add_argument("--tmp-dir", default=settings.tmp_dir, help="Root for scratch directories")
    parser.add_argument("--show-sensitive", action="store_true", help="show: print sensitive values")
    parser.add_argument("--file", help="inspect: base64 keystore text or @path")
    parser.add_argument("--password", help="inspect: keystore password")
    parser.add_argument(
        "command", nargs="?", choices=["plan", "apply", "show", "destroy", "inspect"], help="Command"
    )
    parsed = parser.parse_args(argv)

    cmd = (parsed.command or "").lower()
    if not cmd:
        parser.print_help()
        sys.exit(0)

    provider = KeystoreProvider(keytool=Keytool(parsed.keytool), tmp_dir=parsed.tmp_dir)
    state_file = StateFile(parsed.state)
    engine = Engine(provider, state_file)

    try:
        if cmd == "plan":
            plan = engine.plan(load_config(parsed.config))
            if plan.diagnostics.has_error():
                _print_diagnostics(plan.diagnostics)
                sys.exit(1)
            _print_plan(plan)

        elif cmd in ("apply", "destroy"):
            if cmd == "apply":
                result = engine.apply(load_config(parsed.config))
            else:
                result = engine.destroy()
            _print_plan(result.plan)
            if result.diagnostics:
                _print_diagnostics(result.diagnostics)
            if result.diagnostics.has_error():
                sys.exit(1)
            print(f"Apply complete. State serial {result.state.get('serial', 0)}.")

        elif cmd == "show":
            doc = state_file.read()
            out = {"serial": doc.get("serial", 0), "resources": {}, "data": {}}
            for address, entry in doc.get("resources", {}).items():
                sensitive = provider.resource(entry["type"]).schema().sensitive_names()
                out["resources"][address] = _masked(entry["attributes"], sensitive, parsed.show_sensitive)
            for address, entry in doc.get("data", {}).items():
                sensitive = provider.data_source(entry["type"]).schema().sensitive_names()
                out["data"][address] = _masked(entry["attributes"], sensitive, parsed.show_sensitive)
            print(json.dumps(out, indent=2, ensure_ascii=False))

        elif cmd == "inspect":
            if not parsed.file or parsed.password is None:
                print("Usage: inspect --file <base64-or-@path> --password <pwd>", file=sys.stderr)
                sys.exit(1)
            info = inspect_keystore(_read_file_arg(parsed.file), parsed.password)
            print(json.dumps(info, indent=2, ensure_ascii=False))

    except (ConfigError, KeystoreError, OSError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
