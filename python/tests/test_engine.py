import json
import os

import pytest

from provider.config import ConfigError, load_config, parse_config
from provider.engine import CREATE, DELETE, NOOP, REPLACE, UPDATE, Engine
from provider.provider import KeystoreProvider
from provider.state import StateFile
from provider.types import ProviderData


def config_doc(**resources):
    return {"resource": {"jks_keystore": resources}}


@pytest.fixture
def state_file(tmp_dir):
    return StateFile(os.path.join(tmp_dir, "terraform.tfstate.json"))


@pytest.fixture
def engine(fake_keytool, scratch_root, state_file):
    return Engine(KeystoreProvider(keytool=fake_keytool, tmp_dir=scratch_root), state_file)


def apply(engine, doc):
    result = engine.apply(parse_config(doc))
    assert not result.diagnostics.has_error(), [str(d) for d in result.diagnostics]
    return result


def attrs(result, address="jks_keystore.test"):
    return result.state["resources"][address]["attributes"]


# ============================================================
# Configuration parsing
# ============================================================

class TestConfig:
    def test_parse(self):
        blocks = parse_config(
            {
                "resource": {"jks_keystore": {"a": {"password": "x"}}},
                "data": {"jks_keystore": {"b": {"file": "f", "password": "y"}}},
            }
        )
        assert [b.address for b in blocks] == ["jks_keystore.a", "data.jks_keystore.b"]

    @pytest.mark.parametrize(
        "doc",
        [
            [],
            {"variable": {}},
            {"resource": []},
            {"resource": {"jks_keystore": []}},
            {"resource": {"jks_keystore": {"bad name": {}}}},
            {"resource": {"jks_keystore": {"a": "x"}}},
        ],
    )
    def test_invalid(self, doc):
        with pytest.raises(ConfigError):
            parse_config(doc)

    def test_load_missing_file(self, tmp_dir):
        with pytest.raises(ConfigError, match="not found"):
            load_config(os.path.join(tmp_dir, "missing.tf.json"))

    def test_load_invalid_json(self, tmp_dir):
        path = os.path.join(tmp_dir, "main.tf.json")
        with open(path, "w") as f:
            f.write("{not json")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_config(path)


# ============================================================
# State file
# ============================================================

class TestStateFile:
    def test_missing_file_is_empty(self, state_file):
        doc = state_file.read()
        assert doc["serial"] == 0
        assert doc["resources"] == {}

    def test_write_increments_serial_atomically(self, state_file):
        out = state_file.write(state_file.read())
        assert out["serial"] == 1
        assert not os.path.exists(state_file.get_path() + ".tmp")
        assert state_file.read()["serial"] == 1
        assert os.stat(state_file.get_path()).st_mode & 0o777 == 0o600

    def test_rejects_foreign_format(self, state_file):
        with open(state_file.get_path(), "w") as f:
            json.dump({"version": 4, "resources": []}, f)
        with pytest.raises(ConfigError, match="unsupported format"):
            state_file.read()


# ============================================================
# Plan / apply lifecycle
# ============================================================

class TestLifecycle:
    def test_create_then_noop(self, engine, state_file):
        doc = config_doc(test={"password": "MyPassword12345", "common_name": "MyCommonName"})
        first = apply(engine, doc)
        assert [c.action for c in first.plan.changes] == [CREATE]
        assert first.written
        created = attrs(first)
        assert len(created["file"]) > 1000

        second = apply(engine, doc)
        assert [c.action for c in second.plan.changes] == [NOOP]
        assert not second.written
        assert attrs(second) == created
        assert state_file.read()["serial"] == 1

    def test_password_change_updates_in_place(self, engine):
        created = attrs(apply(engine, config_doc(test={"password": "MyPassword12345", "common_name": "cn"})))
        result = apply(engine, config_doc(test={"password": "MyPassword", "common_name": "cn"}))
        assert [c.action for c in result.plan.changes] == [UPDATE]
        updated = attrs(result)
        assert updated["id"] == created["id"]
        assert updated["file"] != created["file"]

    def test_dn_change_replaces(self, engine):
        created = attrs(apply(engine, config_doc(test={"password": "MyPassword12345", "common_name": "cn"})))
        result = apply(engine, config_doc(test={"password": "MyPassword12345", "common_name": "other"}))
        (change,) = result.plan.changes
        assert change.action == REPLACE
        assert change.replace_paths == ["common_name"]
        assert attrs(result)["id"] != created["id"]
        assert result.plan.summary() == "Plan: 1 to add, 0 to change, 1 to destroy."

    def test_removed_block_is_deleted(self, engine):
        apply(engine, config_doc(test={"password": "MyPassword12345"}, other={"password": "MyPassword12345"}))
        result = apply(engine, config_doc(other={"password": "MyPassword12345"}))
        actions = {c.address: c.action for c in result.plan.changes}
        assert actions == {"jks_keystore.other": NOOP, "jks_keystore.test": DELETE}
        assert list(result.state["resources"]) == ["jks_keystore.other"]

    def test_destroy(self, engine):
        apply(engine, config_doc(test={"password": "MyPassword12345"}))
        result = engine.destroy()
        assert [c.action for c in result.plan.changes] == [DELETE]
        assert result.state["resources"] == {}

    def test_invalid_config_changes_nothing(self, engine, state_file):
        result = engine.apply(parse_config(config_doc(test={"common_name": "cn"})))
        assert result.diagnostics.has_error()
        assert not result.written
        assert not os.path.exists(state_file.get_path())

    def test_unknown_resource_type(self, engine):
        with pytest.raises(ConfigError):
            engine.plan(parse_config({"resource": {"jks_truststore": {"a": {"password": "x"}}}}))

    def test_failed_update_keeps_prior_state(self, engine, state_file, failing_keytool):
        created = attrs(apply(engine, config_doc(test={"password": "MyPassword12345"})))
        engine.provider.provider_data = ProviderData(
            keytool=failing_keytool, tmp_dir=engine.provider.provider_data.tmp_dir
        )
        result = engine.apply(parse_config(config_doc(test={"password": "MyPassword"})))
        assert result.diagnostics.has_error()
        assert not result.written
        assert state_file.read()["resources"]["jks_keystore.test"]["attributes"] == created

    def test_failed_create_does_not_block_others(self, engine, failing_keytool):
        apply(engine, config_doc(a={"password": "MyPassword12345"}))
        engine.provider.provider_data = ProviderData(keytool=failing_keytool)
        result = engine.apply(parse_config(config_doc(a={"password": "MyPassword12345"}, b={"password": "pw123456"})))
        assert result.diagnostics.has_error()
        assert list(result.state["resources"]) == ["jks_keystore.a"]

    def test_data_source(self, engine):
        created = attrs(apply(engine, config_doc(test={"password": "MyPassword12345", "common_name": "cn"})))
        doc = config_doc(test={"password": "MyPassword12345", "common_name": "cn"})
        doc["data"] = {"jks_keystore": {"info": {"file": created["file"], "password": "MyPassword12345"}}}
        result = apply(engine, doc)
        info = result.state["data"]["data.jks_keystore.info"]["attributes"]
        assert "CN=cn" in info["subject"]
        assert info["key_algorithm"] == "RSA"

    def test_unsupported_type_in_state_is_a_plan_error(self, engine, state_file, fake_keytool):
        state_file.write(
            {
                "resources": {"zz_other.x": {"type": "zz_other", "attributes": {"id": "1"}}},
                "data": {},
            }
        )
        result = engine.apply(parse_config(config_doc(a={"password": "MyPassword12345"})))
        (diag,) = result.diagnostics.errors()
        assert diag.summary == "Unsupported resource in state"
        assert "zz_other" in diag.detail
        assert not result.written
        assert fake_keytool.calls == []
        assert state_file.read()["serial"] == 1
