"""Tests for the layered configuration store and config file codecs."""

import json

import pytest

from opensdk.config import (
    ConfigStore,
    ResolvedConfig,
    config_type,
    flatten_keys,
    read_config_file,
    write_config_value,
)
from opensdk.errors import ConfigError, ConfigFileNotFoundError, ConfigLoadError


class TestLayerPriority:
    """flag > env > file > default."""

    @pytest.fixture
    def store(self, tmp_path):
        config_file = tmp_path / "main.yaml"
        config_file.write_text("account: file-account\ndomain: file.test\nquery: from-file\n")
        store = ConfigStore(environ={"OPENSDK_ACCOUNT": "env-account", "OPENSDK_QUERY": "env"})
        store.set_default("account", "default-account")
        store.set_default("page", 1)
        store.set_config_file(config_file)
        store.read_in_config()
        store.bind_env("account", "OPENSDK_ACCOUNT")
        store.bind_env("query", "OPENSDK_QUERY")
        return store

    def test_env_beats_file_and_default(self, store):
        assert store.get("account") == "env-account"

    def test_file_beats_default(self, store):
        assert store.get("domain") == "file.test"

    def test_default_used_last(self, store):
        assert store.get("page") == 1

    def test_flag_beats_everything(self, store):
        store.set_flag("account", "flag-account")
        assert store.get("account") == "flag-account"

    def test_registration_order_does_not_matter(self, store):
        """A default registered after the file still ranks below it."""
        store.set_default("domain", "default.test")
        assert store.get("domain") == "file.test"

    def test_empty_env_value_falls_through(self, tmp_path):
        store = ConfigStore(environ={"OPENSDK_ACCOUNT": ""})
        store.set_default("account", "default-account")
        store.bind_env("account", "OPENSDK_ACCOUNT")
        assert store.get("account") == "default-account"

    def test_keys_are_case_insensitive(self):
        store = ConfigStore(environ={})
        store.set_default("Base-URL", "https://x.test")
        assert store.get("base-url") == "https://x.test"
        assert store.is_set("BASE-URL")

    def test_unknown_key_returns_default(self):
        store = ConfigStore(environ={})
        assert store.get("missing") is None
        assert store.get("missing", "fallback") == "fallback"
        assert not store.is_set("missing")


class TestResolve:
    """Tests for ConfigStore.resolve() snapshots."""

    def test_snapshot_records_sources(self):
        store = ConfigStore(environ={"OPENSDK_ACCOUNT": "42"})
        store.bind_env("account", "OPENSDK_ACCOUNT")
        store.set_default("format", "json")
        store.set_flag("sandbox", True)

        config = store.resolve()

        assert isinstance(config, ResolvedConfig)
        assert config["account"] == "42"
        assert config.source("account") == "env"
        assert config.source("format") == "default"
        assert config.source("sandbox") == "flag"

    def test_snapshot_is_immutable_and_detached(self):
        store = ConfigStore(environ={})
        store.set_default("format", "json")
        config = store.resolve()

        store.set_flag("format", "yaml")

        assert config["format"] == "json"
        with pytest.raises(TypeError):
            config["format"] = "text"  # type: ignore[index]

    def test_unset_env_bindings_are_not_keys(self):
        store = ConfigStore(environ={})
        store.bind_env("account", "OPENSDK_ACCOUNT")
        assert "account" not in store.resolve()

    def test_typed_getters(self):
        store = ConfigStore(environ={"OPENSDK_SANDBOX": "true", "OPENSDK_PAGE": "3"})
        store.bind_env("sandbox", "OPENSDK_SANDBOX")
        store.bind_env("page", "OPENSDK_PAGE")
        store.set_default("query", "abc")
        config = store.resolve()

        assert config.get_bool("sandbox") is True
        assert config.get_int("page") == 3
        assert config.get_string("query") == "abc"
        assert config.get_string("missing", "x") == "x"
        assert config.get_bool("missing") is False

    def test_get_int_rejects_garbage(self):
        store = ConfigStore(environ={})
        store.set_default("page", "two")
        with pytest.raises(ConfigError, match="page"):
            store.resolve().get_int("page")


class TestConfigFileSearch:
    """Tests for locating and reading config files."""

    def test_finds_profile_file_by_extension_order(self, tmp_path):
        (tmp_path / "dev.yaml").write_text("account: yaml\n")
        (tmp_path / "dev.json").write_text(json.dumps({"account": "json"}))
        store = ConfigStore(environ={})
        store.add_config_path(tmp_path)
        store.set_config_name("dev")

        assert store.find_config_file() == tmp_path / "dev.json"
        store.read_in_config()
        assert store.get("account") == "json"
        assert store.config_file_used == tmp_path / "dev.json"

    def test_search_paths_are_tried_in_order(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (second / "main.toml").write_text('account = "second"\n')
        store = ConfigStore(environ={})
        store.add_config_path(first)
        store.add_config_path(second)
        store.set_config_name("main")

        store.read_in_config()

        assert store.get("account") == "second"

    def test_missing_file_raises_not_found(self, tmp_path):
        store = ConfigStore(environ={})
        store.add_config_path(tmp_path)
        store.set_config_name("nope")
        with pytest.raises(ConfigFileNotFoundError, match="nope"):
            store.read_in_config()

    def test_explicit_missing_file_raises_not_found(self, tmp_path):
        store = ConfigStore(environ={})
        store.set_config_file(tmp_path / "gone.yaml")
        with pytest.raises(ConfigFileNotFoundError):
            store.read_in_config()

    def test_nested_values_are_flattened(self, tmp_path):
        path = tmp_path / "main.toml"
        path.write_text('[api]\nbase-url = "https://x.test"\n')
        store = ConfigStore(environ={})
        store.set_config_file(path)
        store.read_in_config()
        assert store.get("api.base-url") == "https://x.test"


class TestReadConfigFile:
    """Tests for read_config_file() error handling."""

    def test_malformed_yaml_is_load_error(self, tmp_path):
        path = tmp_path / "main.yaml"
        path.write_text("account: [unclosed\n")
        with pytest.raises(ConfigLoadError):
            read_config_file(path)

    def test_malformed_json_is_load_error(self, tmp_path):
        path = tmp_path / "main.json"
        path.write_text("{not json")
        with pytest.raises(ConfigLoadError):
            read_config_file(path)

    def test_malformed_toml_is_load_error(self, tmp_path):
        path = tmp_path / "main.toml"
        path.write_text("account = \n")
        with pytest.raises(ConfigLoadError):
            read_config_file(path)

    def test_non_mapping_top_level_is_load_error(self, tmp_path):
        path = tmp_path / "main.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigLoadError, match="mapping"):
            read_config_file(path)

    def test_directory_is_load_error(self, tmp_path):
        path = tmp_path / "main.yaml"
        path.mkdir()
        with pytest.raises(ConfigLoadError):
            read_config_file(path)

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(ConfigLoadError, match="unsupported config type"):
            config_type(tmp_path / "main.ini")

    def test_empty_file_is_empty_mapping(self, tmp_path):
        path = tmp_path / "main.yaml"
        path.write_text("")
        assert read_config_file(path) == {}


class TestWriteConfigValue:
    """Tests for write_config_value()."""

    def test_creates_yaml_file(self, tmp_path):
        path = tmp_path / "nested" / "main.yaml"
        write_config_value(path, "account", "42")
        assert read_config_file(path) == {"account": "42"}

    def test_updates_json_file_preserving_keys(self, tmp_path):
        path = tmp_path / "main.json"
        path.write_text(json.dumps({"domain": "x.test"}))
        write_config_value(path, "api.base-url", "https://x.test")
        assert json.loads(path.read_text()) == {
            "domain": "x.test",
            "api": {"base-url": "https://x.test"},
        }

    def test_toml_is_read_only(self, tmp_path):
        with pytest.raises(ConfigError, match="read-only"):
            write_config_value(tmp_path / "main.toml", "account", "42")


def test_flatten_keys_lowercases_and_joins():
    assert flatten_keys({"API": {"Token": "t"}, "page": 2}) == {"api.token": "t", "page": 2}

