"""Tests for OPENSDK_* environment discovery."""

from opensdk.config import ConfigStore
from opensdk.environment import scan_environment


class TestScanEnvironment:
    """Tests for scan_environment()."""

    def test_binds_prefixed_variables(self):
        environ = {"OPENSDK_ACCESS_TOKEN": "abc123", "OPENSDK_PER_PAGE": "50"}
        store = ConfigStore(environ=environ)

        bindings = scan_environment(store)

        assert bindings == {
            "access-token": "OPENSDK_ACCESS_TOKEN",
            "per-page": "OPENSDK_PER_PAGE",
        }
        assert store.get("access-token") == "abc123"
        assert store.get("per-page") == "50"

    def test_ignores_unprefixed_variables(self):
        store = ConfigStore(environ={"HOME": "/home/me", "OPENSDKX_FOO": "1"})
        assert scan_environment(store) == {}
        assert store.env_bindings == {}

    def test_ignores_values_containing_equals(self):
        """An entry that does not split into exactly two parts is skipped."""
        store = ConfigStore(environ={"OPENSDK_QUERY": "a=b", "OPENSDK_DOMAIN": "x.test"})

        bindings = scan_environment(store)

        assert "query" not in bindings
        assert store.get("query") is None
        assert store.get("domain") == "x.test"

    def test_scan_is_idempotent(self):
        store = ConfigStore(environ={"OPENSDK_ACCOUNT": "42"})
        first = scan_environment(store)
        second = scan_environment(store)
        assert first == second
        assert dict(store.env_bindings) == {"account": "OPENSDK_ACCOUNT"}

    def test_explicit_environ_overrides_store_environ(self):
        store = ConfigStore(environ={})
        bindings = scan_environment(store, environ={"OPENSDK_DOMAIN": "x.test"})
        assert bindings == {"domain": "OPENSDK_DOMAIN"}

    def test_control_variables_are_bound_too(self):
        """OPENSDK_PROFILE and OPENSDK_CONFIG_FILE are ordinary bindings as well."""
        store = ConfigStore(environ={"OPENSDK_PROFILE": "dev"})
        scan_environment(store)
        assert store.get("profile") == "dev"
