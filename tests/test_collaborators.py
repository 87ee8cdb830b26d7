"""Unit tests for the default host collaborator adapters"""
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from plugin_endpoints.core.casbin import get_capability_checker
from plugin_endpoints.models import PluginRecord, PluginStatus
from plugin_endpoints.services.activation import SettingsActivationState, get_status
from plugin_endpoints.services.registry import FilesystemPluginRegistry
from plugin_endpoints.services.security_service import Actor, SecurityService
from plugin_endpoints.services.update_cache import RedisUpdateCache


class TestFilesystemPluginRegistry:

    def test_lists_plugins_by_identifier(self, registry):
        plugins = registry.list_installed_plugins()

        assert list(plugins) == ["akismet/akismet.php", "hello-dolly/hello.php"]
        assert plugins["hello-dolly/hello.php"]["version"] == "1.7.2"

    def test_skips_broken_manifests(self, plugins_dir):
        (plugins_dir / "broken").mkdir()
        (plugins_dir / "broken" / "plugin.yaml").write_text("name: [unclosed")
        (plugins_dir / "nameless").mkdir()
        (plugins_dir / "nameless" / "plugin.yaml").write_text("version: 1.0\n")
        (plugins_dir / "no-manifest").mkdir()

        plugins = FilesystemPluginRegistry(plugins_dir=str(plugins_dir)).list_installed_plugins()

        assert list(plugins) == ["akismet/akismet.php", "hello-dolly/hello.php"]

    def test_entrypoint_must_stay_in_plugin_directory(self, plugins_dir):
        (plugins_dir / "sneaky").mkdir()
        (plugins_dir / "sneaky" / "plugin.yaml").write_text("name: Sneaky\nentrypoint: ../../etc/passwd\n")

        plugins = FilesystemPluginRegistry(plugins_dir=str(plugins_dir)).list_installed_plugins()

        assert "sneaky" not in " ".join(plugins)

    def test_entrypoint_defaults_to_manifest(self, tmp_path):
        (tmp_path / "tiny").mkdir()
        (tmp_path / "tiny" / "plugin.yaml").write_text("name: Tiny\n")

        plugins = FilesystemPluginRegistry(plugins_dir=str(tmp_path)).list_installed_plugins()

        assert list(plugins) == ["tiny/plugin.yaml"]

    def test_missing_directory(self, tmp_path):
        assert FilesystemPluginRegistry(plugins_dir=str(tmp_path / "missing")).list_installed_plugins() == {}


class TestPluginRecord:

    def test_header_style_keys(self):
        record = PluginRecord.from_registry("a/a.php", {"Name": "A", "AuthorName": "Ann", "Author": "<b>Ann</b>"})
        assert record.author == "<b>Ann</b>"
        assert record.author_name == "Ann"
        assert record.title == "A"

    def test_directory_name(self):
        assert PluginRecord("hello-dolly/hello.php", "Hello Dolly").directory_name == "hello-dolly"
        assert PluginRecord("hello.php", "Hello Dolly").directory_name == "."


class TestActivation:

    def test_network_activation_wins(self):
        state = SettingsActivationState(active=["a/a.php"], network_active=["b/b.php"])

        assert get_status(state, "a/a.php") == PluginStatus.ACTIVE
        assert get_status(state, "b/b.php") == PluginStatus.ACTIVE_NETWORK
        assert get_status(state, "c/c.php") == PluginStatus.INACTIVE
        assert state.is_active("b/b.php")


class TestRedisUpdateCache:

    @pytest.mark.asyncio
    async def test_reads_snapshot_once(self):
        document = {"response": {"hello-dolly/hello.php": {"new_version": "1.7.3", "package": "https://x/h.zip"}}}
        with patch("plugin_endpoints.services.update_cache.RedisClient.get_json",
                   new_callable=AsyncMock, return_value=document) as get_json:
            cache = RedisUpdateCache(key="updates")
            info = await cache.get_update_info("hello-dolly/hello.php")
            missing = await cache.get_update_info("akismet/akismet.php")

        assert info.new_version == "1.7.3"
        assert info.package == "https://x/h.zip"
        assert missing is None
        get_json.assert_awaited_once_with("updates")

    @pytest.mark.asyncio
    async def test_unreachable_cache_means_no_updates(self):
        with patch("plugin_endpoints.services.update_cache.RedisClient.get_json",
                   new_callable=AsyncMock, side_effect=RedisConnectionError("refused")):
            assert await RedisUpdateCache().get_update_info("hello-dolly/hello.php") is None


class TestAuthorization:

    def test_token_round_trip(self):
        service = SecurityService(secret_key="k", algorithm="HS256")
        token = service.create_access_token("7", roles=["administrator"])

        assert service.actor_from_token(token) == Actor(id="7", roles=("administrator",))
        assert SecurityService(secret_key="other").actor_from_token(token) is None
        assert service.actor_from_token("garbage") is None

    @pytest.mark.parametrize("roles,capability,allowed", [
        (("administrator",), "manage_options", True),
        (("administrator",), "delete_plugins", True),
        (("super_admin",), "delete_plugins", True),
        (("subscriber",), "manage_options", False),
        ((), "manage_options", False),
    ])
    def test_capabilities(self, roles, capability, allowed):
        checker = get_capability_checker()
        assert checker.actor_can(Actor(id="1", roles=roles), capability) is allowed
