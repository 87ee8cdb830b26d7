"""
Pytest configuration and fixtures for the plugin endpoint tests.
"""
import os
import tempfile

# Settings are read at import time; keep test logs out of the source tree
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="plugin-endpoints-logs-"))
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import yaml
from fastapi.testclient import TestClient

from plugin_endpoints.api import deps
from plugin_endpoints.services.packager import PackageBuilder
from plugin_endpoints.services.registry import FilesystemPluginRegistry
from plugin_endpoints.services.security_service import security_service
from tests.fakes import FakeActivationState, FakeRepository, FakeUpdateCache

HELLO_DOLLY_ID = "hello-dolly/hello.php"
AKISMET_ID = "akismet/akismet.php"


def write_plugin(root, directory, manifest, files):
    plugin_dir = root / directory
    plugin_dir.mkdir(parents=True)
    with open(plugin_dir / "plugin.yaml", "w", encoding="utf-8") as f:
        yaml.safe_dump(manifest, f)
    for relative_path, content in files.items():
        path = plugin_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return plugin_dir


@pytest.fixture
def plugins_dir(tmp_path):
    """Plugins directory with two installed plugins"""
    root = tmp_path / "plugins"
    root.mkdir()
    write_plugin(root, "hello-dolly", {
        "name": "Hello Dolly",
        "version": "1.7.2",
        "author": "Matt Mullenweg",
        "author_uri": "http://ma.tt/",
        "plugin_uri": "http://wordpress.org/plugins/hello-dolly/",
        "description": "This is not just a plugin, it symbolizes the hope of a generation.",
        "text_domain": "hello-dolly",
        "entrypoint": "hello.php",
    }, {
        "hello.php": "<?php // Hello Dolly",
        "readme.txt": "=== Hello Dolly ===",
        "includes/lyrics.php": "<?php // lyrics",
        ".gitignore": "*.log",
        ".gitattributes": "* text=auto",
        ".git/config": "[core]",
        ".git/objects/ab/cdef": "blob",
        "node_modules/left-pad/index.js": "module.exports = 1;",
    })
    write_plugin(root, "akismet", {
        "name": "Akismet Anti-Spam",
        "version": "5.3",
        "author": "Automattic",
        "entrypoint": "akismet.php",
    }, {
        "akismet.php": "<?php // Akismet",
    })
    return root


@pytest.fixture
def package_tmp_dir(tmp_path):
    path = tmp_path / "packages"
    path.mkdir()
    return path


@pytest.fixture
def update_cache():
    return FakeUpdateCache()


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def activation():
    return FakeActivationState(active=[AKISMET_ID])


@pytest.fixture
def registry(plugins_dir):
    return FilesystemPluginRegistry(plugins_dir=str(plugins_dir))


@pytest.fixture
def package_builder(plugins_dir, package_tmp_dir):
    return PackageBuilder(plugins_dir=str(plugins_dir), tmp_dir=str(package_tmp_dir))


@pytest.fixture
def app(registry, activation, update_cache, repository, package_builder):
    """Application with every host collaborator replaced"""
    from plugin_endpoints.main import app

    app.dependency_overrides[deps.get_registry] = lambda: registry
    app.dependency_overrides[deps.get_activation_state] = lambda: activation
    app.dependency_overrides[deps.get_update_cache] = lambda: update_cache
    app.dependency_overrides[deps.get_repository_client] = lambda: repository
    app.dependency_overrides[deps.get_package_builder] = lambda: package_builder

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Provide FastAPI test client"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    token = security_service.create_access_token("1", roles=["administrator"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def subscriber_headers():
    token = security_service.create_access_token("2", roles=["subscriber"])
    return {"Authorization": f"Bearer {token}"}
