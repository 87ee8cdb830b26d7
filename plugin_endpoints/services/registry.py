"""Installed plugin registry"""
import yaml
from pathlib import Path
from typing import Any, Dict, Protocol

from plugin_endpoints.config import settings
from plugin_endpoints.logger import logger


class PluginRegistry(Protocol):
    """Enumerates installed plugins, keyed by file identifier"""

    def list_installed_plugins(self) -> Dict[str, Dict[str, Any]]:
        ...


class FilesystemPluginRegistry:
    """
    Registry backed by a plugins directory.

    Every direct subdirectory holding a manifest (``plugin.yaml`` by default)
    is one installed plugin. The manifest carries the plugin headers::

        name: Hello Dolly
        version: 1.7.2
        author: Matt Mullenweg
        entrypoint: hello.php

    The file identifier is ``<directory>/<entrypoint>``; ``entrypoint``
    defaults to the manifest file itself. Plugins are returned sorted by
    identifier so listings are stable between requests.
    """

    def __init__(self, plugins_dir: str = None, manifest_name: str = None):
        self.plugins_dir = Path(plugins_dir or settings.PLUGINS_DIR)
        self.manifest_name = manifest_name or settings.PLUGIN_MANIFEST_NAME

    def list_installed_plugins(self) -> Dict[str, Dict[str, Any]]:
        plugins: Dict[str, Dict[str, Any]] = {}
        if not self.plugins_dir.is_dir():
            logger.warning(f"Plugins directory does not exist: {self.plugins_dir}")
            return plugins

        for plugin_dir in sorted(p for p in self.plugins_dir.iterdir() if p.is_dir()):
            manifest_path = plugin_dir / self.manifest_name
            if not manifest_path.is_file():
                continue

            try:
                with open(manifest_path, "r", encoding="utf-8") as f:
                    manifest = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Skipping plugin with unreadable manifest {manifest_path}: {e}")
                continue

            if not isinstance(manifest, dict) or not manifest.get("name"):
                logger.warning(f"Skipping plugin manifest without a name: {manifest_path}")
                continue

            entrypoint = str(manifest.get("entrypoint") or self.manifest_name)
            if "/" in entrypoint or "\\" in entrypoint:
                logger.warning(f"Skipping plugin with entrypoint outside its directory: {manifest_path}")
                continue

            plugins[f"{plugin_dir.name}/{entrypoint}"] = manifest

        return dict(sorted(plugins.items()))
