"""Client for the remote plugin repository API"""
import httpx
from typing import Optional, Protocol

from plugin_endpoints.config import settings
from plugin_endpoints.logger import logger

# Fields the repository would otherwise return; only the download link is needed
SUPPRESSED_FIELDS = (
    "short_description",
    "description",
    "sections",
    "tested",
    "requires",
    "rating",
    "ratings",
    "downloaded",
    "downloadlink",
    "last_updated",
    "added",
    "tags",
    "compatibility",
    "homepage",
    "versions",
    "donate_link",
    "reviews",
    "banners",
    "icons",
    "active_installs",
    "group",
    "contributors",
)


class PackageRepository(Protocol):
    async def query_package_info(self, slug: str) -> Optional[str]:
        ...


class PluginRepositoryClient:
    """Looks up plugin download links on the remote repository"""

    def __init__(self, base_url: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url or settings.PLUGIN_REPOSITORY_URL
        self.timeout = timeout if timeout is not None else settings.PLUGIN_REPOSITORY_TIMEOUT
        self.transport = transport

    @staticmethod
    def build_params(slug: str) -> dict:
        params = {
            "action": "plugin_information",
            "request[slug]": slug,
            "request[is_ssl]": 1,
        }
        for field in SUPPRESSED_FIELDS:
            params[f"request[fields][{field}]"] = 0
        return params

    async def query_package_info(self, slug: str) -> Optional[str]:
        """
        Ask the repository for a plugin's package.

        Returns:
            The ``download_link`` or None when the plugin is unknown or the
            repository cannot be reached
        """
        if not slug or slug == ".":
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.base_url, params=self.build_params(slug))
        except httpx.HTTPError as e:
            logger.warning(f"Plugin repository request for '{slug}' failed: {e}")
            return None

        if response.status_code != 200:
            logger.info(f"Plugin repository has no package for '{slug}' (HTTP {response.status_code})")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Plugin repository returned invalid JSON for '{slug}'")
            return None

        if not isinstance(data, dict) or data.get("error"):
            return None

        return data.get("download_link") or None
