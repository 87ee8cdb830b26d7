"""Listing, lookup and serialization of installed plugins"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from plugin_endpoints.core.pagination import PageWindow, compute_window
from plugin_endpoints.core.sanitization import sanitize_title
from plugin_endpoints.core.utils import NotFoundError
from plugin_endpoints.logger import logger
from plugin_endpoints.models import PluginRecord, PluginStatus, UpdateInfo
from plugin_endpoints.services.activation import ActivationState, get_status
from plugin_endpoints.services.registry import PluginRegistry
from plugin_endpoints.services.update_cache import UpdateCache


@dataclass(frozen=True)
class SerializationContext:
    """Values computed per request and handed to every field extractor"""
    item_uri: str
    package_uri: str
    status: PluginStatus
    update_info: Optional[UpdateInfo]


FieldExtractor = Callable[[PluginRecord, SerializationContext], Any]

# (default package uri, plugin) -> package uri
PackageUriFilter = Callable[[str, PluginRecord], str]


def _default_fields() -> "OrderedDict[str, FieldExtractor]":
    return OrderedDict([
        ("name", lambda p, ctx: p.name),
        ("plugin_uri", lambda p, ctx: p.plugin_uri),
        ("version", lambda p, ctx: p.version),
        ("description", lambda p, ctx: p.description),
        ("author", lambda p, ctx: p.author),
        ("author_uri", lambda p, ctx: p.author_uri),
        ("text_domain", lambda p, ctx: p.text_domain),
        ("domain_path", lambda p, ctx: p.domain_path),
        ("network", lambda p, ctx: p.network_flag),
        ("title", lambda p, ctx: p.title),
        ("author_name", lambda p, ctx: p.author_name),
        ("status", lambda p, ctx: ctx.status.value),
        ("update", lambda p, ctx: ctx.update_info is not None),
        ("update_version", lambda p, ctx: ctx.update_info.new_version if ctx.update_info else None),
        ("package_uri", lambda p, ctx: ctx.package_uri),
    ])


# Fields every serialized plugin carries, in output order
response_fields = _default_fields()


def register_response_field(name: str, extractor: FieldExtractor) -> None:
    """Add a field to every plugin response, or replace one in place"""
    response_fields[name] = extractor


class PluginService:
    """Read-only view over the plugin registry for the REST endpoints"""

    def __init__(
        self,
        registry: PluginRegistry,
        activation: ActivationState,
        update_cache: UpdateCache,
        package_uri_filter: Optional[PackageUriFilter] = None,
        fields: Optional["OrderedDict[str, FieldExtractor]"] = None,
    ):
        self.registry = registry
        self.activation = activation
        self.update_cache = update_cache
        self.package_uri_filter = package_uri_filter
        self.fields = OrderedDict(response_fields if fields is None else fields)

    def register_field(self, name: str, extractor: FieldExtractor) -> None:
        """Add or replace a field for this service instance only"""
        self.fields[name] = extractor

    def get_plugins(self) -> List[PluginRecord]:
        """All installed plugins in registry order"""
        return [
            PluginRecord.from_registry(file_identifier, fields)
            for file_identifier, fields in self.registry.list_installed_plugins().items()
        ]

    def list(self, page: int, per_page: int, offset: Optional[int] = None) -> tuple[List[PluginRecord], PageWindow]:
        plugins = self.get_plugins()
        window = compute_window(len(plugins), page, per_page, offset)
        return window.slice(plugins), window

    def get_by_slug(self, slug: str) -> PluginRecord:
        """First plugin whose sanitized name equals the slug"""
        for plugin in self.get_plugins():
            if sanitize_title(plugin.name) == slug:
                return plugin
        raise NotFoundError()

    @staticmethod
    def slug_for(plugin: PluginRecord) -> str:
        return sanitize_title(plugin.name)

    def package_uri(self, plugin: PluginRecord, item_uri: str) -> str:
        url = f"{item_uri}?download_package=1"
        if self.package_uri_filter is not None:
            url = self.package_uri_filter(url, plugin)
        return url

    async def serialize(self, plugin: PluginRecord, collection_uri: str, include_collection: bool = False) -> Dict[str, Any]:
        """
        Map a plugin to the public schema.

        Status and update fields are looked up now, never stored on the
        record.
        """
        item_uri = f"{collection_uri}/{self.slug_for(plugin)}"
        context = SerializationContext(
            item_uri=item_uri,
            package_uri=self.package_uri(plugin, item_uri),
            status=get_status(self.activation, plugin.file_identifier),
            update_info=await self.update_cache.get_update_info(plugin.file_identifier),
        )

        data = {name: extractor(plugin, context) for name, extractor in self.fields.items()}

        links = {"self": [{"href": item_uri}]}
        if include_collection:
            links["collection"] = [{"href": collection_uri}]
        data["_links"] = links
        return data

    async def serialize_collection(self, plugins: List[PluginRecord], collection_uri: str) -> List[Dict[str, Any]]:
        """Serialize a page of plugins; an item that fails is left out of the page"""
        items = []
        for plugin in plugins:
            try:
                items.append(await self.serialize(plugin, collection_uri))
            except Exception as e:
                logger.warning(f"Skipping plugin {plugin.file_identifier} in listing: {e}", exc_info=True)
        return items
