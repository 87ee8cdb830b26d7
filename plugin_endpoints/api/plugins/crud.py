"""Plugin listing, retrieval and package download"""
from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from typing import List, Optional

from plugin_endpoints.api.deps import (
    get_package_resolver,
    get_plugin_service,
    is_allowed,
)
from plugin_endpoints.config import settings
from plugin_endpoints.core.pagination import format_link_header, pagination_links
from plugin_endpoints.logger import logger
from plugin_endpoints.schemas.plugins import ErrorResponse, PluginResponse
from plugin_endpoints.services.package_resolver import PackageResolver
from plugin_endpoints.services.plugin_service import PluginService
from plugin_endpoints.services.security_service import Actor

router = APIRouter()

# download_package values that mean "not set"
FALSY_FLAGS = {"", "0"}

ERROR_RESPONSES = {
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
}


@router.get(
    "",
    name="list_plugins",
    response_model=List[PluginResponse],
    responses=ERROR_RESPONSES,
)
async def list_plugins(
    request: Request,
    response: Response,
    page: int = Query(1, ge=1, description="Current page of the collection."),
    per_page: int = Query(
        settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE,
        description="Maximum number of items to be returned in result set.",
    ),
    offset: Optional[int] = Query(None, ge=0, description="Offset the result set by a specific number of items."),
    actor: Actor = Depends(is_allowed("manage_options", "Sorry, you cannot view the list of plugins")),
    service: PluginService = Depends(get_plugin_service),
):
    """List installed plugins"""
    plugins, window = service.list(page, per_page, offset)
    collection_uri = str(request.url_for("list_plugins"))
    data = await service.serialize_collection(plugins, collection_uri)

    response.headers["X-WP-Total"] = str(window.total)
    response.headers["X-WP-TotalPages"] = str(window.max_pages)

    links = pagination_links(request.url, window)
    if links:
        response.headers["Link"] = format_link_header(links)

    return data


@router.get(
    "/{slug}",
    name="get_plugin",
    response_model=PluginResponse,
    responses={
        **ERROR_RESPONSES,
        status.HTTP_302_FOUND: {"description": "Redirect to a remote plugin package"},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def get_plugin(
    request: Request,
    slug: str = Path(..., pattern=r"^[\w-]+$"),
    download_package: Optional[str] = Query(
        None,
        description="Adding this query param with any value other than empty or 0 will initiate the plugin package download.",
    ),
    actor: Actor = Depends(is_allowed("manage_options", "Sorry, you do not have access to this resource")),
    service: PluginService = Depends(get_plugin_service),
    resolver: PackageResolver = Depends(get_package_resolver),
):
    """Get the requested plugin's info, or download its package if download_package is set"""
    plugin = service.get_by_slug(slug)

    if download_package is not None and download_package not in FALSY_FLAGS:
        logger.info(f"Package download for {plugin.file_identifier} requested by {actor.id}")
        return await resolver.resolve_and_deliver(plugin)

    collection_uri = str(request.url_for("list_plugins"))
    return await service.serialize(plugin, collection_uri, include_collection=True)


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
async def delete_plugin(
    slug: str = Path(..., pattern=r"^[\w-]+$"),
    actor: Actor = Depends(is_allowed("delete_plugins", "Sorry, you cannot delete this plugin")),
):
    """
    Delete a plugin.

    Requires: delete_plugins capability. Nothing is removed yet; the call
    only checks permissions.
    """
    logger.info(f"Delete requested for plugin '{slug}' by {actor.id}; deletion is not implemented")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
