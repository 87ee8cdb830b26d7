"""Resolves and delivers a downloadable plugin package"""
import re
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import quote

from fastapi import status
from fastapi.responses import RedirectResponse, StreamingResponse
from starlette.background import BackgroundTask

from plugin_endpoints.logger import logger
from plugin_endpoints.models import PluginRecord
from plugin_endpoints.services.packager import GeneratedPackage, PackageBuilder
from plugin_endpoints.services.repository_client import PackageRepository
from plugin_endpoints.services.update_cache import UpdateCache

CHUNK_SIZE = 64 * 1024


def stream_and_delete(path: Path, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the file's bytes, then delete it however the iteration ends"""
    try:
        with open(path, "rb") as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                yield chunk
    finally:
        path.unlink(missing_ok=True)
        logger.debug(f"Deleted generated package {path}")


def content_disposition(filename: str) -> str:
    """
    Attachment header for a download name.

    Header values are latin-1, so names outside ASCII are sent as an RFC 5987
    ``filename*`` next to an ASCII-only ``filename``.
    """
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    fallback = re.sub(r"-+", "-", filename.encode("ascii", "ignore").decode("ascii"))
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quoted}"


def download_headers(package: GeneratedPackage) -> dict:
    return {
        "Content-Description": "File Transfer",
        "Content-Disposition": content_disposition(package.filename),
        "Content-Transfer-Encoding": "binary",
        "Expires": "0",
        "Cache-Control": "must-revalidate, post-check=0, pre-check=0",
        "Pragma": "public",
        "Content-Length": str(package.size),
    }


class PackageResolver:
    """
    Finds a package for a plugin and hands it to the caller.

    Order: cached update package URL, then the remote repository, then a
    zip generated from the local plugin directory.
    """

    def __init__(self, update_cache: UpdateCache, repository: PackageRepository, builder: PackageBuilder):
        self.update_cache = update_cache
        self.repository = repository
        self.builder = builder

    async def cached_package_url(self, plugin: PluginRecord) -> Optional[str]:
        update_info = await self.update_cache.get_update_info(plugin.file_identifier)
        if update_info is not None and update_info.package:
            return update_info.package
        return None

    async def remote_package_url(self, plugin: PluginRecord) -> Optional[str]:
        """Package URL from the update cache, falling back to the repository API"""
        package_url = await self.cached_package_url(plugin)
        if package_url:
            logger.info(f"Using cached update package for {plugin.file_identifier}")
            return package_url

        package_url = await self.repository.query_package_info(plugin.directory_name)
        if package_url:
            logger.info(f"Using repository package for {plugin.file_identifier}")
        return package_url

    async def resolve_and_deliver(self, plugin: PluginRecord):
        """
        Deliver the plugin's package.

        Returns:
            A redirect to a remote package, or a streamed zip that is deleted
            once sent

        Raises:
            PackageUnavailableError: No remote package and no local directory
            ArchiveOpenError: The zip could not be written
        """
        package_url = await self.remote_package_url(plugin)
        if package_url:
            return RedirectResponse(url=package_url, status_code=status.HTTP_302_FOUND)

        package = self.builder.build(plugin)
        try:
            return StreamingResponse(
                stream_and_delete(package.path),
                media_type="application/octet-stream",
                headers=download_headers(package),
                # Covers a stream that was never started
                background=BackgroundTask(package.path.unlink, missing_ok=True),
            )
        except Exception:
            package.path.unlink(missing_ok=True)
            raise
