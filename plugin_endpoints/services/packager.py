"""Builds plugin package archives from the local plugins directory"""
import os
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Tuple

from plugin_endpoints.config import settings
from plugin_endpoints.core.sanitization import sanitize_file_name
from plugin_endpoints.core.utils import ArchiveOpenError, PackageUnavailableError
from plugin_endpoints.logger import logger
from plugin_endpoints.models import PluginRecord

# (is_excluded, file path, directory relative to the plugin root) -> is_excluded
ExclusionOverride = Callable[[bool, Path, str], bool]


@dataclass(frozen=True)
class GeneratedPackage:
    """A zip archive built for a single request"""
    path: Path
    filename: str
    size: int


class PackageBuilder:
    """Zips a plugin directory, leaving out VCS and dependency-cache files"""

    def __init__(
        self,
        plugins_dir: str = None,
        tmp_dir: str = None,
        directory_excludes: Optional[Iterable[str]] = None,
        file_excludes: Optional[Iterable[str]] = None,
        exclusion_override: Optional[ExclusionOverride] = None,
    ):
        self.plugins_dir = Path(plugins_dir or settings.PLUGINS_DIR)
        self.tmp_dir = Path(tmp_dir or settings.PACKAGE_TMP_DIR)
        self.directory_excludes = [
            d.strip("/") for d in (settings.PACKAGE_DIRECTORY_EXCLUDES if directory_excludes is None else directory_excludes)
            if d.strip("/")
        ]
        self.file_excludes = set(settings.PACKAGE_FILE_EXCLUDES if file_excludes is None else file_excludes)
        self.exclusion_override = exclusion_override

    def plugin_path(self, plugin: PluginRecord) -> Path:
        return self.plugins_dir / plugin.directory_name

    def directory_excluded(self, relative_dir: str) -> bool:
        """True when any segment run of relative_dir matches a directory exclusion"""
        wrapped = "/" + "/".join(p for p in relative_dir.split("/") if p) + "/"
        return any(f"/{directory}/" in wrapped for directory in self.directory_excludes)

    def is_excluded(self, file_path: Path, relative_dir: str) -> bool:
        """
        Decide whether a file is left out of the package.

        Args:
            file_path: Path of the file on disk
            relative_dir: Its directory relative to the plugin root, "" for the root

        Returns:
            True when the file must not be archived
        """
        excluded = self.directory_excluded(relative_dir)

        if file_path.name in self.file_excludes:
            excluded = True

        if self.exclusion_override is not None:
            return bool(self.exclusion_override(excluded, file_path, relative_dir))
        return excluded

    def iter_package_files(self, root: Path, archive_root: Optional[str] = None) -> Iterator[Tuple[Path, str]]:
        """
        Yield (file path, archive name) for every file that belongs in the package.

        Archive names start with ``archive_root``, the directory name by default.
        """
        archive_root = archive_root or root.name
        for current, dirs, files in os.walk(root):
            relative_dir = Path(current).relative_to(root).as_posix()
            if relative_dir == ".":
                relative_dir = ""
            dirs.sort()

            if self.exclusion_override is None:
                # Nothing can re-include a file below an excluded directory
                dirs[:] = [d for d in dirs if not self.directory_excluded(f"{relative_dir}/{d}")]

            for filename in sorted(files):
                file_path = Path(current) / filename
                if self.is_excluded(file_path, relative_dir):
                    continue
                relative_path = f"{relative_dir}/{filename}" if relative_dir else filename
                yield file_path, f"{archive_root}/{relative_path}"

    def build(self, plugin: PluginRecord) -> GeneratedPackage:
        """
        Create a zip archive of the plugin directory.

        The archive root is the plugin directory as named in its identifier. The caller owns
        the returned file and must delete it.

        Raises:
            PackageUnavailableError: The plugin directory does not exist
            ArchiveOpenError: The archive could not be written
        """
        root = self.plugin_path(plugin)
        if plugin.directory_name == "." or not root.is_dir():
            logger.warning(f"Plugin directory not found for {plugin.file_identifier}: {root}")
            raise PackageUnavailableError(plugin.name)

        try:
            self.tmp_dir.mkdir(parents=True, exist_ok=True)
            fd, archive_name = tempfile.mkstemp(prefix=f"{root.name}-", suffix=".zip", dir=self.tmp_dir)
            os.close(fd)
        except OSError as e:
            logger.error(f"Cannot create package archive in {self.tmp_dir}: {e}")
            raise ArchiveOpenError(str(self.tmp_dir / root.name), str(e))

        archive_path = Path(archive_name)
        count = 0
        try:
            with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for file_path, arcname in self.iter_package_files(root, plugin.directory_name):
                    zf.write(file_path, arcname)
                    count += 1
        except (OSError, zipfile.BadZipFile) as e:
            archive_path.unlink(missing_ok=True)
            logger.error(f"Failed to write package archive for {plugin.file_identifier}: {e}")
            raise ArchiveOpenError(str(archive_path), str(e))

        filename = sanitize_file_name(f"{plugin.name} {plugin.version}") + ".zip"
        size = archive_path.stat().st_size
        logger.info(f"Generated package {archive_path} for {plugin.file_identifier} ({count} files, {size} bytes)")
        return GeneratedPackage(path=archive_path, filename=filename, size=size)
