"""Domain types for installed plugins"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional
import enum


class PluginStatus(str, enum.Enum):
    ACTIVE_NETWORK = "active-network"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class PluginRecord:
    """
    One installed plugin as reported by the registry.

    ``file_identifier`` is the registry key, ``<directory>/<main file>``.
    """
    file_identifier: str
    name: str
    plugin_uri: str = ""
    version: str = ""
    description: str = ""
    author: str = ""
    author_uri: str = ""
    text_domain: str = ""
    domain_path: str = ""
    network_flag: str = ""
    title: str = ""
    author_name: str = ""

    @property
    def directory_name(self) -> str:
        """Directory part of the identifier (``.`` for single-file plugins)"""
        head, sep, _ = self.file_identifier.rpartition("/")
        return head if sep else "."

    @classmethod
    def from_registry(cls, file_identifier: str, fields: Mapping[str, Any]) -> "PluginRecord":
        """Build a record from a registry entry (header-style or snake_case keys)"""
        def pick(*keys: str) -> str:
            for key in keys:
                value = fields.get(key)
                if value is not None:
                    return str(value)
            return ""

        name = pick("Name", "name")
        author = pick("Author", "author")
        return cls(
            file_identifier=file_identifier,
            name=name,
            plugin_uri=pick("PluginURI", "plugin_uri"),
            version=pick("Version", "version"),
            description=pick("Description", "description"),
            author=author,
            author_uri=pick("AuthorURI", "author_uri"),
            text_domain=pick("TextDomain", "text_domain"),
            domain_path=pick("DomainPath", "domain_path"),
            network_flag=pick("Network", "network"),
            title=pick("Title", "title") or name,
            author_name=pick("AuthorName", "author_name") or author,
        )


@dataclass(frozen=True)
class UpdateInfo:
    """Cached result of an update check for one plugin"""
    new_version: Optional[str] = None
    package: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UpdateInfo":
        return cls(
            new_version=data.get("new_version"),
            package=data.get("package") or None,
        )
