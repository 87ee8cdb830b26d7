"""Pydantic schemas for the Plugin API"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class Link(BaseModel):
    href: str


class PluginResponse(BaseModel):
    """Schema for a serialized plugin"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="The name of the plugin.")
    plugin_uri: str = Field("", description="The uri of the plugin.")
    version: str = Field("", description="The plugin version.")
    description: str = Field("", description="A short description of the plugin.")
    author: str = Field("", description="Name of plugin author.")
    author_uri: str = Field("", description="Plugin author uri.")
    text_domain: str = Field("", description="Plugin text domain.")
    domain_path: str = Field("", description="Path for text domain.")
    network: str = Field(
        "",
        description=(
            "Whether the plugin is forced to be active on the network via plugin headers. "
            "This does not indicate whether the plugin is active on the network."
        ),
    )
    title: str = Field("", description="The title for the resource.")
    author_name: str = Field("", description="Name of plugin author.")
    status: str = Field("inactive", description="Whether plugin is active on the site or the network.")
    update: bool = Field(False, description="Whether plugin has an available update.")
    update_version: Optional[str] = Field(None, description="The version available if plugin has an available update.")
    package_uri: str = Field("", description="Plugin package download URI.")
    links: Dict[str, List[Link]] = Field(default_factory=dict, alias="_links")


class ErrorResponse(BaseModel):
    """Schema for structured API errors"""
    code: str
    message: str
    data: Dict[str, int]
