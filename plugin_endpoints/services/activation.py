"""Plugin activation state"""
from typing import Iterable, Optional, Protocol

from plugin_endpoints.config import settings
from plugin_endpoints.models import PluginStatus


class ActivationState(Protocol):
    def is_active(self, file_identifier: str) -> bool:
        ...

    def is_active_for_network(self, file_identifier: str) -> bool:
        ...


class SettingsActivationState:
    """Activation state read from the ACTIVE_PLUGINS / NETWORK_ACTIVE_PLUGINS settings"""

    def __init__(self, active: Optional[Iterable[str]] = None, network_active: Optional[Iterable[str]] = None):
        self.network_active = set(settings.NETWORK_ACTIVE_PLUGINS if network_active is None else network_active)
        self.active = set(settings.ACTIVE_PLUGINS if active is None else active)

    def is_active_for_network(self, file_identifier: str) -> bool:
        return file_identifier in self.network_active

    def is_active(self, file_identifier: str) -> bool:
        # Network activation implies activation on every site
        return file_identifier in self.active or self.is_active_for_network(file_identifier)


def get_status(activation: ActivationState, file_identifier: str) -> PluginStatus:
    """Get the plugin's status in the network/site"""
    if activation.is_active_for_network(file_identifier):
        return PluginStatus.ACTIVE_NETWORK

    if activation.is_active(file_identifier):
        return PluginStatus.ACTIVE

    return PluginStatus.INACTIVE
