from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional

from plugin_endpoints.core.casbin import CapabilityChecker, get_capability_checker
from plugin_endpoints.core.utils import ForbiddenError, UnauthorizedError
from plugin_endpoints.services.activation import ActivationState, SettingsActivationState
from plugin_endpoints.services.package_resolver import PackageResolver
from plugin_endpoints.services.packager import PackageBuilder
from plugin_endpoints.services.plugin_service import PluginService
from plugin_endpoints.services.registry import FilesystemPluginRegistry, PluginRegistry
from plugin_endpoints.services.repository_client import PackageRepository, PluginRepositoryClient
from plugin_endpoints.services.security_service import Actor, security_service
from plugin_endpoints.services.update_cache import RedisUpdateCache, UpdateCache

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Actor]:
    """Actor behind the bearer token, or None when it is missing or invalid"""
    if credentials is None:
        return None
    return security_service.actor_from_token(credentials.credentials)


def is_allowed(capability: str, message: str):
    """
    Dependency requiring a host capability.

    Callers get ``message`` either way: with 401 when unauthenticated, with
    403 when the capability is missing.
    """
    async def dependency(
        actor: Optional[Actor] = Depends(get_optional_actor),
        checker: CapabilityChecker = Depends(get_capability_checker),
    ) -> Actor:
        if actor is None:
            raise UnauthorizedError(message)
        if not checker.actor_can(actor, capability):
            raise ForbiddenError(message)
        return actor
    return dependency


# Collaborators. Each is resolved once per request and can be swapped with
# app.dependency_overrides.

def get_registry() -> PluginRegistry:
    return FilesystemPluginRegistry()


def get_activation_state() -> ActivationState:
    return SettingsActivationState()


def get_update_cache() -> UpdateCache:
    return RedisUpdateCache()


def get_repository_client() -> PackageRepository:
    return PluginRepositoryClient()


def get_package_builder() -> PackageBuilder:
    return PackageBuilder()


def get_plugin_service(
    registry: PluginRegistry = Depends(get_registry),
    activation: ActivationState = Depends(get_activation_state),
    update_cache: UpdateCache = Depends(get_update_cache),
) -> PluginService:
    return PluginService(registry, activation, update_cache)


def get_package_resolver(
    update_cache: UpdateCache = Depends(get_update_cache),
    repository: PackageRepository = Depends(get_repository_client),
    builder: PackageBuilder = Depends(get_package_builder),
) -> PackageResolver:
    return PackageResolver(update_cache, repository, builder)
