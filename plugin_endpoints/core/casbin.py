import casbin
from functools import lru_cache
from plugin_endpoints.config import settings
from plugin_endpoints.services.security_service import Actor


class CapabilityChecker:
    """
    Answers "can this actor do X" for host capabilities such as
    ``manage_options`` and ``delete_plugins``.

    Policies grant capabilities to roles (or directly to actor ids) and may
    nest roles through ``g`` rules.
    """

    def __init__(self, enforcer: casbin.Enforcer):
        self.enforcer = enforcer

    def actor_can(self, actor: Actor, capability: str) -> bool:
        if self.enforcer.enforce(actor.id, capability):
            return True
        return any(self.enforcer.enforce(role, capability) for role in actor.roles)


@lru_cache
def get_enforcer() -> casbin.Enforcer:
    """Load the capability model and policy once per process"""
    return casbin.Enforcer(settings.RBAC_MODEL_PATH, settings.RBAC_POLICY_PATH)


def get_capability_checker() -> CapabilityChecker:
    return CapabilityChecker(get_enforcer())
