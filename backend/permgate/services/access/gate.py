from __future__ import annotations

import logging
from dataclasses import dataclass

from ...crud.store import EntityStore
from ...errors import AuthorizationDenied
from .policy import AccessPolicy, DecisionBasis
from .resolver import PermissionResolver

logger = logging.getLogger("permgate.gate")


@dataclass(frozen=True)
class Decision:
    allowed: bool
    basis: DecisionBasis
    module: str
    action: str
    reason: str | None = None


def denial_reason(module: str, action: str) -> str:
    return f"Access denied: {action} on {module}"


class AuthorizationGate:
    """Answers allow/deny for a (user, module, action) query.

    Stateless: each call performs one read of the current graph through the
    resolver. Granted permissions are consulted first; the policy overrides
    then turn a deny into an allow. An unknown or deleted module grants
    nothing but is still subject to the overrides.
    """

    def __init__(self, store: EntityStore, policy: AccessPolicy | None = None):
        self.store = store
        self.policy = policy or AccessPolicy()
        self.resolver = PermissionResolver(store)

    async def _granted(self, user_id: int, module_name: str, action: str) -> bool:
        module = await self.store.modules.get_by_name(module_name)
        if module is None:
            return False
        permissions = await self.resolver.effective_permissions_for_module(user_id, module.id)
        return any(permission.action == action for permission in permissions)

    async def decide(self, user_id: int, module_name: str, action: str) -> Decision:
        if await self._granted(user_id, module_name, action):
            return Decision(True, DecisionBasis.GRANT, module_name, action)

        override = self.policy.override_for(user_id, action)
        if override is not None:
            logger.info(
                "Access allowed by override: rule=%s user_id=%s module=%s action=%s",
                override.value,
                user_id,
                module_name,
                action,
            )
            return Decision(True, override, module_name, action)

        reason = denial_reason(module_name, action)
        logger.warning(
            "Access denied: user_id=%s module=%s action=%s", user_id, module_name, action
        )
        return Decision(False, DecisionBasis.DENIED, module_name, action, reason)

    async def require(self, user_id: int, module_name: str, action: str) -> Decision:
        decision = await self.decide(user_id, module_name, action)
        if not decision.allowed:
            raise AuthorizationDenied(module_name, action, decision.reason)
        return decision
