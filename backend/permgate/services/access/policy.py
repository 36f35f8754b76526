"""Override rules layered on top of granted permissions.

Two overrides have always been part of the gate's observed behaviour and are
kept as named, switchable rules rather than dropped:

- READ_BYPASS: any action literally equal to ``"read"`` is allowed for any
  authenticated subject, whatever the graph says.
- ADMIN_BYPASS: the bootstrap identity (id 1 by default) is allowed
  everything.

Both look like development shortcuts more than intended policy. They stay on
by default so existing deployments keep their behaviour; turn them off with
``READ_BYPASS_ENABLED=false`` and an empty ``ADMIN_BYPASS_USER_ID``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

READ_ACTION: Final[str] = "read"
BOOTSTRAP_ADMIN_ID: Final[int] = 1


class DecisionBasis(str, Enum):
    GRANT = "grant"
    READ_BYPASS = "read_bypass"
    ADMIN_BYPASS = "admin_bypass"
    DENIED = "denied"


@dataclass(frozen=True)
class AccessPolicy:
    read_bypass_enabled: bool = True
    admin_bypass_user_id: int | None = BOOTSTRAP_ADMIN_ID

    @classmethod
    def from_settings(cls, settings) -> "AccessPolicy":
        return cls(
            read_bypass_enabled=settings.read_bypass_enabled,
            admin_bypass_user_id=settings.admin_bypass_user_id,
        )

    @classmethod
    def strict(cls) -> "AccessPolicy":
        return cls(read_bypass_enabled=False, admin_bypass_user_id=None)

    def override_for(self, user_id: int, action: str) -> DecisionBasis | None:
        if self.read_bypass_enabled and action == READ_ACTION:
            return DecisionBasis.READ_BYPASS
        if self.admin_bypass_user_id is not None and user_id == self.admin_bypass_user_id:
            return DecisionBasis.ADMIN_BYPASS
        return None

    @property
    def active_overrides(self) -> list[str]:
        active = []
        if self.read_bypass_enabled:
            active.append(DecisionBasis.READ_BYPASS.value)
        if self.admin_bypass_user_id is not None:
            active.append(DecisionBasis.ADMIN_BYPASS.value)
        return active
