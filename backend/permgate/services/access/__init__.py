from .gate import AuthorizationGate, Decision
from .policy import AccessPolicy, DecisionBasis
from .resolver import PermissionResolver

__all__ = [
    "AccessPolicy",
    "AuthorizationGate",
    "Decision",
    "DecisionBasis",
    "PermissionResolver",
]
