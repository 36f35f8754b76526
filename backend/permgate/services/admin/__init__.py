from .group_service import GroupService
from .membership_service import MembershipService
from .module_service import ModuleService
from .permission_service import PermissionService
from .role_service import RoleService
from .user_service import UserService

__all__ = [
    "GroupService",
    "MembershipService",
    "ModuleService",
    "PermissionService",
    "RoleService",
    "UserService",
]
