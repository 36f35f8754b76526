from .base import Base
from .user import User
from .group import Group
from .role import Role
from .module import Module
from .permission import Permission
from .user_group import UserGroup
from .group_role import GroupRole
from .role_permission import RolePermission

__all__ = [
    "Base",
    "User",
    "Group",
    "Role",
    "Module",
    "Permission",
    "UserGroup",
    "GroupRole",
    "RolePermission",
]
