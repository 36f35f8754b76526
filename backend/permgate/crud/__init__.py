from .association import GroupRoleRepository, RolePermissionRepository, UserGroupRepository
from .group import GroupRepository
from .module import ModuleRepository
from .permission import PermissionRepository
from .role import RoleRepository
from .store import EntityStore
from .user import UserRepository

__all__ = [
    "EntityStore",
    "UserRepository",
    "GroupRepository",
    "RoleRepository",
    "ModuleRepository",
    "PermissionRepository",
    "UserGroupRepository",
    "GroupRoleRepository",
    "RolePermissionRepository",
]
