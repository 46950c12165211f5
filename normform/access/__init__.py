"""Role-based access checks."""

from normform.access.permissions import (
    OWNING_FIELDS,
    ROLE_PERMISSIONS,
    Permission,
    Role,
    assign_owner,
    has_permission,
    owning_field,
    parse_role,
    permissions_for,
)

__all__ = [
    "OWNING_FIELDS",
    "ROLE_PERMISSIONS",
    "Permission",
    "Role",
    "assign_owner",
    "has_permission",
    "owning_field",
    "parse_role",
    "permissions_for",
]
