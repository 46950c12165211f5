"""Role capability table.

Every visibility or edit decision goes through has_permission(); screens
never compare role names themselves.
"""

from enum import Enum


class Role(str, Enum):
    """User roles."""

    ADMIN = "admin"
    PSYCHOLOGIST = "psychologist"
    PSYCHOMETRICIAN = "psychometrician"
    PATIENT = "patient"


class Permission(str, Enum):
    """Actions gated by role."""

    VIEW_OWN_RECORDS = "view_own_records"
    VIEW_PATIENT_RECORDS = "view_patient_records"
    CREATE_TEST = "create_test"
    EDIT_TEST = "edit_test"
    ADD_REMARKS = "add_remarks"
    EDIT_INTERPRETATION = "edit_interpretation"
    EDIT_PSYCHOLOGIST_REPORT = "edit_psychologist_report"
    EDIT_ANY_REPORT = "edit_any_report"
    ASSIGN_PSYCHOLOGIST = "assign_psychologist"
    MANAGE_APPOINTMENTS = "manage_appointments"
    BOOK_APPOINTMENT = "book_appointment"
    MANAGE_STAFF = "manage_staff"
    VIEW_AUDIT_LOGS = "view_audit_logs"


_STAFF_CLINICAL = frozenset(
    {
        Permission.VIEW_PATIENT_RECORDS,
        Permission.CREATE_TEST,
    }
)

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: _STAFF_CLINICAL
    | {
        Permission.EDIT_TEST,
        Permission.ADD_REMARKS,
        Permission.EDIT_INTERPRETATION,
        Permission.EDIT_PSYCHOLOGIST_REPORT,
        Permission.EDIT_ANY_REPORT,
        Permission.ASSIGN_PSYCHOLOGIST,
        Permission.MANAGE_APPOINTMENTS,
        Permission.MANAGE_STAFF,
        Permission.VIEW_AUDIT_LOGS,
    },
    Role.PSYCHOLOGIST: _STAFF_CLINICAL
    | {
        Permission.ADD_REMARKS,
        Permission.EDIT_INTERPRETATION,
        Permission.EDIT_PSYCHOLOGIST_REPORT,
        Permission.ASSIGN_PSYCHOLOGIST,
    },
    Role.PSYCHOMETRICIAN: _STAFF_CLINICAL
    | {
        Permission.EDIT_TEST,
        Permission.MANAGE_APPOINTMENTS,
    },
    Role.PATIENT: frozenset(
        {
            Permission.VIEW_OWN_RECORDS,
            Permission.BOOK_APPOINTMENT,
        }
    ),
}

# Record field that stores the submitting user, by role.
OWNING_FIELDS: dict[Role, str] = {
    Role.PSYCHOLOGIST: "psychologist_id",
    Role.PSYCHOMETRICIAN: "psychometrician_id",
}


def parse_role(role: Role | str | None) -> Role | None:
    """Parse a stored role name; unknown or missing roles give None."""
    if role is None:
        return None
    if isinstance(role, Role):
        return role
    try:
        return Role(role.strip().lower())
    except ValueError:
        return None


def permissions_for(role: Role | str | None) -> frozenset[Permission]:
    """All permissions of a role. Unknown roles have none."""
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def has_permission(role: Role | str | None, action: Permission | str) -> bool:
    """Check whether a role may perform an action."""
    try:
        permission = Permission(action)
    except ValueError:
        return False
    return permission in permissions_for(role)


def owning_field(role: Role | str | None) -> str | None:
    """Record field a submitting user is written to, or None for other roles."""
    parsed = parse_role(role)
    if parsed is None:
        return None
    return OWNING_FIELDS.get(parsed)


def assign_owner(record: dict, role: Role | str | None, user_id: str) -> dict:
    """Return a copy of a record with the submitting user in its owning field."""
    field = owning_field(role)
    if field is None:
        return dict(record)
    return {**record, field: user_id}
