"""
Role-Based Access Control Module
================================

Permission checks for organization memberships.

Roles are not strictly hierarchical: treasury, secretary and accountant
members all edit the organization's records, only owners and admins
manage access, and read-only members never write.

Usage:
    if not can_write(membership.role):
        raise BackendError(INSUFFICIENT_PRIVILEGE, "permission denied")
"""

from typing import FrozenSet, Union

from contacerta.models.role_enum import Role


# =====================================
# Role Sets
# =====================================

ACCESS_MANAGER_ROLES: FrozenSet[Role] = frozenset({Role.OWNER, Role.ADMIN})

WRITER_ROLES: FrozenSet[Role] = frozenset({
    Role.OWNER,
    Role.ADMIN,
    Role.TREASURY,
    Role.SECRETARY,
    Role.ACCOUNTANT,
})

ROLE_LABELS: dict[Role, str] = {
    Role.OWNER: "Proprietário",
    Role.ADMIN: "Administrador",
    Role.TREASURY: "Tesouraria",
    Role.SECRETARY: "Secretaria",
    Role.ACCOUNTANT: "Contador",
    Role.READ_ONLY: "Leitura",
}


def _as_role(role: Union[Role, str]) -> Role:
    return role if isinstance(role, Role) else Role(role)


def can_write(role: Union[Role, str]) -> bool:
    """
    Check if a member may create, update or delete organization records.

    Args:
        role: Member's role in the organization

    Returns:
        True unless the role is read-only
    """
    return _as_role(role) in WRITER_ROLES


def can_manage_access(role: Union[Role, str]) -> bool:
    """Check if a member may issue invites for the organization."""
    return _as_role(role) in ACCESS_MANAGER_ROLES


def role_label(role: Union[Role, str]) -> str:
    """Human-readable (pt-BR) name of a role; unknown values are echoed back."""
    try:
        return ROLE_LABELS[_as_role(role)]
    except ValueError:
        return str(role)
