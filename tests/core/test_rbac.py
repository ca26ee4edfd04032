"""
Role-Based Access Control (RBAC) Unit Tests
============================================

Tests for role permissions including:
- Write permission per role
- Access management (invites) per role
- pt-BR role labels
"""

import pytest

from contacerta.core.rbac import (
    ACCESS_MANAGER_ROLES,
    WRITER_ROLES,
    can_manage_access,
    can_write,
    role_label,
)
from contacerta.models.role_enum import Role


pytestmark = pytest.mark.unit


class TestRoleValues:
    """Tests for the role wire values."""

    def test_wire_values(self):
        """Test that roles serialize to the values stored by the backend."""
        # Assert
        assert [role.value for role in Role] == [
            "OWNER",
            "ADMIN",
            "TESOURARIA",
            "SECRETARIA",
            "CONTADOR",
            "LEITURA",
        ]

    def test_every_role_but_read_only_writes(self):
        """Test the writer role set."""
        # Assert
        assert WRITER_ROLES == frozenset(Role) - {Role.READ_ONLY}


class TestCanWrite:
    """Tests for can_write."""

    @pytest.mark.parametrize("role", [Role.OWNER, Role.ADMIN, Role.TREASURY, Role.SECRETARY, Role.ACCOUNTANT])
    def test_writers(self, role: Role):
        # Assert
        assert can_write(role) is True

    def test_read_only_cannot_write(self):
        # Assert
        assert can_write(Role.READ_ONLY) is False

    def test_accepts_wire_value(self):
        """Test that a raw wire string is accepted."""
        # Assert
        assert can_write("TESOURARIA") is True
        assert can_write("LEITURA") is False


class TestCanManageAccess:
    """Tests for can_manage_access."""

    def test_owner_and_admin_manage_access(self):
        # Assert
        assert ACCESS_MANAGER_ROLES == {Role.OWNER, Role.ADMIN}
        assert can_manage_access(Role.OWNER)
        assert can_manage_access(Role.ADMIN)

    @pytest.mark.parametrize("role", [Role.TREASURY, Role.SECRETARY, Role.ACCOUNTANT, Role.READ_ONLY])
    def test_other_roles_do_not(self, role: Role):
        # Assert
        assert can_manage_access(role) is False


class TestRoleLabel:
    """Tests for role_label."""

    def test_known_roles_have_labels(self):
        # Assert
        assert role_label(Role.TREASURY) == "Tesouraria"
        assert role_label("LEITURA") == "Leitura"

    def test_unknown_value_is_echoed(self):
        # Assert
        assert role_label("PASTOR") == "PASTOR"
