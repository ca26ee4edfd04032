"""
Error Translation Unit Tests
============================

Tests for translate_backend_error and translate_invite_error.
"""

import pytest

from contacerta.core.error_messages import (
    GENERIC_ERROR_MESSAGE,
    MINISTRY_REQUIRED_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    translate_backend_error,
    translate_invite_error,
)
from contacerta.core.exceptions import (
    BackendError,
    CHECK_VIOLATION,
    INSUFFICIENT_PRIVILEGE,
    INVALID_TEXT_REPRESENTATION,
    NETWORK_ERROR,
    RAISE_EXCEPTION,
    UNIQUE_VIOLATION,
)


pytestmark = pytest.mark.unit


class TestTranslateBackendError:
    """Tests for translate_backend_error."""

    def test_cost_center_unique_violation(self):
        """Test the entity-specific wording for a duplicated ministry cost center."""
        # Arrange
        error = BackendError(UNIQUE_VIOLATION, "duplicate key value violates unique constraint")

        # Act
        message = translate_backend_error(error, "cost_centers")

        # Assert
        assert message == "Já existe um Centro de Custo para este Ministério nesta organização."

    def test_cost_center_check_violation(self):
        # Act
        message = translate_backend_error(BackendError(CHECK_VIOLATION, "check"), "cost_centers")

        # Assert
        assert message == MINISTRY_REQUIRED_MESSAGE

    def test_default_message_without_entity_override(self):
        """Test that tables without overrides get the default wording."""
        # Act
        message = translate_backend_error(BackendError(UNIQUE_VIOLATION, "dup"), "suppliers")

        # Assert
        assert message == "Já existe um registro com estes dados."

    def test_permission_denied(self):
        # Act
        message = translate_backend_error(BackendError(INSUFFICIENT_PRIVILEGE, "rls"))

        # Assert
        assert "permissão" in message

    def test_network_error(self):
        # Assert
        assert translate_backend_error(BackendError(NETWORK_ERROR, "timeout")) == NETWORK_ERROR_MESSAGE

    def test_unknown_code_falls_back_to_generic(self):
        """Test that backend messages are never shown as-is."""
        # Act
        message = translate_backend_error(BackendError("XX000", "internal: stack trace"))

        # Assert
        assert message == GENERIC_ERROR_MESSAGE
        assert "stack trace" not in message


class TestTranslateInviteError:
    """Tests for translate_invite_error."""

    def test_expired(self):
        # Act
        message = translate_invite_error(BackendError(RAISE_EXCEPTION, "invite expired"))

        # Assert
        assert "expirou" in message

    def test_not_found(self):
        # Act
        message = translate_invite_error(BackendError(RAISE_EXCEPTION, "invite not found or invalid"))

        # Assert
        assert "inválido" in message

    def test_malformed_token(self):
        # Act
        message = translate_invite_error(BackendError(INVALID_TEXT_REPRESENTATION, "invalid input syntax"))

        # Assert
        assert "inválido" in message

    def test_permission_denied(self):
        # Act
        message = translate_invite_error(BackendError(INSUFFICIENT_PRIVILEGE, "permission denied"))

        # Assert
        assert "permissão" in message

    def test_network(self):
        # Assert
        assert translate_invite_error(BackendError(NETWORK_ERROR, "down")) == NETWORK_ERROR_MESSAGE
