"""
Error Translation Module
========================

Turns backend error codes into messages that can be shown to users.

Backend messages are never displayed as-is: constraint violations are
mapped to specific explanations (per entity when the same code means
different things for different tables) and anything unknown falls back
to a generic message suggesting a retry.
"""

from typing import Optional

from contacerta.core.exceptions import (
    BackendError,
    CHECK_VIOLATION,
    FOREIGN_KEY_VIOLATION,
    INSUFFICIENT_PRIVILEGE,
    INVALID_TEXT_REPRESENTATION,
    NETWORK_ERROR,
    NOT_NULL_VIOLATION,
    NO_ROWS,
    UNIQUE_VIOLATION,
)

GENERIC_ERROR_MESSAGE = "Não foi possível concluir a operação. Tente novamente."
NETWORK_ERROR_MESSAGE = "Falha de comunicação com o servidor. Verifique sua conexão e tente novamente."

# Validation messages shared by services and forms
MINISTRY_REQUIRED_MESSAGE = "Para tipo Ministério, selecione um Ministério."
NAME_REQUIRED_MESSAGE = "Nome é obrigatório."
ORGANIZATION_REQUIRED_MESSAGE = "Organização é obrigatória."
INVALID_INVITE_TOKEN_MESSAGE = "Token inválido (formato UUID esperado)."
EMPTY_INVITE_TOKEN_MESSAGE = "Por favor, informe o token do convite."


_DEFAULT_MESSAGES: dict[str, str] = {
    NOT_NULL_VIOLATION: "Dados obrigatórios ausentes.",
    FOREIGN_KEY_VIOLATION: "Referência inválida. Verifique os itens selecionados.",
    UNIQUE_VIOLATION: "Já existe um registro com estes dados.",
    CHECK_VIOLATION: "Os dados informados não são válidos para esta operação.",
    INVALID_TEXT_REPRESENTATION: "Identificador inválido.",
    INSUFFICIENT_PRIVILEGE: "Você não tem permissão para realizar esta operação.",
    NO_ROWS: "Registro não encontrado.",
    NETWORK_ERROR: NETWORK_ERROR_MESSAGE,
}

_ENTITY_MESSAGES: dict[str, dict[str, str]] = {
    "cost_centers": {
        NOT_NULL_VIOLATION: "Dados obrigatórios ausentes (verifique Nome/Ministério/Organização).",
        FOREIGN_KEY_VIOLATION: "Referência inválida (verifique o Ministério selecionado).",
        UNIQUE_VIOLATION: "Já existe um Centro de Custo para este Ministério nesta organização.",
        CHECK_VIOLATION: MINISTRY_REQUIRED_MESSAGE,
    },
    "documents": {
        FOREIGN_KEY_VIOLATION: "Referência inválida (verifique categoria, fornecedor ou membro).",
        CHECK_VIOLATION: (
            "Documentos a pagar não podem ter membro e documentos a receber "
            "não podem ter fornecedor."
        ),
    },
    "categories": {
        UNIQUE_VIOLATION: "Já existe uma categoria com este nome.",
    },
    "ministries": {
        UNIQUE_VIOLATION: "Já existe um ministério com este nome.",
    },
    "member_ministries": {
        FOREIGN_KEY_VIOLATION: "Referência inválida (verifique os ministérios selecionados).",
        UNIQUE_VIOLATION: "O membro já participa deste ministério.",
    },
    "assets": {
        FOREIGN_KEY_VIOLATION: "Referência inválida (verifique categoria ou fornecedor).",
        UNIQUE_VIOLATION: "Já existe um patrimônio com este código.",
    },
}


def translate_backend_error(error: BackendError, entity: Optional[str] = None) -> str:
    """
    Convert a backend error into a human-readable message.

    Args:
        error: Error raised by the backend collaborator
        entity: Table the operation targeted, for entity-specific wording

    Returns:
        Message safe to display
    """
    if entity:
        entity_message = _ENTITY_MESSAGES.get(entity, {}).get(error.code)
        if entity_message:
            return entity_message
    return _DEFAULT_MESSAGES.get(error.code, GENERIC_ERROR_MESSAGE)


def translate_invite_error(error: BackendError) -> str:
    """
    Convert an invite acceptance failure into a human-readable message.

    The accept_invite RPC reports its failures through the message text.
    """
    if error.code == NETWORK_ERROR:
        return NETWORK_ERROR_MESSAGE

    message = (error.message or "").lower()
    if "expired" in message:
        return "Este convite expirou. Solicite um novo convite."
    if "not found" in message or "invalid" in message or error.code == INVALID_TEXT_REPRESENTATION:
        return "Token de convite inválido. Verifique e tente novamente."
    if "permission denied" in message or error.code == INSUFFICIENT_PRIVILEGE:
        return "Você não tem permissão para aceitar este convite."
    return "Não foi possível processar o convite. Tente novamente mais tarde."
