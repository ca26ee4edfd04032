"""
Form Controller Module
======================

Draft editing and submission for create/edit forms.

The draft survives a failed submission so the user can fix it and try
again, and a second submission while one is in flight is refused.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import ValidationError

from contacerta.core.enums import CostCenterKind, DocumentStatus, DocumentType, RecordStatus
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.schemas.cost_center import CostCenterCreate, CostCenterUpdate
from contacerta.schemas.document import DocumentCreate, DocumentUpdate, party_from_ids
from contacerta.services.base import VALIDATION_FAILED
from contacerta.utils.currency import parse_cents_from_masked

# Initialize logger
logger = get_logger(__name__)

D = TypeVar("D")

REQUIRED_FIELDS_MESSAGE = "Preencha os campos obrigatórios."
SUBMISSION_IN_PROGRESS_MESSAGE = "Aguarde: o envio anterior ainda está em andamento."


class FormController(Generic[D]):
    """
    Holds a draft and submits it.

    Args:
        draft: Mutable draft object
        submit: Coroutine function receiving the draft and returning a
            ServiceResult

    Usage:
        form = FormController(CostCenterDraft(organization_id=org_id), submit_cost_center)
        form.draft.switch_kind(CostCenterKind.EVENT)
        form.draft.name = "Retiro 2025"
        result = await form.submit()
    """

    def __init__(self, draft: D, submit: Callable[[D], Awaitable[ServiceResult]]):
        self.draft = draft
        self._submit = submit
        self.submitting = False
        self.error: Optional[str] = None

    async def submit(self) -> ServiceResult:
        if self.submitting:
            return ServiceResult.failure(SUBMISSION_IN_PROGRESS_MESSAGE, VALIDATION_FAILED)

        self.submitting = True
        self.error = None
        try:
            result = await self._submit(self.draft)
        except ValidationError as e:
            logger.debug("form_validation_failed", errors=e.error_count())
            result = ServiceResult.failure(REQUIRED_FIELDS_MESSAGE, VALIDATION_FAILED)
        finally:
            self.submitting = False

        if not result.ok:
            self.error = result.error
        return result


# ==========================
# Cost Center Draft
# ==========================

@dataclass
class CostCenterDraft:
    organization_id: Optional[UUID] = None
    kind: CostCenterKind = CostCenterKind.MINISTRY
    name: str = ""
    ministry_id: Optional[UUID] = None
    status: RecordStatus = RecordStatus.ACTIVE
    description: str = ""

    def switch_kind(self, kind: CostCenterKind) -> None:
        """
        Change the kind, clearing the field the new kind does not use.

        Leaving MINISTRY clears the ministry; entering MINISTRY clears the
        free-text name (the ministry's name is used instead).
        """
        if kind == self.kind:
            return
        if self.kind == CostCenterKind.MINISTRY:
            self.ministry_id = None
        if kind == CostCenterKind.MINISTRY:
            self.name = ""
        self.kind = kind

    def to_create(self) -> CostCenterCreate:
        return CostCenterCreate(
            organization_id=self.organization_id,
            kind=self.kind,
            name=self.name.strip() or None,
            ministry_id=self.ministry_id,
            status=self.status,
            description=self.description.strip() or None,
        )

    def to_update(self) -> CostCenterUpdate:
        return CostCenterUpdate(
            kind=self.kind,
            name=self.name.strip() or None,
            ministry_id=self.ministry_id,
            status=self.status,
            description=self.description.strip() or None,
        )


# ==========================
# Document Draft
# ==========================

@dataclass
class DocumentDraft:
    organization_id: Optional[UUID] = None
    type: DocumentType = DocumentType.PAYABLE
    description: str = ""
    amount_cents: int = 0
    issue_date: date = field(default_factory=date.today)
    due_date: date = field(default_factory=date.today)
    payment_date: Optional[date] = None
    status: DocumentStatus = DocumentStatus.OPEN
    cost_center_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    member_id: Optional[UUID] = None

    def switch_type(self, document_type: DocumentType) -> None:
        """
        Change the type, clearing the party and category that no longer apply.

        Categories are per finance kind, so a category chosen for the old
        type is dropped too.
        """
        if document_type == self.type:
            return
        if document_type == DocumentType.PAYABLE:
            self.member_id = None
        else:
            self.supplier_id = None
        self.category_id = None
        self.type = document_type

    def set_amount_from_masked(self, text: str) -> None:
        """Set the amount from a masked input such as ``"R$ 1.234,56"``."""
        self.amount_cents = parse_cents_from_masked(text)

    @property
    def party(self):
        return party_from_ids(self.type, self.supplier_id, self.member_id)

    def to_create(self) -> DocumentCreate:
        return DocumentCreate(
            organization_id=self.organization_id,
            type=self.type,
            description=self.description.strip(),
            amount_cents=self.amount_cents,
            issue_date=self.issue_date,
            due_date=self.due_date,
            payment_date=self.payment_date,
            status=self.status,
            cost_center_id=self.cost_center_id,
            category_id=self.category_id,
            party=self.party,
        )

    def to_update(self) -> DocumentUpdate:
        return DocumentUpdate(
            type=self.type,
            description=self.description.strip(),
            amount_cents=self.amount_cents,
            issue_date=self.issue_date,
            due_date=self.due_date,
            payment_date=self.payment_date,
            status=self.status,
            cost_center_id=self.cost_center_id,
            category_id=self.category_id,
            party=self.party,
        )
