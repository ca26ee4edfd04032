"""
Member Service Module
=====================

Church members and their ministry links.
"""

from typing import List, Optional, Sequence
from uuid import UUID

from contacerta.backend.base import Query
from contacerta.core.enums import MemberStatus
from contacerta.core.error_messages import translate_backend_error
from contacerta.core.exceptions import BackendError
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.schemas.member import MemberRecord
from contacerta.services.base import TableService

# Initialize logger
logger = get_logger(__name__)

MEMBER_MINISTRIES_TABLE = "member_ministries"

MEMBER_NOT_FOUND_MESSAGE = "Membro não encontrado nesta organização."
MINISTRY_NOT_FOUND_MESSAGE = "Ministério não encontrado nesta organização."


class MemberService(TableService[MemberRecord]):
    table = "members"
    record_type = MemberRecord
    search_columns = ("full_name", "email")
    order_by = "full_name"

    async def list(
        self,
        organization_id: UUID,
        search: str = "",
        status: Optional[MemberStatus] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[MemberRecord]]:
        filters = {"status": status.value} if status else None
        return await super().list(organization_id, search, filters=filters, limit=limit)

    # --------------------------
    # Ministry Links
    # --------------------------

    async def list_ministry_ids(self, organization_id: UUID, member_id: UUID) -> ServiceResult[List[UUID]]:
        """Ministries the member participates in."""
        query = Query(
            table=MEMBER_MINISTRIES_TABLE,
            organization_id=organization_id,
            filters={"member_id": str(member_id)},
        )
        try:
            rows = await self.backend.select(query)
        except BackendError as e:
            return self._failure(e, "list_ministry_ids")
        return ServiceResult.success([UUID(str(row["ministry_id"])) for row in rows])

    async def set_ministries(
        self,
        organization_id: UUID,
        member_id: UUID,
        ministry_ids: Sequence[UUID],
    ) -> ServiceResult[List[UUID]]:
        """
        Replace the member's ministry links with the given set.

        The member and every ministry must belong to the organization;
        nothing is changed otherwise. Links are then removed and the new
        set is inserted in a single call, so a failed insert leaves the
        member without links rather than with a partial set.

        Args:
            organization_id: Active organization
            member_id: Member UUID
            ministry_ids: Complete set of ministries; duplicates are ignored

        Returns:
            ServiceResult with the ministry ids now linked
        """
        unique_ids = list(dict.fromkeys(ministry_ids))
        failure = await self._check_references(
            organization_id,
            [("members", member_id, MEMBER_NOT_FOUND_MESSAGE)]
            + [("ministries", ministry_id, MINISTRY_NOT_FOUND_MESSAGE) for ministry_id in unique_ids],
        )
        if failure is not None:
            return failure

        try:
            await self.backend.delete(
                MEMBER_MINISTRIES_TABLE, organization_id, {"member_id": str(member_id)}
            )
            if unique_ids:
                await self.backend.insert_many(
                    MEMBER_MINISTRIES_TABLE,
                    [
                        {
                            "organization_id": str(organization_id),
                            "member_id": str(member_id),
                            "ministry_id": str(ministry_id),
                        }
                        for ministry_id in unique_ids
                    ],
                )
        except BackendError as e:
            logger.warning("member_ministries_update_failed", member_id=str(member_id), code=e.code)
            return ServiceResult.failure(translate_backend_error(e, MEMBER_MINISTRIES_TABLE), e.code)

        logger.info("member_ministries_updated", member_id=str(member_id), count=len(unique_ids))
        return ServiceResult.success(unique_ids)

