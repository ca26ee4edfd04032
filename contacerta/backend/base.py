"""
Backend Collaborator Interface
==============================

The hosted relational backend as seen by the client core: table reads
and writes scoped by organization, plus a few RPCs.

Rows travel as plain dictionaries with JSON-compatible values. Every
failure is reported as ``BackendError``; row-level security never raises
on reads, it simply returns fewer rows.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import UUID

from contacerta.schemas.identity import Identity

Row = Dict[str, Any]

# Returns the identity the backend acts for, or None when signed out
IdentityProvider = Callable[[], Optional[Identity]]

# Wire marker for "column IS NULL" filters
NULL_FILTER = "is.null"

# RPC names
CREATE_ORG_AND_JOIN = "create_org_and_join"
ACCEPT_INVITE = "accept_invite"
CREATE_INVITE = "create_invite"


@dataclass(frozen=True)
class Query:
    """
    Scoped table read.

    Attributes:
        table: Table name
        organization_id: Organization the read is scoped to
        filters: Column equality filters
        search: Case-insensitive substring matched against search_columns
        search_columns: Columns searched (any may match)
        order_by: Sort column
        descending: Sort direction
        limit: Maximum number of rows
    """

    table: str
    organization_id: Optional[UUID] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    search_columns: Sequence[str] = ()
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None


class Backend(ABC):
    """
    Abstract backend bound to the current identity.

    Implementations obtain the identity from an identity provider at call
    time, so a single instance follows sign-in and sign-out.
    """

    @abstractmethod
    async def list_memberships(self) -> List[Row]:
        """
        Memberships of the current identity joined to organization names.

        Returns:
            Rows ``{organization_id, role, organization: {id, name}}``
            ordered by organization name
        """

    @abstractmethod
    async def select(self, query: Query) -> List[Row]:
        """Rows matching the query, limited to visible organizations."""

    @abstractmethod
    async def get(
        self,
        table: str,
        record_id: UUID,
        organization_id: Optional[UUID] = None,
    ) -> Optional[Row]:
        """A single visible row, or None."""

    @abstractmethod
    async def insert(self, table: str, values: Row) -> Row:
        """Insert a row and return it as stored."""

    @abstractmethod
    async def insert_many(self, table: str, rows: List[Row]) -> List[Row]:
        """Insert several rows atomically."""

    @abstractmethod
    async def update(
        self,
        table: str,
        record_id: UUID,
        organization_id: UUID,
        values: Row,
    ) -> Row:
        """
        Update a visible row and return it.

        Raises:
            BackendError: ``PGRST116`` when no visible row matches
        """

    @abstractmethod
    async def delete(self, table: str, organization_id: UUID, filters: Row) -> int:
        """
        Delete visible rows matching the filters.

        Returns:
            Number of rows deleted (zero when nothing is visible)
        """

    @abstractmethod
    async def rpc(self, name: str, params: Row) -> Any:
        """Call a backend procedure."""

    async def aclose(self) -> None:
        """Release transport resources."""
