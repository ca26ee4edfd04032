"""
SQL Reference Backend
=====================

Backend implementation over SQLAlchemy with row-level security emulated
by ``TenantQuery``.

Behaviour mirrors a hosted Postgres/PostgREST backend:
- Reads scoped to organizations without membership return no rows
- Inserts into organizations the identity cannot write are rejected
  with ``42501``
- Updates that match no visible row fail with ``PGRST116``
- Deletes that match nothing are a silent no-op
- Constraint violations carry their SQLSTATE code

Blocking database work runs in a worker thread so the event loop stays
responsive.
"""

import asyncio
import enum
import threading
import uuid
from datetime import date, datetime, timedelta, UTC
from typing import Any, Callable, Dict, List, Optional, Type

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from contacerta.backend.base import (
    ACCEPT_INVITE,
    Backend,
    CREATE_INVITE,
    CREATE_ORG_AND_JOIN,
    IdentityProvider,
    Query,
    Row,
)
from contacerta.core.exceptions import (
    BackendError,
    CHECK_VIOLATION,
    FOREIGN_KEY_VIOLATION,
    INSUFFICIENT_PRIVILEGE,
    INVALID_TEXT_REPRESENTATION,
    MISSING_FILTER,
    NOT_NULL_VIOLATION,
    NO_ROWS,
    RAISE_EXCEPTION,
    UNIQUE_VIOLATION,
    UNKNOWN_COLUMN,
    UNKNOWN_FUNCTION,
    UNKNOWN_TABLE,
)
from contacerta.core.logging import LogContext, get_logger, security_logger
from contacerta.core.rbac import can_manage_access
from contacerta.core.tenant import TenantQuery
from contacerta.models import (
    Asset,
    Category,
    CostCenter,
    Document,
    Invite,
    Member,
    MemberMinistry,
    Membership,
    Ministry,
    Organization,
    Role,
    Supplier,
)

# Initialize logger
logger = get_logger(__name__)


# Tenant-scoped tables exposed to clients
TABLES: Dict[str, Type] = {
    "members": Member,
    "ministries": Ministry,
    "member_ministries": MemberMinistry,
    "suppliers": Supplier,
    "cost_centers": CostCenter,
    "categories": Category,
    "documents": Document,
    "assets": Asset,
}

# Columns a client may never write directly
PROTECTED_COLUMNS = frozenset({"id", "organization_id", "created_at", "updated_at"})

DEFAULT_INVITE_TTL = timedelta(days=7)


# =====================================
# Value Coercion
# =====================================

def resolve_model(table: str) -> Type:
    try:
        return TABLES[table]
    except KeyError:
        raise BackendError(
            UNKNOWN_TABLE,
            f"Could not find the table 'public.{table}' in the schema cache",
        )


def coerce_value(model: Type, key: str, value: Any) -> Any:
    """
    Convert a wire value to the column's Python type.

    Raises:
        BackendError: ``PGRST204`` for unknown columns, ``22P02`` for values
            that cannot be converted
    """
    column = model.__table__.columns.get(key)
    if column is None:
        raise BackendError(
            UNKNOWN_COLUMN,
            f"Could not find the '{key}' column of '{model.__tablename__}' in the schema cache",
        )
    if value is None:
        return None

    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value

    if isinstance(value, python_type) and not (python_type is date and isinstance(value, datetime)):
        return value

    try:
        if python_type is uuid.UUID:
            return uuid.UUID(str(value))
        if python_type is datetime:
            return datetime.fromisoformat(str(value))
        if python_type is date:
            return date.fromisoformat(str(value)[:10])
        if isinstance(python_type, type) and issubclass(python_type, enum.Enum):
            return python_type(value)
        if python_type is bool:
            if isinstance(value, str):
                return value.strip().lower() in ("true", "t", "1", "yes")
            return bool(value)
        if python_type is int:
            return int(value)
    except (TypeError, ValueError):
        raise BackendError(
            INVALID_TEXT_REPRESENTATION,
            f'invalid input syntax for type {python_type.__name__}: "{value}"',
        )
    return value


def coerce_values(model: Type, values: Row) -> Dict[str, Any]:
    return {key: coerce_value(model, key, value) for key, value in values.items()}


def integrity_error_to_backend_error(error: IntegrityError, table: str) -> BackendError:
    """
    Map a database integrity error to its SQLSTATE code.

    Postgres drivers expose the code directly; SQLite only reports it in
    the message text.
    """
    original = error.orig
    code = getattr(original, "pgcode", None) or getattr(original, "sqlstate", None)
    message = str(original)

    if not code:
        lowered = message.lower()
        if "unique" in lowered:
            code = UNIQUE_VIOLATION
        elif "foreign key" in lowered:
            code = FOREIGN_KEY_VIOLATION
        elif "not null" in lowered:
            code = NOT_NULL_VIOLATION
        else:
            code = CHECK_VIOLATION

    return BackendError(code, message, details=f"table: {table}")


# =====================================
# Backend
# =====================================

class SqlBackend(Backend):
    """
    Reference backend over a SQLAlchemy session factory.

    Usage:
        backend = SqlBackend(session_factory, lambda: session_store.identity)
        rows = await backend.select(Query("members", organization_id=org_id))
    """

    # A StaticPool shares one SQLite connection between threads
    _lock = threading.Lock()

    def __init__(
        self,
        session_factory: sessionmaker,
        identity_provider: IdentityProvider,
        invite_ttl: timedelta = DEFAULT_INVITE_TTL,
    ):
        self._session_factory = session_factory
        self._identity_provider = identity_provider
        self._invite_ttl = invite_ttl

    def _identity_id(self) -> uuid.UUID:
        identity = self._identity_provider()
        if identity is None:
            raise BackendError(INSUFFICIENT_PRIVILEGE, "permission denied: not authenticated")
        return identity.id

    async def _run(self, operation: Callable[..., Any], table: str, *args: Any) -> Any:
        identity_id = self._identity_id()
        # Copied into the worker thread by to_thread
        with LogContext(identity_id=str(identity_id)):
            return await asyncio.to_thread(self._in_session, operation, table, identity_id, *args)

    def _in_session(self, operation: Callable[..., Any], table: str, identity_id: uuid.UUID, *args: Any) -> Any:
        with self._lock:
            db: Session = self._session_factory()
            try:
                result = operation(db, identity_id, *args)
                db.commit()
                return result
            except IntegrityError as e:
                db.rollback()
                backend_error = integrity_error_to_backend_error(e, table)
                logger.info("backend_constraint_violation", table=table, code=backend_error.code)
                raise backend_error
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    # ==========================
    # Memberships
    # ==========================

    async def list_memberships(self) -> List[Row]:
        return await self._run(self._list_memberships, "memberships")

    def _list_memberships(self, db: Session, identity_id: uuid.UUID) -> List[Row]:
        rows = (
            db.query(Membership, Organization)
            .join(Organization, Membership.organization_id == Organization.id)
            .filter(Membership.identity_id == identity_id)
            .order_by(Organization.name, Organization.id)
            .all()
        )
        return [
            {
                "organization_id": str(membership.organization_id),
                "role": membership.role.value,
                "organization": {"id": str(organization.id), "name": organization.name},
            }
            for membership, organization in rows
        ]

    # ==========================
    # Reads
    # ==========================

    async def select(self, query: Query) -> List[Row]:
        model = resolve_model(query.table)
        return await self._run(self._select, query.table, model, query)

    def _select(self, db: Session, identity_id: uuid.UUID, model: Type, query: Query) -> List[Row]:
        tenant = TenantQuery(db, model, identity_id)
        if query.organization_id is not None:
            organization_id = coerce_value(model, "organization_id", query.organization_id)
            sql_query = tenant.filter_by_tenant_id(organization_id)
        else:
            sql_query = tenant.filter_by_tenant()

        for key, value in query.filters.items():
            coerced = coerce_value(model, key, value)
            column = getattr(model, key)
            sql_query = sql_query.filter(column.is_(None) if coerced is None else column == coerced)

        search = (query.search or "").strip()
        if search and query.search_columns:
            for key in query.search_columns:
                coerce_value(model, key, None)  # validates the column name
            pattern = f"%{search}%"
            sql_query = sql_query.filter(
                or_(*[getattr(model, key).ilike(pattern) for key in query.search_columns])
            )

        if query.order_by:
            coerce_value(model, query.order_by, None)
            column = getattr(model, query.order_by)
            sql_query = sql_query.order_by(column.desc() if query.descending else column.asc())

        if query.limit is not None:
            sql_query = sql_query.limit(query.limit)

        return [row.to_dict() for row in sql_query.all()]

    async def get(
        self,
        table: str,
        record_id: uuid.UUID,
        organization_id: Optional[uuid.UUID] = None,
    ) -> Optional[Row]:
        model = resolve_model(table)
        return await self._run(self._get, table, model, record_id, organization_id)

    def _get(
        self,
        db: Session,
        identity_id: uuid.UUID,
        model: Type,
        record_id: Any,
        organization_id: Any,
    ) -> Optional[Row]:
        row = TenantQuery(db, model, identity_id).get_by_id(coerce_value(model, "id", record_id))
        if row is None:
            return None
        if organization_id is not None and row.organization_id != coerce_value(
            model, "organization_id", organization_id
        ):
            return None
        return row.to_dict()

    # ==========================
    # Writes
    # ==========================

    def _ensure_writable(self, tenant: TenantQuery, identity_id: uuid.UUID, organization_id: Any, action: str) -> None:
        if organization_id is None:
            raise BackendError(
                NOT_NULL_VIOLATION,
                'null value in column "organization_id" violates not-null constraint',
            )
        if not tenant.has_access(organization_id, writable=True):
            security_logger.log_unauthorized_write(
                identity_id=str(identity_id),
                organization_id=str(organization_id),
                resource=tenant.model.__tablename__,
                action=action,
            )
            raise BackendError(
                INSUFFICIENT_PRIVILEGE,
                f'new row violates row-level security policy for table "{tenant.model.__tablename__}"',
            )

    async def insert(self, table: str, values: Row) -> Row:
        model = resolve_model(table)
        return (await self._run(self._insert, table, model, [values]))[0]

    async def insert_many(self, table: str, rows: List[Row]) -> List[Row]:
        if not rows:
            return []
        model = resolve_model(table)
        return await self._run(self._insert, table, model, rows)

    def _insert(self, db: Session, identity_id: uuid.UUID, model: Type, rows: List[Row]) -> List[Row]:
        tenant = TenantQuery(db, model, identity_id)
        instances = []
        for values in rows:
            coerced = coerce_values(model, values)
            self._ensure_writable(tenant, identity_id, coerced.get("organization_id"), "insert")
            instance = model(**coerced)
            db.add(instance)
            instances.append(instance)
        db.flush()
        return [instance.to_dict() for instance in instances]

    async def update(
        self,
        table: str,
        record_id: uuid.UUID,
        organization_id: uuid.UUID,
        values: Row,
    ) -> Row:
        model = resolve_model(table)
        return await self._run(self._update, table, model, record_id, organization_id, values)

    def _update(
        self,
        db: Session,
        identity_id: uuid.UUID,
        model: Type,
        record_id: Any,
        organization_id: Any,
        values: Row,
    ) -> Row:
        organization_id = coerce_value(model, "organization_id", organization_id)
        tenant = TenantQuery(db, model, identity_id)
        row = (
            tenant.filter_by_tenant_id(organization_id)
            .filter(model.id == coerce_value(model, "id", record_id))
            .first()
        )
        if row is None:
            raise BackendError(
                NO_ROWS,
                "JSON object requested, multiple (or no) rows returned",
                details="The result contains 0 rows",
            )
        self._ensure_writable(tenant, identity_id, organization_id, "update")

        changes = coerce_values(model, values)
        target_organization = changes.pop("organization_id", organization_id)
        if target_organization != organization_id:
            raise BackendError(
                INSUFFICIENT_PRIVILEGE,
                f'new row violates row-level security policy for table "{model.__tablename__}"',
            )
        for key, value in changes.items():
            if key not in PROTECTED_COLUMNS:
                setattr(row, key, value)
        db.flush()
        return row.to_dict()

    async def delete(self, table: str, organization_id: uuid.UUID, filters: Row) -> int:
        if not filters:
            raise BackendError(MISSING_FILTER, "DELETE requires a WHERE clause")
        model = resolve_model(table)
        return await self._run(self._delete, table, model, organization_id, filters)

    def _delete(
        self,
        db: Session,
        identity_id: uuid.UUID,
        model: Type,
        organization_id: Any,
        filters: Row,
    ) -> int:
        organization_id = coerce_value(model, "organization_id", organization_id)
        tenant = TenantQuery(db, model, identity_id)
        if not tenant.has_access(organization_id, writable=True):
            security_logger.log_unauthorized_write(
                identity_id=str(identity_id),
                organization_id=str(organization_id),
                resource=model.__tablename__,
                action="delete",
            )
            return 0

        sql_query = tenant.filter_by_tenant_id(organization_id)
        for key, value in coerce_values(model, filters).items():
            sql_query = sql_query.filter(getattr(model, key) == value)
        return sql_query.delete(synchronize_session=False)

    # ==========================
    # RPC
    # ==========================

    async def rpc(self, name: str, params: Row) -> Any:
        handlers = {
            CREATE_ORG_AND_JOIN: self._create_org_and_join,
            ACCEPT_INVITE: self._accept_invite,
            CREATE_INVITE: self._create_invite,
        }
        handler = handlers.get(name)
        if handler is None:
            raise BackendError(
                UNKNOWN_FUNCTION,
                f"Could not find the function public.{name} in the schema cache",
            )
        logger.debug("backend_rpc", name=name)
        return await self._run(handler, name, params)

    def _create_org_and_join(self, db: Session, identity_id: uuid.UUID, params: Row) -> str:
        name = (params.get("org_name") or "").strip()
        if not name:
            raise BackendError(RAISE_EXCEPTION, "organization name is required")
        tax_id = (params.get("org_tax_id") or "").strip() or None

        organization = Organization(name=name, tax_id=tax_id)
        db.add(organization)
        db.flush()
        db.add(Membership(organization_id=organization.id, identity_id=identity_id, role=Role.OWNER))
        db.flush()

        logger.info("organization_created", organization_id=str(organization.id))
        return str(organization.id)

    def _accept_invite(self, db: Session, identity_id: uuid.UUID, params: Row) -> str:
        raw_token = params.get("invite_token")
        try:
            token = uuid.UUID(str(raw_token))
        except (TypeError, ValueError):
            raise BackendError(
                INVALID_TEXT_REPRESENTATION,
                f'invalid input syntax for type uuid: "{raw_token}"',
            )

        invite = db.query(Invite).filter(Invite.token == token).first()
        if invite is None:
            raise BackendError(RAISE_EXCEPTION, "invite not found or invalid")

        existing = (
            db.query(Membership)
            .filter(
                Membership.organization_id == invite.organization_id,
                Membership.identity_id == identity_id,
            )
            .first()
        )
        if existing is not None:
            return str(invite.organization_id)

        if invite.accepted_at is not None:
            raise BackendError(RAISE_EXCEPTION, "invite not found or invalid (already used)")

        expires_at = invite.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        if expires_at < datetime.now(UTC):
            raise BackendError(RAISE_EXCEPTION, "invite expired")

        db.add(Membership(
            organization_id=invite.organization_id,
            identity_id=identity_id,
            role=invite.role,
        ))
        invite.accepted_at = datetime.now(UTC)
        invite.accepted_by = identity_id
        db.flush()

        logger.info("invite_accepted", organization_id=str(invite.organization_id))
        return str(invite.organization_id)

    def _create_invite(self, db: Session, identity_id: uuid.UUID, params: Row) -> str:
        organization_id = coerce_value(Invite, "organization_id", params.get("org_id"))
        role = coerce_value(Invite, "role", params.get("role") or Role.READ_ONLY.value)

        membership = (
            db.query(Membership)
            .filter(
                Membership.organization_id == organization_id,
                Membership.identity_id == identity_id,
            )
            .first()
        )
        if membership is None or not can_manage_access(membership.role):
            security_logger.log_unauthorized_write(
                identity_id=str(identity_id),
                organization_id=str(organization_id),
                resource="invites",
                action="insert",
            )
            raise BackendError(INSUFFICIENT_PRIVILEGE, "permission denied to create invites")

        invite = Invite(
            organization_id=organization_id,
            role=role,
            expires_at=datetime.now(UTC) + self._invite_ttl,
            created_by=identity_id,
        )
        db.add(invite)
        db.flush()
        return str(invite.token)
