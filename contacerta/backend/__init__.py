"""Backend collaborator: interface, SQL reference implementation and HTTP client."""

from contacerta.backend.base import Backend, IdentityProvider, Query, Row
from contacerta.backend.http import HttpBackend
from contacerta.backend.sql import SqlBackend

__all__ = ["Backend", "IdentityProvider", "Query", "Row", "HttpBackend", "SqlBackend"]
