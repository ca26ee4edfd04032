"""
Role Enumeration Module
=======================

Defines all valid membership roles in the system.

Values are the wire values stored by the backend. An identity holds at
most one role per organization.
"""

from enum import Enum


class Role(str, Enum):
    """
    Membership roles.
    """

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    TREASURY = "TESOURARIA"
    SECRETARY = "SECRETARIA"
    ACCOUNTANT = "CONTADOR"
    READ_ONLY = "LEITURA"
