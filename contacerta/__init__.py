"""
ContaCerta
==========

Multi-tenant church administration core: organization session, dependent
data views, per-entity services and a reference backend.
"""

__version__ = "1.0.0"
