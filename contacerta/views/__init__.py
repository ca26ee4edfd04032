"""
Views Package Initialization
============================

Organization-dependent list views, their state and form helpers.
"""

from contacerta.views.debounce import CancellationToken, Debouncer
from contacerta.views.state import CollectionState, ViewStatus
from contacerta.views.data_view import DataView, DeleteConfirmation, MutationStrategy
from contacerta.views.forms import CostCenterDraft, DocumentDraft, FormController
from contacerta.views.registry import ViewRegistry, build_views

__all__ = [
    "CancellationToken",
    "Debouncer",
    "CollectionState",
    "ViewStatus",
    "DataView",
    "DeleteConfirmation",
    "MutationStrategy",
    "CostCenterDraft",
    "DocumentDraft",
    "FormController",
    "ViewRegistry",
    "build_views",
]
