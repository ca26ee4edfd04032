"""
View Registry Module
====================

Builds the list views of the application, all bound to one selector.
"""

import asyncio
from dataclasses import dataclass, fields
from typing import Iterator

from contacerta.core.config import Settings
from contacerta.schemas.report import NO_COST_CENTER_LABEL
from contacerta.session.active_org import ActiveOrganizationSelector
from contacerta.views.data_view import DataView, MutationStrategy


@dataclass
class ViewRegistry:
    members: DataView
    suppliers: DataView
    ministries: DataView
    assets: DataView
    cost_centers: DataView
    documents: DataView

    def __iter__(self) -> Iterator[DataView]:
        return (getattr(self, item.name) for item in fields(self))

    async def wait_idle(self) -> None:
        await asyncio.gather(*(view.wait_idle() for view in self))

    async def close(self) -> None:
        await asyncio.gather(*(view.close() for view in self))


def build_views(services, selector: ActiveOrganizationSelector, settings: Settings) -> ViewRegistry:
    """
    Create one view per entity list.

    Args:
        services: ServiceRegistry
        selector: Active organization selector every view follows
        settings: Application settings (search debounce)
    """
    delay = settings.search_debounce_seconds
    return ViewRegistry(
        members=DataView(
            "members",
            selector,
            services.members,
            MutationStrategy.REFETCH,
            delay,
            "Os vínculos do membro com ministérios também serão removidos.",
        ),
        suppliers=DataView("suppliers", selector, services.suppliers, MutationStrategy.REFETCH, delay),
        ministries=DataView(
            "ministries",
            selector,
            services.ministries,
            MutationStrategy.REFETCH,
            delay,
            "O centro de custo vinculado a este ministério também será excluído.",
        ),
        assets=DataView("assets", selector, services.assets, MutationStrategy.OPTIMISTIC, delay),
        cost_centers=DataView(
            "cost_centers",
            selector,
            services.cost_centers,
            MutationStrategy.OPTIMISTIC,
            delay,
            f'Os documentos vinculados serão mantidos e aparecerão como "{NO_COST_CENTER_LABEL}" nos relatórios.',
        ),
        documents=DataView("documents", selector, services.documents, MutationStrategy.OPTIMISTIC, delay),
    )
