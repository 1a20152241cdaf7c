"""Application layer: open pages, wizards and panels per process."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from constructx.core.catalog import get_catalog
from constructx.infrastructure import InMemoryMailbox, get_api_client
from constructx.services import ServiceRegistry

from .assistant import AssistantPanel
from .email import EmailPanel
from .pages import PageSession
from .wizards import WizardSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Keeps the controllers behind every open page and wizard."""

    def __init__(self, services: ServiceRegistry, *, today: date | None = None) -> None:
        self.services = services
        self.catalog = services.catalog
        self._today = today
        self._pages: dict[str, PageSession] = {}
        self._wizards: dict[str, WizardSession] = {}
        self._counter = 0
        self.assistant = AssistantPanel(services.assistant)
        self.email = EmailPanel(services.email, self.catalog.entity("emails"))

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter:05d}"

    # ------------------------------------------------------------------
    # pages
    # ------------------------------------------------------------------
    async def open_page(self, entity_name: str, project_id: str | None = None) -> PageSession:
        entity = self.catalog.entity(entity_name)
        service = self.services.resource(entity_name)
        page = PageSession(self._next_id("page"), entity, service, project_id=project_id, today=self._today)
        self._pages[page.id] = page
        logger.info("opened %s page %s for project %s", entity_name, page.id, project_id)
        await page.load()
        return page

    def page(self, session_id: str) -> PageSession:
        try:
            return self._pages[session_id]
        except KeyError:
            raise KeyError(f"page {session_id} not found") from None

    def list_pages(self) -> list[dict[str, Any]]:
        return [
            {"id": page.id, "entity": page.entity.name, "project_id": page.project_id}
            for page in self._pages.values()
        ]

    def close_page(self, session_id: str) -> None:
        page = self._pages.pop(session_id, None)
        if page is None:
            raise KeyError(f"page {session_id} not found")
        page.close()

    async def refresh_entity(self, entity_name: str) -> None:
        for page in list(self._pages.values()):
            if page.entity.name == entity_name:
                await page.refresh()

    # ------------------------------------------------------------------
    # wizards
    # ------------------------------------------------------------------
    async def open_wizard(
        self,
        name: str,
        project_id: str | None = None,
        record_id: str | None = None,
    ) -> WizardSession:
        definition = self.catalog.wizard(name)
        service = self.services.resource(definition.entity)
        record = await service.get(record_id) if record_id else None

        async def refresh_pages(_saved: Any) -> None:
            await self.refresh_entity(definition.entity)

        wizard = WizardSession(
            self._next_id("wizard"),
            definition,
            service,
            project_id=project_id,
            record=record,
            on_saved=refresh_pages,
        )
        self._wizards[wizard.id] = wizard
        return wizard

    def wizard(self, wizard_id: str) -> WizardSession:
        try:
            return self._wizards[wizard_id]
        except KeyError:
            raise KeyError(f"wizard {wizard_id} not found") from None

    def close_wizard(self, wizard_id: str) -> None:
        if self._wizards.pop(wizard_id, None) is None:
            raise KeyError(f"wizard {wizard_id} not found")

    def reset(self) -> None:
        for page in self._pages.values():
            page.close()
        self._pages.clear()
        self._wizards.clear()
        self._counter = 0
        self.assistant = AssistantPanel(self.services.assistant)
        self.email = EmailPanel(self.services.email, self.catalog.entity("emails"))

    async def aclose(self) -> None:
        self.reset()
        await self.services.api.aclose()


_sessions: SessionRegistry | None = None


def configure_sessions(sessions: SessionRegistry | None) -> None:
    global _sessions
    _sessions = sessions


def get_sessions() -> SessionRegistry:
    """Return the process-wide registry, building one from the environment on first use."""

    global _sessions
    if _sessions is None:
        services = ServiceRegistry(get_api_client(), get_catalog(), InMemoryMailbox())
        _sessions = SessionRegistry(services)
    return _sessions


def reset_session_state() -> None:
    """Drop every open page and wizard; intended for tests."""

    if _sessions is not None:
        _sessions.reset()


__all__ = ["SessionRegistry", "configure_sessions", "get_sessions", "reset_session_state"]
