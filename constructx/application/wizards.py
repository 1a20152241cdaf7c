from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Mapping

from constructx.core.catalog import WizardDefinition
from constructx.core.forms import DraftValidationError, StepWizard
from constructx.core.notifications import ToastCenter
from constructx.services import ResourceService

logger = logging.getLogger(__name__)


class WizardSession:
    """A multi-step create/edit flow (contract generator) bound to one service."""

    def __init__(
        self,
        session_id: str,
        definition: WizardDefinition,
        service: ResourceService,
        *,
        project_id: str | None = None,
        record: Mapping[str, Any] | None = None,
        on_saved: Callable[[Any], Awaitable[Any]] | None = None,
    ) -> None:
        self.id = session_id
        self.service = service
        self.project_id = project_id
        self.toasts = ToastCenter()
        self.wizard = StepWizard.start(definition, record=record, toasts=self.toasts, on_saved=on_saved)
        self.saved: Any | None = None

    def set_fields(self, values: Mapping[str, Any]) -> None:
        self.wizard.form.set_fields(values)

    def _blocked(self, exc: DraftValidationError) -> bool:
        logger.info("wizard %s blocked on step %s: %s", self.id, exc.step, exc)
        self.toasts.push(exc.toast)
        return False

    def next(self) -> bool:
        try:
            self.wizard.next()
        except DraftValidationError as exc:
            return self._blocked(exc)
        return True

    def back(self) -> bool:
        self.wizard.back()
        return True

    async def submit(self) -> bool:
        try:
            saved = await self.wizard.submit(
                lambda draft: self.service.create(draft, self.project_id),
                self.service.update,
            )
        except DraftValidationError as exc:
            return self._blocked(exc)
        if saved is None:
            return False
        self.saved = saved
        return True

    def snapshot(self) -> dict[str, Any]:
        data = self.wizard.snapshot()
        data["id"] = self.id
        data["project_id"] = self.project_id
        data["saved"] = self.saved
        data["toasts"] = [asdict(toast) for toast in self.toasts.drain()]
        return data


__all__ = ["WizardSession"]
