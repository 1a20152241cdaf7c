"""Create/edit drafts and the multi-step wizard built on top of them."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping

from constructx.core.catalog import RequiredField, WizardDefinition, WizardStepDefinition
from constructx.core.notifications import ToastCenter, failure_message, sentence_case
from constructx.domain import Toast
from constructx.infrastructure.api import ApiError

logger = logging.getLogger(__name__)

CreateFn = Callable[[dict], Awaitable[Any]]
UpdateFn = Callable[[str, dict], Awaitable[Any]]
SavedHook = Callable[[Any], Awaitable[Any]]


class DraftValidationError(ValueError):
    """Raised when a wizard step is missing a required value."""

    def __init__(self, message: str, *, step: str | None = None, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.step = step
        self.missing = list(missing or [])
        self.toast = Toast(title="Validation Error", description=message, variant="destructive")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class FormDraftController:
    """Editable copy of one record for a create-or-update dialog.

    The draft is only ever shallow-merged; no field is derived from another.
    ``record_id`` decides which backend call :meth:`submit` makes.
    """

    def __init__(
        self,
        draft: Mapping[str, Any] | None = None,
        *,
        record_id: str | None = None,
        subject: str = "record",
        toasts: ToastCenter | None = None,
        on_saved: SavedHook | None = None,
    ) -> None:
        self.draft: dict[str, Any] = dict(draft or {})
        self.record_id = record_id
        self.subject = subject
        self.is_open = True
        self.is_submitting = False
        self._toasts = toasts or ToastCenter()
        self._on_saved = on_saved

    @classmethod
    def for_record(
        cls,
        record: Mapping[str, Any],
        defaults: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> "FormDraftController":
        draft = {**dict(defaults or {}), **dict(record)}
        record_id = record.get("id")
        return cls(draft, record_id=None if record_id is None else str(record_id), **kwargs)

    @classmethod
    def for_create(cls, defaults: Mapping[str, Any] | None = None, **kwargs: Any) -> "FormDraftController":
        return cls(defaults, **kwargs)

    @property
    def editing(self) -> bool:
        return self.record_id is not None

    def set_field(self, name: str, value: Any) -> None:
        self.draft[name] = value

    def set_fields(self, values: Mapping[str, Any]) -> None:
        self.draft.update(values)

    def cancel(self) -> None:
        self.is_open = False

    async def submit(self, create: CreateFn, update: UpdateFn) -> Any | None:
        """Save the draft; returns the saved record, or None when the request failed."""

        verb = "update" if self.editing else "create"
        self.is_submitting = True
        try:
            if self.editing:
                saved = await update(self.record_id, dict(self.draft))
            else:
                saved = await create(dict(self.draft))
        except ApiError as exc:
            logger.warning("failed to %s %s: %s", verb, self.subject, exc)
            self._toasts.error(failure_message(verb, self.subject))
            return None
        finally:
            self.is_submitting = False

        self.is_open = False
        if self._on_saved is not None:
            await self._on_saved(saved)
        self._toasts.success(f"{sentence_case(self.subject)} {verb}d successfully.")
        return saved if saved is not None else dict(self.draft)


class StepWizard:
    """Ordered wizard steps over one draft, checking required fields per step."""

    def __init__(self, definition: WizardDefinition, form: FormDraftController) -> None:
        self.definition = definition
        self.form = form
        self.index = 0

    @classmethod
    def start(
        cls,
        definition: WizardDefinition,
        *,
        record: Mapping[str, Any] | None = None,
        subject: str | None = None,
        toasts: ToastCenter | None = None,
        on_saved: SavedHook | None = None,
    ) -> "StepWizard":
        options = {"subject": subject or definition.entity.rstrip("s"), "toasts": toasts, "on_saved": on_saved}
        if record:
            form = FormDraftController.for_record(record, definition.defaults, **options)
        else:
            form = FormDraftController.for_create(definition.defaults, **options)
        return cls(definition, form)

    @property
    def steps(self) -> list[WizardStepDefinition]:
        return self.definition.steps

    @property
    def current_step(self) -> WizardStepDefinition:
        return self.steps[self.index]

    @property
    def is_first_step(self) -> bool:
        return self.index == 0

    @property
    def is_last_step(self) -> bool:
        return self.index == len(self.steps) - 1

    @property
    def progress(self) -> int:
        return round((self.index + 1) / len(self.steps) * 100)

    def missing_fields(self, step: WizardStepDefinition | None = None) -> list[RequiredField]:
        step = step or self.current_step
        return [item for item in step.required if _is_blank(self.form.draft.get(item.field))]

    def validate_step(self, step: WizardStepDefinition | None = None) -> None:
        step = step or self.current_step
        missing = self.missing_fields(step)
        if missing:
            raise DraftValidationError(
                f"{missing[0].label} is required.",
                step=step.id,
                missing=[item.field for item in missing],
            )

    def next(self) -> WizardStepDefinition:
        """Advance one step; the current step must be complete first."""

        self.validate_step()
        if not self.is_last_step:
            self.index += 1
        return self.current_step

    def back(self) -> WizardStepDefinition:
        if not self.is_first_step:
            self.index -= 1
        return self.current_step

    async def submit(self, create: CreateFn, update: UpdateFn) -> Any | None:
        for position, step in enumerate(self.steps):
            if self.missing_fields(step):
                self.index = position
                self.validate_step(step)
        return await self.form.submit(create, update)

    def snapshot(self) -> dict[str, Any]:
        return {
            "wizard": self.definition.name,
            "label": self.definition.label,
            "step": self.current_step.model_dump(),
            "index": self.index,
            "steps": [{"id": step.id, "label": step.label} for step in self.steps],
            "progress": self.progress,
            "is_first_step": self.is_first_step,
            "is_last_step": self.is_last_step,
            "draft": dict(self.form.draft),
            "editing": self.form.editing,
            "is_submitting": self.form.is_submitting,
            "is_open": self.form.is_open,
        }


__all__ = ["DraftValidationError", "FormDraftController", "StepWizard"]
