import asyncio
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.core.catalog import load_catalog
from constructx.core.forms import DraftValidationError, FormDraftController, StepWizard
from constructx.core.notifications import ToastCenter
from constructx.infrastructure.api import ApiError


class Recorder:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.created: list[dict] = []
        self.updated: list[tuple[str, dict]] = []
        self.saved: list = []

    async def create(self, draft):
        self.created.append(draft)
        if self.fail:
            raise ApiError("rejected", status_code=422)
        return {"id": "new-1", **draft}

    async def update(self, record_id, draft):
        self.updated.append((record_id, draft))
        if self.fail:
            raise ApiError("rejected", status_code=422)
        return {**draft, "id": record_id}

    async def on_saved(self, saved):
        self.saved.append(saved)


def _contract_wizard(recorder: Recorder, toasts: ToastCenter, record=None) -> StepWizard:
    definition = load_catalog().wizard("contract_generator")
    return StepWizard.start(definition, record=record, subject="contract", toasts=toasts, on_saved=recorder.on_saved)


def test_edit_mode_calls_update_exactly_once():
    recorder = Recorder()
    toasts = ToastCenter()
    form = FormDraftController.for_record(
        {"id": 7, "title": "Lobby ceiling", "status": "Draft"},
        subject="RFI",
        toasts=toasts,
        on_saved=recorder.on_saved,
    )
    form.set_field("status", "Submitted")

    saved = asyncio.run(form.submit(recorder.create, recorder.update))

    assert recorder.created == []
    assert recorder.updated == [("7", {"id": 7, "title": "Lobby ceiling", "status": "Submitted"})]
    assert saved["status"] == "Submitted"
    assert form.is_open is False
    assert recorder.saved == [saved]
    assert [toast.description for toast in toasts.drain()] == ["RFI updated successfully."]


def test_create_mode_calls_create_exactly_once():
    recorder = Recorder()
    form = FormDraftController.for_create({"status": "Draft"}, subject="quote", on_saved=recorder.on_saved)
    form.set_fields({"title": "Parking deck coating", "totalAmount": 54000})

    saved = asyncio.run(form.submit(recorder.create, recorder.update))

    assert recorder.updated == []
    assert recorder.created == [{"status": "Draft", "title": "Parking deck coating", "totalAmount": 54000}]
    assert saved["id"] == "new-1"
    assert form.editing is False


def test_failed_submit_keeps_dialog_open_with_draft():
    recorder = Recorder(fail=True)
    toasts = ToastCenter()
    form = FormDraftController.for_create({"title": "Draft invoice"}, subject="invoice", toasts=toasts)

    saved = asyncio.run(form.submit(recorder.create, recorder.update))

    assert saved is None
    assert form.is_open is True
    assert form.is_submitting is False
    assert form.draft == {"title": "Draft invoice"}
    assert len(recorder.created) == 1
    (toast,) = toasts.drain()
    assert toast.destructive
    assert toast.description == "Failed to create invoice. Please try again."


def test_set_field_is_a_shallow_merge_without_derived_values():
    form = FormDraftController.for_create({"lineItems": [{"amount": 10}], "total": 10})
    form.set_field("lineItems", [{"amount": 10}, {"amount": 5}])
    assert form.draft["total"] == 10


def test_wizard_next_blocks_on_missing_required_field():
    toasts = ToastCenter()
    wizard = _contract_wizard(Recorder(), toasts)
    wizard.form.set_fields({"title": "Site works", "projectName": "Project Alpha"})

    with pytest.raises(DraftValidationError) as excinfo:
        wizard.next()

    assert str(excinfo.value) == "Start date is required."
    assert excinfo.value.step == "basic"
    assert excinfo.value.missing == ["startDate"]
    assert wizard.index == 0
    assert wizard.is_first_step


def test_wizard_walks_steps_and_reports_progress():
    wizard = _contract_wizard(Recorder(), ToastCenter())
    wizard.form.set_fields({"title": "Site works", "projectName": "Project Alpha", "startDate": "2025-07-01"})

    assert wizard.progress == 17
    wizard.next()
    assert wizard.current_step.id == "parties"
    assert wizard.progress == 33
    wizard.back()
    wizard.back()
    assert wizard.current_step.id == "basic"


def test_wizard_submit_jumps_to_first_incomplete_step():
    recorder = Recorder()
    wizard = _contract_wizard(recorder, ToastCenter())
    wizard.form.set_fields(
        {
            "title": "Site works",
            "projectName": "Project Alpha",
            "startDate": "2025-07-01",
            "clientName": "City Development",
            "contractorName": "ConstructX Builders",
        }
    )
    wizard.index = len(wizard.steps) - 1

    with pytest.raises(DraftValidationError):
        asyncio.run(wizard.submit(recorder.create, recorder.update))

    assert wizard.current_step.id == "terms"
    assert recorder.created == []


def test_complete_wizard_creates_record_with_defaults():
    recorder = Recorder()
    toasts = ToastCenter()
    wizard = _contract_wizard(recorder, toasts)
    wizard.form.set_fields(
        {
            "title": "Site works",
            "projectName": "Project Alpha",
            "startDate": "2025-07-01",
            "clientName": "City Development",
            "contractorName": "ConstructX Builders",
            "paymentTerms": "Net 30",
            "scopeOfWork": "Earthworks and utilities",
        }
    )
    while not wizard.is_last_step:
        wizard.next()

    saved = asyncio.run(wizard.submit(recorder.create, recorder.update))

    assert len(recorder.created) == 1
    assert recorder.created[0]["contractType"] == "Construction"
    assert recorder.created[0]["status"] == "Draft"
    assert saved["id"] == "new-1"
    assert wizard.progress == 100
    assert [toast.description for toast in toasts.drain()] == ["Contract created successfully."]


def test_validation_error_carries_validation_toast():
    error = DraftValidationError("Client name is required.", step="parties", missing=["clientName"])
    assert error.toast.title == "Validation Error"
    assert error.toast.destructive


def test_simple_form_sends_draft_without_client_side_checks():
    recorder = Recorder()
    toasts = ToastCenter()
    form = FormDraftController.for_create({"status": "Draft"}, subject="RFI", toasts=toasts)
    form.set_fields({"title": "", "priority": "Someday", "dueDate": "not a date"})

    saved = asyncio.run(form.submit(recorder.create, recorder.update))

    assert recorder.created == [{"status": "Draft", "title": "", "priority": "Someday", "dueDate": "not a date"}]
    assert saved["id"] == "new-1"
    assert [toast.variant for toast in toasts.drain()] == ["default"]
