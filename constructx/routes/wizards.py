from __future__ import annotations

from fastapi import APIRouter, HTTPException

from constructx.application import WizardSession, get_sessions
from constructx.core.catalog import CatalogError
from constructx.infrastructure.api import ApiError

router = APIRouter(prefix="/wizards", tags=["wizards"])


def _wizard(wid: str) -> WizardSession:
    try:
        return get_sessions().wizard(wid)
    except KeyError:
        raise HTTPException(status_code=404, detail="wizard not found") from None


@router.post("")
async def open_wizard(payload: dict) -> dict:
    name = payload.get("wizard")
    if not name:
        raise HTTPException(status_code=400, detail="wizard is required")
    try:
        wizard = await get_sessions().open_wizard(str(name), payload.get("project_id"), payload.get("record_id"))
    except CatalogError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ApiError as exc:
        raise HTTPException(status_code=404, detail="record not found") from exc
    return wizard.snapshot()


@router.get("/{wid}")
async def get_wizard(wid: str) -> dict:
    return _wizard(wid).snapshot()


@router.put("/{wid}")
async def update_wizard(wid: str, payload: dict) -> dict:
    wizard = _wizard(wid)
    values = payload.get("values", payload)
    if not isinstance(values, dict):
        raise HTTPException(status_code=400, detail="values must be an object")
    wizard.set_fields(values)
    return wizard.snapshot()


@router.post("/{wid}/next")
async def next_step(wid: str) -> dict:
    wizard = _wizard(wid)
    advanced = wizard.next()
    data = wizard.snapshot()
    data["advanced"] = advanced
    return data


@router.post("/{wid}/back")
async def previous_step(wid: str) -> dict:
    wizard = _wizard(wid)
    wizard.back()
    return wizard.snapshot()


@router.post("/{wid}/submit")
async def submit_wizard(wid: str) -> dict:
    wizard = _wizard(wid)
    submitted = await wizard.submit()
    data = wizard.snapshot()
    data["submitted"] = submitted
    return data


@router.delete("/{wid}")
async def close_wizard(wid: str) -> dict:
    try:
        get_sessions().close_wizard(wid)
    except KeyError:
        raise HTTPException(status_code=404, detail="wizard not found") from None
    return {"id": wid, "closed": True}
