from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from constructx.application import get_sessions

router = APIRouter(prefix="/email", tags=["email"])


@router.get("")
async def get_mailbox(
    account_id: str | None = Query(default=None),
    folder_id: str | None = Query(default=None),
    project_id: str | None = Query(default=None),
    query: str | None = Query(default=None),
    read: str | None = Query(default=None),
    flagged: str | None = Query(default=None),
    sort: str | None = Query(default=None),
    direction: str | None = Query(default=None),
) -> dict:
    panel = get_sessions().email
    await panel.open(account_id, folder_id, project_id)
    try:
        panel.apply_view(query=query or "", filters={"read": read, "flagged": flagged}, sort=sort, direction=direction)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return panel.snapshot()


@router.post("/messages")
async def compose_message(payload: dict) -> dict:
    panel = get_sessions().email
    try:
        sent = await panel.compose(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    data = panel.snapshot()
    data["sent"] = sent
    return data


@router.post("/messages/{mid}/{action}")
async def message_action(mid: str, action: str) -> dict:
    panel = get_sessions().email
    try:
        await panel.act(mid, action)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return panel.snapshot()
