from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from constructx.application import get_sessions

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.get("")
async def get_assistant(
    project_id: str | None = Query(default=None),
    conversation_id: str | None = Query(default=None),
) -> dict:
    panel = get_sessions().assistant
    await panel.open(project_id, conversation_id)
    return panel.snapshot()


@router.post("/conversations")
async def create_conversation(payload: dict) -> dict:
    panel = get_sessions().assistant
    created = await panel.create_conversation(payload.get("title"))
    data = panel.snapshot()
    data["created"] = created
    return data


@router.post("/conversations/{cid}/messages")
async def send_message(cid: str, payload: dict) -> dict:
    panel = get_sessions().assistant
    try:
        await panel.send_message(cid, str(payload.get("content") or ""))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return panel.snapshot()


@router.delete("/conversations/{cid}")
async def delete_conversation(cid: str) -> dict:
    panel = get_sessions().assistant
    await panel.delete_conversation(cid)
    return panel.snapshot()


@router.post("/actions/{aid}/{decision}")
async def resolve_action(aid: str, decision: str) -> dict:
    panel = get_sessions().assistant
    try:
        await panel.resolve_action(aid, decision)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return panel.snapshot()


@router.post("/insights/{iid}/read")
async def mark_insight_read(iid: str) -> dict:
    panel = get_sessions().assistant
    await panel.mark_insight_read(iid)
    return panel.snapshot()
