from __future__ import annotations

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from constructx.application import PageSession, get_sessions
from constructx.core.catalog import CatalogError
from constructx.domain import DragResult, KanbanPosition
from constructx.services import UnknownActionError

router = APIRouter(prefix="/pages", tags=["pages"])


def _page(sid: str) -> PageSession:
    try:
        return get_sessions().page(sid)
    except KeyError:
        raise HTTPException(status_code=404, detail="page not found") from None


def _position(raw: object, name: str) -> KanbanPosition:
    if not isinstance(raw, dict) or not raw.get("column"):
        raise HTTPException(status_code=400, detail=f"{name}.column is required")
    try:
        index = int(raw.get("index", 0))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{name}.index must be an integer") from None
    if index < 0:
        raise HTTPException(status_code=400, detail=f"{name}.index must not be negative")
    return KanbanPosition(column=str(raw["column"]), index=index)


def _download(page: PageSession, payload: tuple[bytes, str], fmt: str) -> Response:
    content, media_type = payload
    filename = f"{page.entity.name}.{fmt.lower()}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
async def list_pages() -> dict:
    return {"items": get_sessions().list_pages()}


@router.post("")
async def open_page(payload: dict) -> dict:
    entity = payload.get("entity")
    if not entity:
        raise HTTPException(status_code=400, detail="entity is required")
    project_id = payload.get("project_id", payload.get("key"))
    try:
        page = await get_sessions().open_page(str(entity), project_id)
    except CatalogError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return page.snapshot()


@router.get("/{sid}")
async def get_page(sid: str) -> dict:
    return _page(sid).snapshot()


@router.delete("/{sid}")
async def close_page(sid: str) -> dict:
    try:
        get_sessions().close_page(sid)
    except KeyError:
        raise HTTPException(status_code=404, detail="page not found") from None
    return {"id": sid, "closed": True}


@router.put("/{sid}/query")
async def set_query(sid: str, payload: dict) -> dict:
    page = _page(sid)
    page.set_query(payload.get("query"))
    return page.snapshot()


@router.put("/{sid}/filters")
async def set_filters(sid: str, payload: dict) -> dict:
    page = _page(sid)
    filters = payload.get("filters", payload)
    if not isinstance(filters, dict):
        raise HTTPException(status_code=400, detail="filters must be an object")
    page.set_filters(filters)
    return page.snapshot()


@router.put("/{sid}/sort")
async def set_sort(sid: str, payload: dict) -> dict:
    page = _page(sid)
    key = payload.get("key")
    if not key:
        raise HTTPException(status_code=400, detail="key is required")
    direction = payload.get("direction")
    try:
        page.set_sort(str(key), None if direction is None else str(direction))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return page.snapshot()


@router.put("/{sid}/key")
async def set_key(sid: str, payload: dict) -> dict:
    page = _page(sid)
    await page.set_key(payload.get("project_id"))
    return page.snapshot()


@router.post("/{sid}/selection")
async def update_selection(sid: str, payload: dict) -> dict:
    page = _page(sid)
    try:
        page.select(str(payload.get("mode") or ""), payload.get("id"))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return page.snapshot()


@router.post("/{sid}/refresh")
async def refresh_page(sid: str) -> dict:
    page = _page(sid)
    await page.refresh()
    return page.snapshot()


@router.post("/{sid}/bulk")
async def bulk_action(sid: str, payload: dict):
    page = _page(sid)
    action = payload.get("action")
    try:
        if action == "delete":
            await page.bulk_delete()
        elif action == "status":
            await page.bulk_status(str(payload.get("status") or ""))
        elif action == "export":
            fmt = str(payload.get("format") or "csv")
            return _download(page, page.bulk_export(fmt), fmt)
        else:
            raise HTTPException(status_code=400, detail="action must be delete, status or export")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return page.snapshot()


@router.get("/{sid}/export")
async def export_page(
    sid: str,
    format: str = Query(default="csv"),
    scope: str = Query(default="visible"),
) -> Response:
    page = _page(sid)
    try:
        payload = page.export(format, scope)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _download(page, payload, format)


@router.post("/{sid}/board/move")
async def move_card(sid: str, payload: dict) -> dict:
    page = _page(sid)
    card_id = payload.get("card_id")
    if not card_id:
        raise HTTPException(status_code=400, detail="card_id is required")
    destination = payload.get("destination")
    drop = DragResult(
        card_id=str(card_id),
        source=_position(payload.get("source"), "source"),
        destination=_position(destination, "destination") if destination is not None else None,
    )
    try:
        outcome = await page.move_card(drop)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    data = page.snapshot()
    data["outcome"] = outcome.value
    return data


@router.post("/{sid}/draft")
async def open_draft(sid: str, payload: dict) -> dict:
    page = _page(sid)
    try:
        page.open_draft(payload.get("record_id"), payload.get("values"))
    except KeyError:
        raise HTTPException(status_code=404, detail="record not found") from None
    return page.snapshot()


@router.put("/{sid}/draft")
async def update_draft(sid: str, payload: dict) -> dict:
    page = _page(sid)
    if page.form is None:
        raise HTTPException(status_code=400, detail="no draft is open")
    values = payload.get("values", payload)
    if not isinstance(values, dict):
        raise HTTPException(status_code=400, detail="values must be an object")
    page.form.set_fields(values)
    return page.snapshot()


@router.post("/{sid}/draft/submit")
async def submit_draft(sid: str) -> dict:
    page = _page(sid)
    try:
        saved = await page.submit_draft()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    data = page.snapshot()
    data["saved"] = saved
    return data


@router.delete("/{sid}/draft")
async def close_draft(sid: str) -> dict:
    page = _page(sid)
    page.close_draft()
    return page.snapshot()


@router.post("/{sid}/records/{rid}/actions/{action}")
async def record_action(sid: str, rid: str, action: str, payload: dict | None = None) -> dict:
    page = _page(sid)
    try:
        result = await page.perform(rid, action, payload)
    except UnknownActionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    data = page.snapshot()
    data["result"] = result
    return data


@router.delete("/{sid}/records/{rid}")
async def delete_record(sid: str, rid: str) -> dict:
    page = _page(sid)
    await page.delete_record(rid)
    return page.snapshot()


@router.post("/{sid}/records/{rid}/attachments")
async def upload_attachment(sid: str, rid: str, files: list[UploadFile] = File(...)) -> dict:
    """Forward one or more files to the record's attachment endpoint."""
    page = _page(sid)
    if not files:
        raise HTTPException(status_code=400, detail="At least one file must be provided")

    uploaded: list[dict] = []
    for upload in files:
        try:
            if not upload.filename:
                raise HTTPException(status_code=400, detail="Uploaded file must have a filename")
            content = await upload.read()
            result = await page.upload_attachment(rid, upload.filename, content, upload.content_type)
            uploaded.append({"filename": upload.filename, "uploaded": result is not None})
        finally:
            await upload.close()

    data = page.snapshot()
    data["items"] = uploaded
    return data
