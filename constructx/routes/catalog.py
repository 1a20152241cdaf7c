from __future__ import annotations

import logging

from fastapi import APIRouter

from constructx.application import get_sessions
from constructx.core.notifications import failure_message
from constructx.infrastructure.api import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/catalog")
async def get_catalog_summary() -> dict:
    catalog = get_sessions().catalog
    return {
        "entities": [entity.summary() for entity in catalog.entities.values()],
        "wizards": [
            {"name": wizard.name, "label": wizard.label, "entity": wizard.entity, "steps": len(wizard.steps)}
            for wizard in catalog.wizards.values()
        ],
    }


@router.get("/dashboard/bid-metrics")
async def get_bid_metrics() -> dict:
    service = get_sessions().services.dashboard
    try:
        metrics = await service.bid_metrics()
    except ApiError as exc:
        logger.warning("bid metrics unavailable: %s", exc)
        return {"metrics": None, "error": failure_message("load", "bid metrics")}
    return {"metrics": metrics, "error": None}
