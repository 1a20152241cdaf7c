from __future__ import annotations

import copy
from typing import Any

from constructx.infrastructure.api import ApiClient
from constructx.infrastructure.mock_data import MOCK_BID_METRICS

from .base import as_list


class DashboardService:
    """Dashboards and widget data; bid metrics are served from mock data when enabled."""

    def __init__(self, api: ApiClient, *, use_mock_data: bool = False) -> None:
        self._api = api
        self._use_mock_data = use_mock_data

    async def bid_metrics(self, **filters: Any) -> dict:
        if self._use_mock_data:
            return copy.deepcopy(MOCK_BID_METRICS)
        return await self._api.get("/bids/metrics", params=filters)

    async def dashboards(self, project_id: str | None = None) -> list[dict]:
        return as_list(await self._api.get("/dashboards", params={"projectId": project_id}))

    async def widgets(self, dashboard_id: str) -> list[dict]:
        return as_list(await self._api.get(f"/dashboards/{dashboard_id}/widgets"))

    async def widget_data(self, widget_id: str) -> Any:
        return await self._api.get(f"/widgets/{widget_id}/data")
