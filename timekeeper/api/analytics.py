"""Analytics collection endpoints."""

from fastapi import APIRouter, Depends

from timekeeper.analytics.aggregator import compute_kpis
from timekeeper.api.meetings import get_store
from timekeeper.db.json_store import JsonStore
from timekeeper.models.analytics import AnalyticsLog, KPISummary

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("")
async def get_analytics(store: JsonStore = Depends(get_store)) -> dict:
    """Return the completion log and running totals."""
    return await store.get_analytics()


@router.put("")
async def replace_analytics(
    analytics: AnalyticsLog,
    store: JsonStore = Depends(get_store),
) -> dict:
    """Replace the completion log and running totals."""
    return await store.set_analytics(analytics.to_document())


@router.get("/kpis", response_model=KPISummary, response_model_by_alias=True)
async def get_kpis(store: JsonStore = Depends(get_store)) -> KPISummary:
    """KPIs computed from the stored completion log."""
    log = AnalyticsLog.model_validate(await store.get_analytics())
    return compute_kpis(log.completed_meetings)
