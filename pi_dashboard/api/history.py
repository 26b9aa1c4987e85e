from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from pi_dashboard.config import get_settings
from pi_dashboard.errors import StoreError
from pi_dashboard.models.history import HistoryResponse
from pi_dashboard.models.live import ErrorResponse
from pi_dashboard.services import history_query
from pi_dashboard.services.history_store import HistoryStore

router = APIRouter()


def get_store(request: Request) -> HistoryStore:
    """Return the HistoryStore created by the application lifespan."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreError("history store is not initialised")
    return store


@router.get(
    "",
    response_model=HistoryResponse,
    summary="Snapshot history",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed range or limit"},
        503: {"model": ErrorResponse, "description": "History store unavailable"},
    },
)
def history(
    start: Optional[str] = Query(None, alias="from", description="ISO-8601 lower bound, default epoch"),
    end: Optional[str] = Query(None, alias="to", description="ISO-8601 upper bound or 'now', default now"),
    limit: Optional[int] = Query(None, description="Maximum number of rows, default 100"),
    store: HistoryStore = Depends(get_store),
) -> HistoryResponse:
    """
    Return stored snapshots with from <= timestamp <= to, most recent first.

    Snapshots are written by the background sampler once per sample interval.
    """
    return history_query.get_history(
        store,
        start=start,
        end=end,
        limit=limit,
        default_limit=get_settings().history_default_limit,
    )
