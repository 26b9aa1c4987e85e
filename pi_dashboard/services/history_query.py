from datetime import datetime, timezone
from typing import Optional

from pi_dashboard.errors import InvalidRequest, StoreError
from pi_dashboard.models.history import HistoryResponse
from pi_dashboard.services.history_store import DEFAULT_LIMIT, EPOCH, MAX_LIMIT, HistoryStore

NOW_TOKEN = "now"


def parse_instant(value: str, name: str) -> datetime:
    """
    Parse an ISO-8601 instant from a query parameter.

    A trailing ``Z`` is accepted, and values without an offset are taken to
    be UTC. The result is always in UTC. The literal ``now`` resolves to
    the current time.
    """
    text = value.strip()
    if text.lower() == NOW_TOKEN:
        return datetime.now(timezone.utc)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidRequest(f"'{name}' is not an ISO-8601 instant: {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise InvalidRequest(f"'{name}' is outside the supported time range: {value!r}") from exc


def get_history(
    store: HistoryStore,
    start: Optional[str] = None,
    end: Optional[str] = None,
    limit: Optional[int] = None,
    default_limit: int = DEFAULT_LIMIT,
) -> HistoryResponse:
    """
    Return stored snapshots within [start, end], most recent first.

    A missing start means the epoch and a missing end means the time the
    query runs. Any store failure is reported as StoreError.
    """
    lower = parse_instant(start, "from") if start else EPOCH
    upper = parse_instant(end, "to") if end else datetime.now(timezone.utc)
    if lower > upper:
        raise InvalidRequest("'from' must not be later than 'to'")

    if limit is None:
        limit = default_limit
    if not 1 <= limit <= MAX_LIMIT:
        raise InvalidRequest(f"'limit' must be between 1 and {MAX_LIMIT}, got {limit}")

    try:
        rows = store.query(lower, upper, limit)
    except StoreError as exc:
        raise StoreError(f"history unavailable: {exc}") from exc

    return HistoryResponse(data=rows)
