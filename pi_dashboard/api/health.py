from fastapi import APIRouter, Request

from pi_dashboard.models.health import HealthStatus

router = APIRouter()


@router.get("", response_model=HealthStatus, summary="Service health")
async def health(request: Request) -> HealthStatus:
    sampler = getattr(request.app.state, "sampler", None)
    return HealthStatus(
        sampler=sampler.state.value if sampler is not None and sampler.running else "disabled",
        sampler_last_error=sampler.last_error if sampler is not None else None,
        history_available=getattr(request.app.state, "history_available", False),
    )
