from typing import Optional

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    status: str = Field("ok", description="Always 'ok' while the process serves requests")
    sampler: str = Field(..., description="Sampler state, or 'disabled' when not running")
    sampler_last_error: Optional[str] = Field(None, description="Error of the last failed cycle")
    history_available: bool = Field(..., description="True if the history schema is in place")
