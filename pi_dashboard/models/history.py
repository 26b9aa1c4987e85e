from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NewSnapshot(BaseModel):
    """Values of a snapshot before the store assigns its id."""

    model_config = ConfigDict(frozen=True)

    cpu_usage: float = Field(..., description="CPU usage in percent")
    mem_total: int = Field(..., description="MemTotal in kB")
    mem_used: int = Field(..., description="MemTotal - MemAvailable in kB")
    disk_total: int = Field(..., description="Disk size in 1K blocks")
    disk_used: int = Field(..., description="Used disk space in 1K blocks")
    disk_free: int = Field(..., description="Available disk space in 1K blocks")
    timestamp: Optional[datetime] = Field(
        None,
        description="Observation time; the store uses the insertion time when omitted",
    )


class Snapshot(BaseModel):
    """One persisted row of the metrics history."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Store assigned identity, never reused")
    cpu_usage: float
    mem_total: int
    mem_used: int
    disk_total: int
    disk_used: int
    disk_free: int
    timestamp: datetime = Field(..., description="UTC observation time")


class HistoryResponse(BaseModel):
    data: List[Snapshot] = Field(
        default_factory=list,
        description="Snapshots in the requested range, most recent first",
    )
