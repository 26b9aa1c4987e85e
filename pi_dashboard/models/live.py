from pydantic import BaseModel, Field


class CpuTemperature(BaseModel):
    """CPU thermal zone reading, in the unit the firmware reports."""

    cpu_temp: int = Field(
        ...,
        description="Raw thermal zone value, millidegrees Celsius on a Raspberry Pi",
    )


class FanSpeed(BaseModel):
    fan_speed: int = Field(..., description="Raw fan tachometer value in RPM")


class Uptime(BaseModel):
    uptime: int = Field(..., ge=0, description="Milliseconds since the system was booted")


class CpuUsage(BaseModel):
    """Busy share of all CPU time counted since boot."""

    cpu_usage: float = Field(
        ...,
        description="(total - idle) / total * 100 over the aggregate jiffies counters",
    )


class MemoryUsage(BaseModel):
    mem_used: int = Field(..., description="MemTotal - MemAvailable, in kB")
    mem_total: int = Field(..., ge=0, description="MemTotal, in kB")
    mem_percent: int = Field(..., description="mem_used / mem_total in percent, rounded half up")


class DiskUsage(BaseModel):
    """Disk usage as reported by the disk report utility (1K blocks)."""

    total: str = Field(..., description="Total size column of the disk report")
    used: str = Field(..., description="Used column of the disk report")
    free: str = Field(..., description="Available column of the disk report")
    percent: int = Field(..., description="used / total in percent, rounded half up")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human readable error message")
