from fastapi import APIRouter

from pi_dashboard.models.live import (
    CpuTemperature,
    CpuUsage,
    DiskUsage,
    ErrorResponse,
    FanSpeed,
    MemoryUsage,
    Uptime,
)
from pi_dashboard.services import host_monitor

router = APIRouter(
    responses={
        500: {"model": ErrorResponse, "description": "Counter text could not be parsed"},
        503: {"model": ErrorResponse, "description": "Counter source unavailable"},
    },
)

# Sync handlers: the blocking reads and df run in the threadpool.


@router.get("/cpu_temp", response_model=CpuTemperature, summary="CPU temperature")
def cpu_temperature() -> CpuTemperature:
    """Return the raw thermal zone reading (millidegrees Celsius on a Pi)."""
    return host_monitor.get_cpu_temperature()


@router.get("/fan_speed", response_model=FanSpeed, summary="Fan speed")
def fan_speed() -> FanSpeed:
    return host_monitor.get_fan_speed()


@router.get("/uptime", response_model=Uptime, summary="Uptime")
def uptime(best_effort: bool = False) -> Uptime:
    """
    Return milliseconds since boot.

    With ?best_effort=true a malformed uptime value is reported as 0 instead
    of an error.
    """
    return host_monitor.get_uptime(best_effort=best_effort)


@router.get("/memory", response_model=MemoryUsage, summary="Memory usage")
def memory() -> MemoryUsage:
    return host_monitor.get_memory_usage()


@router.get("/disk", response_model=DiskUsage, summary="Disk usage")
def disk() -> DiskUsage:
    return host_monitor.get_disk_usage()


@router.get("/cpu", response_model=CpuUsage, summary="CPU usage")
def cpu() -> CpuUsage:
    return host_monitor.get_cpu_usage()
