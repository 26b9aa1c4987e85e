import math

from pi_dashboard.errors import ParseError
from pi_dashboard.models.live import (
    CpuTemperature,
    CpuUsage,
    DiskUsage,
    FanSpeed,
    MemoryUsage,
    Uptime,
)
from pi_dashboard.services import counter_parser, counters


def round_percent(part: int, whole: int, what: str) -> int:
    """
    Return ``part / whole * 100`` rounded half up, in exact integer math.

    ``round_percent(1, 8, ...)`` is 13 (12.5 rounds up), unlike the builtin
    round(), which rounds half to even.
    """
    if whole == 0:
        raise ParseError(f"{what} total is zero")
    return (part * 200 + whole) // (2 * whole)


def get_cpu_temperature() -> CpuTemperature:
    """Thermal zone value as reported, without unit conversion."""
    raw = counters.read_thermal()
    return CpuTemperature(cpu_temp=counter_parser.parse_int(raw, "cpu temperature"))


def get_fan_speed() -> FanSpeed:
    raw = counters.read_fan()
    return FanSpeed(fan_speed=counter_parser.parse_int(raw, "fan speed"))


def get_uptime(best_effort: bool = False) -> Uptime:
    """
    Return the time since boot in whole milliseconds.

    With best_effort=True a missing or malformed uptime field yields 0
    instead of a ParseError. An unreadable uptime source is always an error.
    """
    raw = counters.read_uptime()
    try:
        seconds = counter_parser.parse_uptime_seconds(raw)
    except ParseError:
        if not best_effort:
            raise
        seconds = 0.0
    return Uptime(uptime=math.floor(seconds * 1000))


def get_cpu_usage() -> CpuUsage:
    """
    Return the busy share of all CPU time counted since boot.

    This is a single-sample ratio against idle, not a rate between two
    samples, so it moves slowly on a long running system.
    """
    times = counter_parser.parse_cpu_times(counters.read_cpu_stat())
    total = times.total
    if total == 0:
        raise ParseError("cpu counters total is zero")
    return CpuUsage(cpu_usage=(total - times.idle) / total * 100)


def get_memory_usage() -> MemoryUsage:
    total, available = counter_parser.parse_meminfo(counters.read_meminfo())
    used = total - available
    return MemoryUsage(
        mem_used=used,
        mem_total=total,
        mem_percent=round_percent(used, total, "memory"),
    )


def get_disk_usage() -> DiskUsage:
    report = counter_parser.parse_disk_report(counters.read_disk_report())
    return DiskUsage(
        total=report.total,
        used=report.used,
        free=report.free,
        percent=round_percent(int(report.used), int(report.total), "disk"),
    )
