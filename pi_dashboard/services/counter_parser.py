"""
Parsers for raw kernel counter text and disk report output.

Every function takes the text produced by one of the readers in
``counters`` and either returns typed values or raises ParseError. Split
results are never indexed without a length check.
"""

import math
from typing import NamedTuple, Tuple

from pi_dashboard.errors import ParseError

# Rows 0-2 of the disk report are the header and mounts we do not report on.
DISK_REPORT_ROW = 3

_CPU_LINE_PREFIX = "cpu "
_CPU_FIELD_COUNT = 7


class CpuTimes(NamedTuple):
    """Aggregate CPU time counters in jiffies."""

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int

    @property
    def total(self) -> int:
        return sum(self)


class DiskReport(NamedTuple):
    """Columns of the disk report data row, kept as the tool printed them."""

    total: str
    used: str
    free: str


def parse_int(text: str, source: str) -> int:
    value = text.strip()
    if not value:
        raise ParseError(f"{source} is empty")
    try:
        return int(value)
    except ValueError as exc:
        raise ParseError(f"{source} is not an integer: {value!r}") from exc


def parse_uptime_seconds(text: str) -> float:
    fields = text.split()
    if not fields:
        raise ParseError("uptime is empty")
    try:
        seconds = float(fields[0])
    except ValueError as exc:
        raise ParseError(f"uptime is not a number: {fields[0]!r}") from exc
    if not math.isfinite(seconds) or seconds < 0:
        raise ParseError(f"uptime out of range: {fields[0]!r}")
    return seconds


def parse_cpu_times(stat_text: str) -> CpuTimes:
    """
    Extract the aggregate ``cpu `` line and return its first seven counters.

    Per-core lines (``cpu0``, ``cpu1``...) are ignored. Kernels that report
    steal/guest columns have more than seven fields; the extra ones are not
    used.
    """
    line = next(
        (ln for ln in stat_text.splitlines() if ln.startswith(_CPU_LINE_PREFIX)),
        None,
    )
    if line is None:
        raise ParseError("no aggregate cpu line in stat counters")

    fields = line.split()[1:]
    if len(fields) < _CPU_FIELD_COUNT:
        raise ParseError(
            f"cpu line has {len(fields)} counters, expected at least {_CPU_FIELD_COUNT}"
        )

    values = []
    for raw in fields[:_CPU_FIELD_COUNT]:
        if not (raw.isascii() and raw.isdigit()):
            raise ParseError(f"cpu counter is not an unsigned integer: {raw!r}")
        values.append(int(raw))

    return CpuTimes(*values)


def parse_meminfo(text: str) -> Tuple[int, int]:
    """Return ``(MemTotal, MemAvailable)`` in kB."""
    found = {}
    for line in text.splitlines():
        for key in ("MemTotal:", "MemAvailable:"):
            if line.startswith(key):
                parts = line.split()
                if len(parts) < 2:
                    raise ParseError(f"{key} has no value")
                found[key] = parse_int(parts[1], key)

    for key in ("MemTotal:", "MemAvailable:"):
        if key not in found:
            raise ParseError(f"{key} missing from memory counters")

    return found["MemTotal:"], found["MemAvailable:"]


def parse_disk_report(text: str) -> DiskReport:
    lines = text.splitlines()
    if len(lines) <= DISK_REPORT_ROW:
        raise ParseError(
            f"disk report has {len(lines)} lines, expected a data row at line {DISK_REPORT_ROW + 1}"
        )

    columns = lines[DISK_REPORT_ROW].split()
    if len(columns) < 4:
        raise ParseError(f"disk report row has {len(columns)} columns, expected at least 4")

    total, used, free = columns[1:4]
    for name, value in (("total", total), ("used", used), ("free", free)):
        if not (value.isascii() and value.isdigit()):
            raise ParseError(f"disk {name} is not numeric: {value!r}")

    return DiskReport(total=total, used=used, free=free)
