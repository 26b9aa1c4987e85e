import asyncio
import enum
import logging
from typing import Optional

from pi_dashboard.errors import TelemetryError
from pi_dashboard.models.history import NewSnapshot, Snapshot
from pi_dashboard.services import host_monitor
from pi_dashboard.services.history_store import HistoryStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0


class SamplerState(str, enum.Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    PERSISTING = "persisting"


class Sampler:
    """
    Periodically derive CPU, memory and disk usage and append one snapshot.

    Cycles run strictly one after another: sample, persist, sleep, repeat.
    A failing cycle is logged and the loop carries on with the next one.
    """

    def __init__(self, store: HistoryStore, interval_seconds: float = DEFAULT_INTERVAL_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.store = store
        self.interval_seconds = interval_seconds
        self.state = SamplerState.IDLE
        self.last_error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_cycle(self) -> Optional[Snapshot]:
        """Run one sample-and-persist cycle; return the stored row or None."""
        try:
            self.state = SamplerState.SAMPLING
            cpu = host_monitor.get_cpu_usage()
            memory = host_monitor.get_memory_usage()
            disk = host_monitor.get_disk_usage()
            snapshot = NewSnapshot(
                cpu_usage=cpu.cpu_usage,
                mem_total=memory.mem_total,
                mem_used=memory.mem_used,
                disk_total=int(disk.total),
                disk_used=int(disk.used),
                disk_free=int(disk.free),
            )

            self.state = SamplerState.PERSISTING
            stored = self.store.append(snapshot)
        except TelemetryError as exc:
            self.last_error = f"{type(exc).__name__}: {exc}"
            logger.warning(
                "sampler cycle failed: %s",
                self.last_error,
                extra={"event": "sampler_cycle_failed"},
            )
            return None
        finally:
            self.state = SamplerState.IDLE

        self.last_error = None
        logger.debug("stored snapshot %d", stored.id, extra={"event": "sampler_cycle_done"})
        return stored

    async def run_forever(self) -> None:
        logger.info(
            "sampler started, interval %.1fs",
            self.interval_seconds,
            extra={"event": "sampler_started"},
        )
        while True:
            try:
                await asyncio.to_thread(self.run_cycle)
            except Exception as exc:
                self.last_error = f"{type(exc).__name__}: {exc}"
                logger.exception("unexpected sampler error", extra={"event": "sampler_crashed_cycle"})
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> asyncio.Task:
        """Schedule run_forever on the running event loop (idempotent)."""
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self.run_forever())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("sampler stopped", extra={"event": "sampler_stopped"})
