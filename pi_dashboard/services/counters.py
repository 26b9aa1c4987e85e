import logging
import subprocess
from pathlib import Path

from pi_dashboard.errors import SourceUnavailable

logger = logging.getLogger(__name__)

# Fixed counter sources of a Raspberry Pi 5 running Raspberry Pi OS.
THERMAL_PATH = "/sys/class/thermal/thermal_zone0/temp"
FAN_PATH = "/sys/devices/platform/cooling_fan/hwmon/hwmon2/fan1_input"
UPTIME_PATH = "/proc/uptime"
CPU_STAT_PATH = "/proc/stat"
MEMINFO_PATH = "/proc/meminfo"
DISK_REPORT_COMMAND = ["df"]

# df can block on unreachable network mounts
_DISK_REPORT_TIMEOUT_SECONDS = 10


def _read_source(path: str) -> str:
    """
    Return the full text of a counter file.

    Missing files, permission problems and other I/O errors are reported as
    SourceUnavailable so that callers never see a bare OSError.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("counter source %s unreadable: %s", path, exc)
        raise SourceUnavailable(f"cannot read {path}: {exc}") from exc


def read_thermal() -> str:
    return _read_source(THERMAL_PATH)


def read_fan() -> str:
    return _read_source(FAN_PATH)


def read_uptime() -> str:
    return _read_source(UPTIME_PATH)


def read_cpu_stat() -> str:
    return _read_source(CPU_STAT_PATH)


def read_meminfo() -> str:
    return _read_source(MEMINFO_PATH)


def read_disk_report() -> str:
    """
    Run the disk report utility without arguments and return its stdout.

    Raises SourceUnavailable if the binary is missing, exits non-zero, hangs
    or writes output that is not valid text.
    """
    try:
        result = subprocess.run(
            DISK_REPORT_COMMAND,
            check=True,
            capture_output=True,
            text=True,
            timeout=_DISK_REPORT_TIMEOUT_SECONDS,
        )
    except FileNotFoundError as exc:
        raise SourceUnavailable(
            f"{DISK_REPORT_COMMAND[0]} binary not found on host system"
        ) from exc
    except subprocess.CalledProcessError as exc:
        raise SourceUnavailable(
            f"{DISK_REPORT_COMMAND[0]} failed with return code {exc.returncode}: {exc.stderr}"
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise SourceUnavailable(
            f"{DISK_REPORT_COMMAND[0]} did not finish within {exc.timeout} seconds"
        ) from exc
    except UnicodeDecodeError as exc:
        raise SourceUnavailable(
            f"{DISK_REPORT_COMMAND[0]} produced undecodable output"
        ) from exc

    return result.stdout
