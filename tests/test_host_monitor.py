import pytest

from pi_dashboard.errors import ParseError, SourceUnavailable
from pi_dashboard.services import counters, host_monitor

DF_HEADER = (
    "Filesystem     1K-blocks    Used Available Use% Mounted on\n"
    "udev             3963752       0   3963752   0% /dev\n"
    "tmpfs             816032    1564    814468   1% /run\n"
)


def _disk_report(total, used, free):
    return DF_HEADER + f"/dev/root {total} {used} {free} 0% /\n"


def test_cpu_temperature_is_not_converted(monkeypatch):
    monkeypatch.setattr(counters, "read_thermal", lambda: "51540\n")

    assert host_monitor.get_cpu_temperature().cpu_temp == 51540


def test_fan_speed(monkeypatch):
    monkeypatch.setattr(counters, "read_fan", lambda: "2780\n")

    assert host_monitor.get_fan_speed().fan_speed == 2780


def test_uptime_is_floored_to_milliseconds(monkeypatch):
    monkeypatch.setattr(counters, "read_uptime", lambda: "350735.4767 1395401.19\n")

    assert host_monitor.get_uptime().uptime == 350735476


def test_uptime_malformed_is_an_error_by_default(monkeypatch):
    monkeypatch.setattr(counters, "read_uptime", lambda: "\n")

    with pytest.raises(ParseError):
        host_monitor.get_uptime()


def test_uptime_best_effort_falls_back_to_zero(monkeypatch):
    monkeypatch.setattr(counters, "read_uptime", lambda: "garbage")

    assert host_monitor.get_uptime(best_effort=True).uptime == 0


def test_uptime_best_effort_still_reports_missing_source(monkeypatch):
    def missing():
        raise SourceUnavailable("cannot read /proc/uptime")

    monkeypatch.setattr(counters, "read_uptime", missing)

    with pytest.raises(SourceUnavailable):
        host_monitor.get_uptime(best_effort=True)


def test_cpu_usage_is_ratio_against_idle(monkeypatch):
    monkeypatch.setattr(counters, "read_cpu_stat", lambda: "cpu  100 0 50 700 20 5 5\n")

    usage = host_monitor.get_cpu_usage().cpu_usage
    assert usage == pytest.approx((880 - 700) / 880 * 100)
    assert usage == pytest.approx(20.4545, abs=1e-4)


def test_cpu_usage_all_idle_is_zero(monkeypatch):
    monkeypatch.setattr(counters, "read_cpu_stat", lambda: "cpu  0 0 0 500 0 0 0\n")

    assert host_monitor.get_cpu_usage().cpu_usage == 0.0


def test_cpu_usage_zero_total_is_an_error(monkeypatch):
    monkeypatch.setattr(counters, "read_cpu_stat", lambda: "cpu  0 0 0 0 0 0 0\n")

    with pytest.raises(ParseError):
        host_monitor.get_cpu_usage()


def test_memory_usage(monkeypatch):
    monkeypatch.setattr(
        counters,
        "read_meminfo",
        lambda: "MemTotal: 1000 kB\nMemFree: 100 kB\nMemAvailable: 400 kB\n",
    )

    memory = host_monitor.get_memory_usage()
    assert memory.mem_total == 1000
    assert memory.mem_used == 600
    assert memory.mem_percent == 60


def test_memory_zero_total_is_an_error(monkeypatch):
    monkeypatch.setattr(counters, "read_meminfo", lambda: "MemTotal: 0 kB\nMemAvailable: 0 kB\n")

    with pytest.raises(ParseError):
        host_monitor.get_memory_usage()


@pytest.mark.parametrize(
    "total, used, percent",
    [
        ("100", "33", 33),
        ("100", "34", 34),
        ("8", "1", 13),  # 12.5 rounds up
        ("8", "3", 38),  # 37.5 rounds up
        ("200", "1", 1),  # 0.5 rounds up
        ("3", "1", 33),
        ("3", "2", 67),
    ],
)
def test_disk_usage_rounds_half_up(monkeypatch, total, used, percent):
    monkeypatch.setattr(counters, "read_disk_report", lambda: _disk_report(total, used, "0"))

    disk = host_monitor.get_disk_usage()
    assert disk.total == total
    assert disk.used == used
    assert disk.free == "0"
    assert disk.percent == percent


def test_disk_usage_non_numeric_is_parse_error(monkeypatch):
    monkeypatch.setattr(counters, "read_disk_report", lambda: _disk_report("30G", "7G", "21G"))

    with pytest.raises(ParseError):
        host_monitor.get_disk_usage()


def test_disk_zero_total_is_an_error(monkeypatch):
    monkeypatch.setattr(counters, "read_disk_report", lambda: _disk_report("0", "0", "0"))

    with pytest.raises(ParseError):
        host_monitor.get_disk_usage()


def test_round_percent_matches_exact_halves():
    assert host_monitor.round_percent(1, 8, "x") == 13
    assert host_monitor.round_percent(5, 1000, "x") == 1
    assert host_monitor.round_percent(4, 1000, "x") == 0
    assert host_monitor.round_percent(0, 10, "x") == 0
    assert host_monitor.round_percent(10, 10, "x") == 100
