import json
import logging
import sys

from pi_dashboard.logging_setup import JsonFormatter, configure_logging


def test_json_formatter_includes_event_and_exception():
    try:
        raise OSError("disk I/O error")
    except OSError:
        record = logging.getLogger("pi_dashboard.test").makeRecord(
            "pi_dashboard.test",
            logging.WARNING,
            __file__,
            1,
            "sampler cycle failed: %s",
            ("boom",),
            exc_info=sys.exc_info(),
            extra={"event": "sampler_cycle_failed"},
        )

    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "pi_dashboard.test"
    assert payload["msg"] == "sampler cycle failed: boom"
    assert payload["event"] == "sampler_cycle_failed"
    assert "disk I/O error" in payload["exc"]


def test_configure_logging_adds_a_single_handler():
    logger = configure_logging("DEBUG")
    handlers = list(logger.handlers)

    try:
        again = configure_logging("WARNING")

        assert again is logger
        assert logger.handlers == handlers
        assert logger.level == logging.WARNING
    finally:
        logger.setLevel(logging.INFO)
