import json
import logging

from app.config.logging import JSONFormatter, build_logging_config


def test_json_formatter_keeps_structured_fields():
    record = logging.LogRecord("app.services.waitlist", logging.WARNING, __file__, 10, "offer %s failed", ("offer-1",), None)
    record.offer_id = "offer-1"
    record.errors = 2
    record.unrelated = "dropped"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "offer offer-1 failed"
    assert payload["level"] == "WARNING"
    assert payload["offer_id"] == "offer-1"
    assert payload["errors"] == 2
    assert "unrelated" not in payload


def test_console_uses_json_formatter_when_enabled(tmp_path):
    config = build_logging_config(str(tmp_path), "debug", use_json=True)

    assert config["handlers"]["console"]["formatter"] == "json"
    assert config["loggers"][""]["level"] == "DEBUG"
    assert config["handlers"]["file"]["filename"] == str(tmp_path / "waitlist.log")


def test_plain_console_by_default(tmp_path):
    assert build_logging_config(str(tmp_path), "INFO")["handlers"]["console"]["formatter"] == "simple"
