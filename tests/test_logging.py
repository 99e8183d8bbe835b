import json
import logging
import sys

from hokies.logging import MaskingFilter, JsonFormatter, mask_data


def test_request_id_header_and_propagation(client):
    resp = client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_logs_include_request_id_attribute(client, caplog):
    caplog.set_level("INFO")
    resp = client.get("/__log", headers={"X-Request-ID": "rid-abc"})
    assert resp.status_code == 200
    assert any(getattr(r, "request_id", "") == "rid-abc" for r in caplog.records)


def test_mask_data_recurses():
    masked = mask_data({
        "customer_email": "casey@example.com",
        "shipping_address": {"street": "800 Drillfield Dr"},
        "items": [{"Password": "x", "name": "Hoodie"}],
    })
    assert masked == {
        "customer_email": "[REDACTED]",
        "shipping_address": {"street": "800 Drillfield Dr"},
        "items": [{"Password": "[REDACTED]", "name": "Hoodie"}],
    }


def test_sensitive_fields_masked_in_info(app, caplog):
    caplog.set_level("INFO")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test")
    logger.info({"email": "seller@vt.edu", "payment_method_id": "pm_123", "item": "hoodie"})
    record = next(r for r in caplog.records if r.name == "mask_test")
    assert isinstance(record.msg, dict)
    assert record.msg["email"] == "[REDACTED]"
    assert record.msg["payment_method_id"] == "[REDACTED]"
    assert record.msg["item"] == "hoodie"


def test_sensitive_fields_visible_in_debug(monkeypatch, app, caplog):
    monkeypatch.setenv("APP_ENV", "development")
    caplog.set_level("DEBUG")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test_debug")
    logger.debug({"password": "secret"})
    record = next(r for r in caplog.records if r.name == "mask_test_debug")
    assert record.msg["password"] == "secret"


def test_debug_masked_in_production(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    record = logging.LogRecord("x", logging.DEBUG, __file__, 1, {"token": "abc"}, None, None)
    MaskingFilter().filter(record)
    assert record.msg["token"] == "[REDACTED]"


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad drop")
    except ValueError:
        record = logging.LogRecord("hokies", logging.ERROR, __file__, 1, "sweep failed", None, sys.exc_info())
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "sweep failed"
    assert payload["service"] == "hokies-thrift"
    assert payload["level"] == "ERROR"
    assert "ValueError: bad drop" in payload["exception"]
