"""
Tests for log utilities and request loggers
"""

import json

from core.config import Config
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, redact_headers, write_cli_log, write_upstream_log
from ui.plain import PlainLogger


def test_redact_headers():
    redacted = redact_headers(
        {
            "Authorization": "Bearer abcdefghijklmnop",
            "x-api-key": "short",
            "x-correlation-id": "c1",
        }
    )

    assert redacted["Authorization"] == "Bearer...mnop"
    assert redacted["x-api-key"] == "***"
    assert redacted["x-correlation-id"] == "c1"


def test_write_upstream_log(tmp_path):
    path = write_upstream_log(
        "POST",
        "http://backend.test/api/v1/auth/login",
        {"Authorization": "Bearer abcdefghijklmnop"},
        {"email": "a@b.c"},
        route="POST /auth/login",
        correlation_id="corr/1",
        log_root=tmp_path,
    )

    assert path.parent == tmp_path / "upstream" / "corr_1"
    payload = json.loads(path.read_text())
    assert payload["headers"]["Authorization"] == "Bearer...mnop"
    assert payload["body"] == {"email": "a@b.c"}


def test_clear_logs(tmp_path):
    write_upstream_log("GET", "u", {}, None, route="r", correlation_id="", log_root=tmp_path)

    assert clear_logs(tmp_path) == 1
    assert clear_logs(tmp_path / "missing") == 0


def test_write_cli_log(tmp_path):
    log_file = tmp_path / "gateway.log"

    write_cli_log("ERROR", "boom", log_file=log_file, route="GET /x", status=500)

    line = log_file.read_text()
    assert "ERROR: boom" in line
    assert "route=GET /x status=500" in line


def test_plain_logger_without_files(capsys):
    logger = PlainLogger(write_files=False)

    logger.log_request("GET", "http://backend.test/x", {}, route="GET /x", correlation_id="c1")
    logger.log_response("GET /x", 200, 12.3)
    logger.log_error("GET /x", 504, "UPSTREAM_TIMEOUT: slow")

    out = capsys.readouterr().out
    assert "http://backend.test/x" in out
    assert "504" in out


def test_dashboard_tracks_response_status():
    dashboard = Dashboard(Config())

    dashboard.log_response("GET /x", 404, 5.0)
    dashboard.log_response("GET /x", 201, 5.0)
    dashboard.log_response("GET /x", 304, 5.0)

    assert dashboard._status_count == {"2xx": 1, "3xx": 1, "4xx": 1, "5xx": 0}
