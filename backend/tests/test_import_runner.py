"""Import CLI: error reporting for failed uploads."""

import json
from unittest.mock import patch

import pytest
import requests

import import_runner


def _response(status, body, reason):
    resp = requests.models.Response()
    resp.status_code = status
    resp.reason = reason
    resp._content = body
    return resp


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "statement.csv"
    path.write_text("Date,Description,Amount,Currency\n01-01-2024,Coffee,10,USD\n")
    return path


def test_upload_failure_with_html_body_reports_text(csv_file):
    resp = _response(502, b"<html>Bad gateway</html>\n", "Bad Gateway")

    with patch("import_runner.requests.post", return_value=resp):
        with pytest.raises(RuntimeError, match="^502: <html>Bad gateway</html>$"):
            import_runner.upload_csv(csv_file)


def test_upload_failure_with_empty_body_reports_reason(csv_file):
    resp = _response(503, b"", "Service Unavailable")

    with patch("import_runner.requests.post", return_value=resp):
        with pytest.raises(RuntimeError, match="^503: Service Unavailable$"):
            import_runner.upload_csv(csv_file)


def test_upload_failure_with_json_error_reports_message(csv_file):
    body = {"message": "Error saving transactions", "error": "disk full"}
    resp = _response(500, json.dumps(body).encode(), "Internal Server Error")

    with patch("import_runner.requests.post", return_value=resp):
        with pytest.raises(RuntimeError) as exc_info:
            import_runner.upload_csv(csv_file)

    assert str(exc_info.value) == "500: Error saving transactions (disk full)"


def test_upload_success_returns_report(csv_file):
    body = {"inserted": 1, "degraded": 0, "rejected": []}
    resp = _response(201, json.dumps(body).encode(), "Created")

    with patch("import_runner.requests.post", return_value=resp) as post:
        assert import_runner.upload_csv(csv_file) == body

    assert post.call_args.args[0].endswith("/transactions/upload")
