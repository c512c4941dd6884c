import logging

from fmw2.api.middleware import template_for_path
from fmw2.config import settings


def test_health_and_request_id(client):
    resp = client.get("/health", headers={"x-request-id": "abc123"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["x-request-id"] == "abc123"


def test_template_listing_and_schema(client):
    listing = client.get("/templates").json()
    assert [t["key"] for t in listing][:2] == ["offAwarded", "offTemplate"]
    assert {"key": "guardDuty", "name": "Guard Duty Template", "custom_ui": True} in listing

    schema = client.get("/templates/offTemplate").json()
    time_off = next(f for f in schema["fields"] if f["key"] == "timeOff")
    assert time_off["show_if"] == {"key": "isHalfDay", "equals": "true"}
    assert time_off["options"] == ["AM", "PM"]
    assert schema["defaults"] == {"recommendedBy": "ME3 Alex"}

    missing = client.get("/templates/payslip")
    assert missing.status_code == 404
    assert missing.json()["error"] == "unknown_template"


def test_generate_records_a_log_row(client, off_values):
    resp = client.post(
        "/templates/offTemplate/generate",
        json={"values": off_values, "today": "2025-06-03"},
        headers={"user-agent": "fmw2-tests"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["template_type"] == "Leave/Off Application Template"
    assert "• Dates: 3 June to 5 June" in body["text"]

    rows = client.get("/api/logs").json()["rows"]
    assert len(rows) == 1
    assert rows[0]["template"] == "offTemplate"
    assert rows[0]["user_agent"] == "fmw2-tests"
    assert rows[0]["fields"]["name"] == "tan ah kow"


def test_validation_errors_map_to_422(client, off_values):
    del off_values["name"]
    resp = client.post("/templates/offTemplate/generate", json={"values": off_values})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "missing_field"
    assert body["label"] == "Name"
    assert body["detail"] == 'Please fill in the "Name" field.'
    assert "request_id" in body

    assert client.get("/api/logs").json()["rows"] == []


def test_custom_template_on_flat_path_is_400(client):
    resp = client.post("/templates/routineOrder/generate", json={"values": {}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "unsupported_template"


def test_guard_duty_endpoints(client):
    resp = client.post(
        "/guard-duty/generate",
        json={"month": 1, "year": 2026, "entries": [{"date": "2026-02-07", "ic_types": ["2IC"], "num_guards": 2}]},
    )
    assert resp.status_code == 200
    text = resp.json()["text"]
    assert text.startswith("GUARD DUTY FEBRUARY 2026\n7/2 (SATURDAY)\n2IC: ")

    empty = client.post("/guard-duty/generate", json={"month": 1, "year": 2026, "entries": []})
    assert empty.status_code == 422
    assert empty.json()["error"] == "no_entries"

    dup = client.post(
        "/guard-duty/generate",
        json={"month": 1, "year": 2026, "entries": [{"date": "2026-02-07"}, {"date": "2026-02-07"}]},
    )
    assert dup.status_code == 422
    assert dup.json()["error"] == "duplicate_date"

    pruned = client.post("/guard-duty/prune", json={"text": text, "today": "2026-02-08"})
    assert pruned.json() == {"text": "GUARD DUTY FEBRUARY 2026"}


def test_routine_order_endpoints(client):
    resized = client.post(
        "/routine-order/entries",
        json={"today": "2025-06-06", "entries": [{"date": "2025-06-06", "dfo": "LTA Ong"}]},
    )
    assert resized.status_code == 200
    body = resized.json()
    assert body["span_days"] == 4
    assert [e["date"] for e in body["entries"]] == ["2025-06-06", "2025-06-07", "2025-06-08", "2025-06-09"]
    assert body["entries"][0]["dfo"] == "LTA Ong"

    bad_span = client.post("/routine-order/entries", json={"span_days": 5, "entries": []})
    assert bad_span.status_code == 422

    resp = client.post(
        "/routine-order/generate",
        json={"today": "2025-06-06", "safety_message": "stay hydrated", "entries": body["entries"]},
    )
    assert resp.status_code == 200
    text = resp.json()["text"]
    assert text.startswith("**11FMD DRO FRIDAY 06/06/2025**")
    assert "STAY HYDRATED" in text
    assert "DFO- LTA Ong" in text


def test_log_endpoint_auth(client, monkeypatch):
    monkeypatch.setattr(settings.security, "api_token", "s3cret")
    payload = {"template": "nightStrength", "fields": {"blk210": "30"}, "template_type": "Night Strength"}

    assert client.post("/api/logs", json=payload).status_code == 401

    resp = client.post("/api/logs", json=payload, headers={"X-API-Key": "s3cret", "user-agent": "phone"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    rows = client.get("/api/logs", headers={"Authorization": "Bearer s3cret"}).json()["rows"]
    assert rows[0]["user_agent"] == "phone"


def test_log_endpoint_rejects_empty_template(client):
    assert client.post("/api/logs", json={"template": "", "fields": {}}).status_code == 422


def test_oversized_paste_is_refused(client, monkeypatch):
    monkeypatch.setattr(settings.security, "max_body_kb", 1)
    resp = client.post("/guard-duty/prune", json={"text": "x" * 4096}, headers={"x-request-id": "big1"})
    assert resp.status_code == 413
    body = resp.json()
    assert body["error"] == "request_too_large"
    assert body["request_id"] == "big1"
    assert resp.headers["x-request-id"] == "big1"

    assert client.post("/guard-duty/prune", json={"text": "x" * 512}).status_code == 200


def test_request_log_names_the_template(client, off_values, caplog):
    caplog.set_level(logging.INFO, logger="fmw2.api.requests")
    client.post("/templates/offTemplate/generate", json={"values": off_values, "today": "2025-06-03"})
    client.post("/guard-duty/prune", json={"text": ""})
    client.get("/health")

    records = [r for r in caplog.records if r.name == "fmw2.api.requests" and r.getMessage() == "request"]
    assert [(r.path, r.template, r.status) for r in records] == [
        ("/templates/offTemplate/generate", "offTemplate", 200),
        ("/guard-duty/prune", "guardDuty", 200),
        ("/health", None, 200),
    ]


def test_template_for_path():
    assert template_for_path("/templates/hullBOS/generate") == "hullBOS"
    assert template_for_path("/routine-order/entries") == "routineOrder"
    assert template_for_path("/templates") is None
    assert template_for_path("/api/logs") is None
