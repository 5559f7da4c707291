import json

import pytest
import requests

from backup_mailer.errors import NotifyError
from backup_mailer.notifications.message import (
    Attachment,
    build_payload,
    build_subject,
    render_html_body,
)
from backup_mailer.notifications.sendgrid import SendGridClient

from fakes import TIMESTAMP, FakeSession


def test_subject_uses_prefix_database_and_timestamp(make_settings):
    settings = make_settings(subject_prefix="[Production]")

    assert build_subject(settings, TIMESTAMP) == "[Production]: orders at 2024-01-01_00-00-00"


def test_payload_shape(settings):
    attachment = Attachment(filename="orders_backup.zip", content="UEsDBA==")

    payload = build_payload(settings, TIMESTAMP, attachment)

    assert payload["personalizations"] == [{"to": [{"email": "ops@example.com"}]}]
    assert payload["from"] == {"email": "backups@example.com"}
    assert payload["content"][0]["type"] == "text/html"
    assert payload["attachments"] == [
        {"content": "UEsDBA==", "type": "application/zip", "filename": "orders_backup.zip"}
    ]


def test_untrusted_values_survive_json_and_are_html_escaped(make_settings):
    settings = make_settings(
        database_name='<script>alert("x")</script>', subject_prefix='Pre"fix'
    )
    payload = build_payload(settings, TIMESTAMP, Attachment(filename="a.zip", content=""))

    decoded = json.loads(json.dumps(payload))

    assert decoded["subject"].startswith('Pre"fix: <script>')
    body = decoded["content"][0]["value"]
    assert "<script>" not in body
    assert "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;" in body


def test_body_lists_auth_db_but_never_credentials(auth_settings, settings):
    body = render_html_body(auth_settings, TIMESTAMP)

    assert "Auth DB" in body
    assert "admin" in body
    assert "localhost:27017" in body
    assert "hunter2-secret" not in body
    assert "backup-user" not in body
    assert "Auth DB" not in render_html_body(settings, TIMESTAMP)


def test_send_persists_response_and_returns_status(tmp_path):
    session = FakeSession(status_code=202)
    client = SendGridClient(api_key="SG.key", timeout=5, session=session)
    response_file = tmp_path / "sendgrid_response.json"

    status = client.send({"subject": "hi"}, response_file)

    assert status == 202
    assert response_file.read_bytes() == b""
    assert session.headers["Authorization"] == "Bearer SG.key"
    assert session.calls[0]["json"] == {"subject": "hi"}
    assert session.calls[0]["timeout"] == 5


def test_rate_limited_response_is_a_notify_error(tmp_path):
    body = b'{"errors":[{"message":"too many requests"}]}'
    client = SendGridClient(api_key="SG.key", session=FakeSession(429, body))
    response_file = tmp_path / "sendgrid_response.json"

    with pytest.raises(NotifyError) as excinfo:
        client.send({}, response_file)

    assert excinfo.value.status_code == 429
    assert excinfo.value.response_file == response_file
    assert str(response_file) in str(excinfo.value)
    assert response_file.read_bytes() == body


def test_transport_failure_is_a_notify_error(tmp_path):
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    client = SendGridClient(api_key="SG.key", session=session)

    with pytest.raises(NotifyError, match="connection refused"):
        client.send({}, tmp_path / "r.json")
