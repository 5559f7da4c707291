from __future__ import annotations

import html
from dataclasses import dataclass

from ..config import Settings

ATTACHMENT_MIME_TYPE = "application/zip"

_AUTH_ROW = (
    "<tr><td style='padding:6px 0; color:#6b7280;'>Auth DB</td>"
    "<td style='padding:6px 0; color:#111827;'>{auth_db}</td></tr>"
)

_HTML_TEMPLATE = (
    "<!DOCTYPE html><html><body style='margin:0; padding:0; background:#f4f5f7; "
    "font-family:Arial, sans-serif;'>"
    "<div style='max-width:600px; margin:40px auto; background:#ffffff; "
    "border-radius:12px; box-shadow:0 4px 16px rgba(15,23,42,0.12); overflow:hidden;'>"
    "<div style='padding:20px 24px; background:#0f172a; color:#ffffff;'>"
    "<h1 style='margin:0; font-size:18px;'>MongoDB Backup Completed</h1>"
    "<p style='margin:4px 0 0 0; font-size:13px; opacity:0.85;'>{tagline}</p></div>"
    "<div style='padding:24px 28px;'>"
    "<p style='font-size:14px; color:#111827; margin-top:0;'>A new backup has been "
    "created for the database <strong>{database}</strong>.</p>"
    "<table style='width:100%; border-collapse:collapse; margin:16px 0; font-size:13px;'>"
    "<tr><td style='padding:6px 0; color:#6b7280; width:120px;'>Database</td>"
    "<td style='padding:6px 0; color:#111827;'><strong>{database}</strong></td></tr>"
    "<tr><td style='padding:6px 0; color:#6b7280;'>Created at</td>"
    "<td style='padding:6px 0; color:#111827;'><strong>{timestamp}</strong></td></tr>"
    "<tr><td style='padding:6px 0; color:#6b7280;'>Host</td>"
    "<td style='padding:6px 0; color:#111827;'>{host}:{port}</td></tr>"
    "{auth_row}"
    "</table>"
    "<p style='font-size:13px; color:#4b5563; line-height:1.6;'>The backup is attached "
    "as a ZIP file. Store it securely and rotate credentials periodically.</p>"
    "<div style='margin-top:20px; padding:12px 16px; border-radius:8px; "
    "background:#eff6ff; border:1px solid #dbeafe; font-size:12px; color:#1e3a8a;'>"
    "<strong>Security Note:</strong> This backup may contain sensitive data. Ensure "
    "access is restricted and consider encrypting the file at rest.</div></div>"
    "<div style='padding:14px 24px; background:#f9fafb; font-size:11px; color:#9ca3af; "
    "text-align:center;'>This email was generated automatically by the MongoDB backup "
    "script.<br/>If you did not expect this message, please rotate your MongoDB and "
    "SendGrid credentials.</div></div></body></html>"
)


@dataclass(frozen=True, slots=True)
class Attachment:
    filename: str
    content: str
    mime_type: str = ATTACHMENT_MIME_TYPE

    def to_payload(self) -> dict[str, str]:
        return {"content": self.content, "type": self.mime_type, "filename": self.filename}


def build_subject(settings: Settings, timestamp: str) -> str:
    return f"{settings.subject_prefix}: {settings.database_name} at {timestamp}"


def render_html_body(settings: Settings, timestamp: str) -> str:
    """Render the notification body; every interpolated value is escaped."""
    esc = html.escape
    auth_row = ""
    tagline = "Backup notification"
    if settings.credentials:
        auth_row = _AUTH_ROW.format(auth_db=esc(settings.credentials.auth_db))
        tagline = "Authenticated backup notification"
    return _HTML_TEMPLATE.format(
        tagline=tagline,
        database=esc(settings.database_name),
        timestamp=esc(timestamp),
        host=esc(settings.host),
        port=esc(settings.port),
        auth_row=auth_row,
    )


def build_payload(settings: Settings, timestamp: str, attachment: Attachment) -> dict:
    """SendGrid v3 mail/send body, ready for the JSON encoder."""
    return {
        "personalizations": [{"to": [{"email": settings.to_email}]}],
        "from": {"email": settings.from_email},
        "subject": build_subject(settings, timestamp),
        "content": [{"type": "text/html", "value": render_html_body(settings, timestamp)}],
        "attachments": [attachment.to_payload()],
    }
