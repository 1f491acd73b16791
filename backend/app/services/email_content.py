"""
Feedback notification email content.

Pure functions: FeedbackEmailData → (subject, html, text). Nothing here
knows how the email is delivered.

Rules:
  • Subjects carry a timestamp + random suffix so mail clients never
    thread two notifications together or fold them as duplicates.
  • Every user-supplied value is HTML-escaped before it touches the
    HTML body. The plain-text body has no markup and is not escaped.
  • Inline styles and table layout only.
"""

from __future__ import annotations

import datetime
import html
import json
import random
from dataclasses import dataclass, field
from typing import Any

FILLED_STAR = "⭐"
EMPTY_STAR = "☆"
NO_RATING = "No rating provided"
ANONYMOUS = "Anonymous"

_LABEL_STYLE = (
    "color: #495057; font-size: 14px; text-transform: uppercase; "
    "letter-spacing: 0.5px;"
)
_ACCENT = "#667eea"
_GRADIENT = "linear-gradient(135deg, #667eea 0%, #764ba2 100%)"


@dataclass(frozen=True)
class FeedbackEmailData:
    """Everything the templates need, as plain values."""

    project_name: str
    project_domain: str
    feedback_id: str
    message: str
    created_at: datetime.datetime
    submitter_name: str | None = None
    submitter_email: str | None = None
    rating: int | None = None
    metadata: dict[str, Any] | None = field(default=None)
    dashboard_url: str | None = None


@dataclass(frozen=True)
class FeedbackEmail:
    subject: str
    html: str
    text: str


# ── Subject ─────────────────────────────────────────────────
def generate_subject(
    project_name: str,
    now: datetime.datetime | None = None,
) -> str:
    """
    New Feedback: Acme [2026-10-18T09-30-00-0042]

    The timestamp is UTC at second granularity with ':' and '.' replaced;
    the suffix is a zero-padded random number in 0000..9999.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(datetime.timezone.utc)
    timestamp = now.strftime("%Y-%m-%dT%H-%M-%S")
    suffix = f"{random.randint(0, 9999):04d}"
    return f"New Feedback: {project_name} [{timestamp}-{suffix}]"


# ── Field rendering ─────────────────────────────────────────
def render_stars(rating: int | None) -> str:
    if rating is None:
        return NO_RATING
    return FILLED_STAR * rating + EMPTY_STAR * (5 - rating)


def render_rating_caption(rating: int | None) -> str:
    if rating is None:
        return NO_RATING
    return f"{rating} out of 5 stars"


def render_submitter(
    name: str | None,
    email: str | None,
    *,
    html_style: bool = True,
) -> str:
    """
    Name and email → "Jane <jane@x.io>" (HTML) or "Jane (jane@x.io)" (text).
    Falls back to the email alone, then to "Anonymous".
    """
    if name:
        if email:
            return f"{name} <{email}>" if html_style else f"{name} ({email})"
        return name
    return email or ANONYMOUS


def render_metadata_value(value: Any) -> str:
    """Scalars as-is; nested dicts/lists as JSON."""
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    if value is None:
        return "null"
    return str(value)


def format_timestamp(value: datetime.datetime) -> str:
    """October 18, 2026 at 09:30 AM UTC"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    value = value.astimezone(datetime.timezone.utc)
    return value.strftime("%B %d, %Y at %I:%M %p UTC")


# ── Plain text ──────────────────────────────────────────────
def render_text(data: FeedbackEmailData) -> str:
    lines = [
        "New Feedback Received",
        "",
        f"Project: {data.project_name}",
        f"Domain: {data.project_domain}",
        f"Rating: {render_rating_caption(data.rating)}",
        "",
        f"From: {render_submitter(data.submitter_name, data.submitter_email, html_style=False)}",
        "",
        "Message:",
        data.message,
    ]

    if data.metadata:
        lines += ["", "Details:"]
        lines += [
            f"  {key}: {render_metadata_value(value)}"
            for key, value in data.metadata.items()
        ]

    lines += [
        "",
        f"Submitted: {format_timestamp(data.created_at)}",
        f"Feedback ID: {data.feedback_id}",
    ]
    if data.dashboard_url:
        lines += ["", f"View Details: {data.dashboard_url}"]

    return "\n".join(lines)


# ── HTML ────────────────────────────────────────────────────
def _section(label: str, body: str, padding: str = "20px 30px") -> str:
    return f"""
          <tr>
            <td style="padding: {padding}; border-bottom: 1px solid #e9ecef;">
              <strong style="{_LABEL_STYLE}">{label}</strong>
              <div style="padding-top: 8px;">{body}</div>
            </td>
          </tr>"""


def render_html(data: FeedbackEmailData) -> str:
    esc = html.escape

    project = (
        f'<span style="color: #212529; font-size: 18px; font-weight: 600;">'
        f"{esc(data.project_name)}</span>"
    )
    if data.project_domain:
        project += (
            f'<br><a href="{esc(data.project_domain)}" style="color: {_ACCENT}; '
            f'text-decoration: none; font-size: 14px; word-break: break-all;">'
            f"{esc(data.project_domain)}</a>"
        )

    rating = (
        f'<span style="font-size: 20px; letter-spacing: 2px;">{render_stars(data.rating)}</span>'
    )
    if data.rating is not None:
        rating += (
            f'<span style="color: #6c757d; font-size: 14px; margin-left: 10px;">'
            f"{render_rating_caption(data.rating)}</span>"
        )

    submitter = (
        f'<span style="color: #212529; font-size: 16px;">'
        f"{esc(render_submitter(data.submitter_name, data.submitter_email))}</span>"
    )
    if data.submitter_email:
        submitter += (
            f' <a href="mailto:{esc(data.submitter_email)}" style="color: {_ACCENT}; '
            f'text-decoration: none; margin-left: 10px; font-size: 14px;">✉ Reply</a>'
        )

    message = (
        f'<p style="margin: 0; padding: 15px; background-color: #f8f9fa; '
        f"border-left: 4px solid {_ACCENT}; color: #212529; font-size: 15px; "
        f'white-space: pre-wrap; word-wrap: break-word;">{esc(data.message)}</p>'
    )

    sections = [
        _section("Project", project, padding="25px 30px"),
        _section("Rating", rating),
        _section("Submitted By", submitter),
        _section("Feedback Message", message, padding="25px 30px"),
    ]

    if data.metadata:
        rows = "".join(
            f'<tr><td style="padding: 2px 10px 2px 0; color: #6c757d;">{esc(str(key))}</td>'
            f'<td style="padding: 2px 0; color: #212529;">{esc(render_metadata_value(value))}</td></tr>'
            for key, value in data.metadata.items()
        )
        sections.append(
            _section("Details", f'<table role="presentation" style="font-size: 13px;">{rows}</table>')
        )

    footer_info = (
        f'<span style="color: #6c757d; font-size: 12px;">'
        f"Submitted: {esc(format_timestamp(data.created_at))}<br>"
        f"Feedback ID: {esc(data.feedback_id)}</span>"
    )
    sections.append(
        f"""
          <tr>
            <td style="padding: 20px 30px;">{footer_info}</td>
          </tr>"""
    )

    if data.dashboard_url:
        sections.append(
            f"""
          <tr>
            <td style="padding: 0 30px 30px; text-align: center;">
              <a href="{esc(data.dashboard_url)}" style="display: inline-block; padding: 14px 32px; background: {_GRADIENT}; color: #ffffff; text-decoration: none; border-radius: 6px; font-weight: 600; font-size: 15px;">View Details in Dashboard</a>
            </td>
          </tr>"""
        )

    body = "".join(sections)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>New Feedback Received</title>
</head>
<body style="margin: 0; padding: 0; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f5f5f5; line-height: 1.6;">
  <table role="presentation" style="width: 100%; border-collapse: collapse; background-color: #f5f5f5;">
    <tr>
      <td style="padding: 20px 0;">
        <table role="presentation" style="width: 100%; max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px;">
          <tr>
            <td style="padding: 30px 30px 20px; background: {_GRADIENT}; border-radius: 8px 8px 0 0;">
              <h1 style="margin: 0; color: #ffffff; font-size: 24px; font-weight: 600;">New Feedback Received</h1>
            </td>
          </tr>{body}
          <tr>
            <td style="padding: 20px 30px; background-color: #f8f9fa; border-radius: 0 0 8px 8px;">
              <p style="margin: 0; color: #6c757d; font-size: 12px; text-align: center;">
                This is an automated notification from Feedback Widget.<br>
                You received this email because new feedback was submitted to your project.
              </p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>"""


def build_feedback_email(
    data: FeedbackEmailData,
    now: datetime.datetime | None = None,
) -> FeedbackEmail:
    """Render subject, HTML and plain-text bodies for one feedback event."""
    return FeedbackEmail(
        subject=generate_subject(data.project_name, now=now),
        html=render_html(data),
        text=render_text(data),
    )
