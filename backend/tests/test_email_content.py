"""Tests for the feedback notification email templates."""

import datetime
import re

import pytest

from app.services.email_content import (
    FeedbackEmailData,
    build_feedback_email,
    generate_subject,
    render_html,
    render_rating_caption,
    render_stars,
    render_submitter,
    render_text,
)


@pytest.fixture
def data():
    return FeedbackEmailData(
        project_name="Acme",
        project_domain="https://acme.example",
        feedback_id="fb-123",
        message="Checkout is broken",
        created_at=datetime.datetime(2026, 10, 18, 9, 30, tzinfo=datetime.timezone.utc),
        submitter_name="Jane",
        submitter_email="jane@example.com",
        rating=4,
    )


def with_changes(data, **changes):
    fields = {**data.__dict__, **changes}
    return FeedbackEmailData(**fields)


class TestSubject:
    def test_format(self):
        now = datetime.datetime(2026, 10, 18, 9, 30, 15, 123456, tzinfo=datetime.timezone.utc)
        subject = generate_subject("Acme", now=now)
        assert re.fullmatch(r"New Feedback: Acme \[2026-10-18T09-30-15-\d{4}\]", subject)

    def test_no_colons_or_periods_in_timestamp(self):
        subject = generate_subject("Acme")
        suffix = subject.split("[", 1)[1]
        assert ":" not in suffix
        assert "." not in suffix

    def test_one_second_apart_subjects_differ(self):
        first = datetime.datetime(2026, 10, 18, 9, 30, 15, tzinfo=datetime.timezone.utc)
        second = first + datetime.timedelta(seconds=1)
        assert generate_subject("Acme", now=first) != generate_subject("Acme", now=second)

    def test_non_utc_timestamp_is_converted(self):
        tz = datetime.timezone(datetime.timedelta(hours=2))
        now = datetime.datetime(2026, 10, 18, 11, 30, 0, tzinfo=tz)
        assert "2026-10-18T09-30-00-" in generate_subject("Acme", now=now)


class TestRatingAndSubmitter:
    def test_stars(self):
        assert render_stars(4) == "⭐⭐⭐⭐☆"
        assert render_stars(None) == "No rating provided"

    def test_rating_presence_not_truthiness(self):
        assert render_stars(0) == "☆☆☆☆☆"
        assert render_rating_caption(0) == "0 out of 5 stars"
        assert render_rating_caption(None) == "No rating provided"

    def test_html_shows_caption(self, data):
        assert "4 out of 5 stars" in render_html(data)

    def test_missing_rating(self, data):
        no_rating = with_changes(data, rating=None)
        assert "No rating provided" in render_html(no_rating)
        assert "Rating: No rating provided" in render_text(no_rating)

    @pytest.mark.parametrize(
        "name, email, html_form, text_form",
        [
            ("Jane", "jane@x.io", "Jane <jane@x.io>", "Jane (jane@x.io)"),
            ("Jane", None, "Jane", "Jane"),
            (None, "jane@x.io", "jane@x.io", "jane@x.io"),
            (None, None, "Anonymous", "Anonymous"),
        ],
    )
    def test_submitter(self, name, email, html_form, text_form):
        assert render_submitter(name, email) == html_form
        assert render_submitter(name, email, html_style=False) == text_form


class TestEscaping:
    def test_script_in_message_is_escaped(self, data):
        html = render_html(with_changes(data, message="<script>alert(1)</script>"))
        assert "&lt;script&gt;" in html
        assert "<script>" not in html

    def test_all_user_fields_escaped(self, data):
        html = render_html(
            with_changes(
                data,
                project_name='A & "B"',
                project_domain="https://x.io/?a=<b>",
                submitter_name="O'Brien",
                submitter_email="<x@y.z>",
            )
        )
        assert "A &amp; &quot;B&quot;" in html
        assert "https://x.io/?a=&lt;b&gt;" in html
        assert "O&#x27;Brien" in html
        assert "&lt;x@y.z&gt;" in html

    def test_text_body_is_not_escaped(self, data):
        text = render_text(with_changes(data, message="a < b & c"))
        assert "a < b & c" in text


class TestOptionalSections:
    def test_dashboard_link_only_when_url_given(self, data):
        assert "View Details in Dashboard" not in render_html(data)
        assert "View Details" not in render_text(data)

        linked = with_changes(data, dashboard_url="https://dash.example/dashboard/feedback/fb-123")
        assert "View Details in Dashboard" in render_html(linked)
        assert "View Details: https://dash.example/dashboard/feedback/fb-123" in render_text(linked)

    def test_reply_link_needs_email(self, data):
        assert 'href="mailto:jane@example.com"' in render_html(data)
        assert "mailto:" not in render_html(with_changes(data, submitter_email=None))

    def test_metadata_nested_values_are_stringified(self, data):
        rich = with_changes(data, metadata={"page": "/checkout", "viewport": {"w": 390, "h": 844}})
        text = render_text(rich)
        assert "  page: /checkout" in text
        assert '  viewport: {"w": 390, "h": 844}' in text
        assert "&quot;w&quot;" in render_html(rich)


def test_build_feedback_email(data):
    email = build_feedback_email(data)
    assert email.subject.startswith("New Feedback: Acme [")
    assert email.html.startswith("<!DOCTYPE html>")
    assert "Checkout is broken" in email.text
    assert "Feedback ID: fb-123" in email.text
