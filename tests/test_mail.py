# tests/test_mail.py
import asyncio

import aiosmtplib

from app.services.mail import Mailer
from app.utils.email_templates import password_reset_email, verification_email


def test_disabled_mailer_skips_delivery(monkeypatch):
    calls = []

    async def fake_send(*args, **kwargs):
        calls.append(args)

    monkeypatch.setattr(aiosmtplib, "send", fake_send)
    assert asyncio.run(Mailer(enabled=False).send("a@example.com", "Hi", "<p>x</p>"))
    assert calls == []


def test_enabled_mailer_builds_html_message(monkeypatch):
    sent = []

    async def fake_send(message, **kwargs):
        sent.append((message, kwargs))

    monkeypatch.setattr(aiosmtplib, "send", fake_send)
    mailer = Mailer(host="smtp.example.com", port=2525, enabled=True)
    assert asyncio.run(mailer.send("a@example.com", "Hello", "<p>body</p>")) is True

    message, kwargs = sent[0]
    assert message["To"] == "a@example.com"
    assert message["Subject"] == "Hello"
    assert kwargs["hostname"] == "smtp.example.com"
    assert kwargs["port"] == 2525
    html_part = message.get_body(preferencelist=("html",))
    assert "<p>body</p>" in html_part.get_content()


def test_delivery_failure_returns_false(monkeypatch):
    async def failing_send(*args, **kwargs):
        raise aiosmtplib.SMTPConnectError("connection refused")

    monkeypatch.setattr(aiosmtplib, "send", failing_send)
    mailer = Mailer(enabled=True)
    assert asyncio.run(mailer.send("a@example.com", "Hi", "<p>x</p>")) is False


def test_templates_embed_links():
    subject, html = verification_email("My Blog", "http://front/verify-email?token=abc")
    assert "My Blog" in html
    assert html.count("http://front/verify-email?token=abc") == 3
    assert subject

    _, resend_html = verification_email("My Blog", "http://x", resend=True)
    assert "new verification" in resend_html

    _, reset_html = password_reset_email("My Blog", "http://front/reset-password?token=t")
    assert "1 hour" in reset_html
