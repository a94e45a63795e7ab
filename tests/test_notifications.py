import pytest

from storefront.services import mailer
from storefront.services.notification_service import (
    NotificationService,
    send_invoice_email_task,
    send_test_email_task,
)

# captured before the autouse recorder replaces it
REAL_SEND_MAIL = mailer.send_mail


def test_test_email_goes_out(sent_mail):
    assert NotificationService.send_test_email("ops@example.com") is True

    assert len(sent_mail) == 1
    assert sent_mail[0]["To"] == "ops@example.com"
    assert sent_mail[0]["Subject"] == "Test Email"
    assert sent_mail[0].get_content().strip() == "This is a test email"


def test_test_email_failure_is_reported_not_raised(monkeypatch):
    def smtp_down(msg):
        raise OSError("connection refused")

    monkeypatch.setattr(mailer, "send_mail", smtp_down)

    result = send_test_email_task("ops@example.com")
    assert result == {"to": "ops@example.com", "status": "failed"}


def test_invoice_task_skips_missing_order(sent_mail):
    result = send_invoice_email_task("9b7c6a3e-0000-4000-8000-000000000000")

    assert result["status"] == "skipped"
    assert sent_mail == []


def test_enqueue_failure_is_swallowed(monkeypatch):
    from storefront.services import notification_service

    class BrokerDown:
        def delay(self, *args, **kwargs):
            raise ConnectionError("broker unreachable")

    monkeypatch.setattr(notification_service, "send_test_email_task", BrokerDown())

    assert NotificationService.send_test_email("ops@example.com") is False


def test_build_message_with_attachment():
    msg = mailer.build_message(
        to=["a@example.com", "b@example.com"],
        subject="Hi",
        body="<p>hello</p>",
        html=True,
        attachments=[("invoice.html", "<html></html>", "html")],
    )

    assert msg["To"] == "a@example.com, b@example.com"
    names = [part.get_filename() for part in msg.iter_attachments()]
    assert names == ["invoice.html"]


def test_binary_attachment_is_application_part():
    msg = mailer.build_message(
        to=["a@example.com"],
        subject="Invoice",
        body="see attached",
        attachments=[("invoice.pdf", b"%PDF-1.4 fake", "pdf")],
    )

    part = next(msg.iter_attachments())
    assert part.get_content_type() == "application/pdf"
    assert part.get_content() == b"%PDF-1.4 fake"


@pytest.mark.parametrize("use_tls", [True, False])
def test_send_mail_talks_smtp(monkeypatch, use_tls):
    calls = []

    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            calls.append(("connect", host, port))

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            calls.append(("starttls",))

        def login(self, user, password):
            calls.append(("login", user))

        def send_message(self, msg):
            calls.append(("send", msg["To"]))

    monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(mailer, "MAIL_USE_TLS", use_tls)
    monkeypatch.setattr(mailer, "MAIL_USERNAME", "mailer")

    REAL_SEND_MAIL(mailer.build_message(["x@example.com"], "s", "b"))

    assert ("send", "x@example.com") in calls
    assert ("login", "mailer") in calls
    assert (("starttls",) in calls) == use_tls
