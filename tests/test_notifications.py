from datetime import datetime

import httpx
import pytest

from barbershop.config import Settings
from barbershop.db import models
from barbershop.services.notifications import MailjetNotifier, StubNotifier, get_notifier
from barbershop.services.notifications.templates import (
    build_admin_summary_email,
    build_confirmation_email,
    build_test_email,
)


def make_settings(**overrides) -> Settings:
    values = {
        "MAILJET_API_KEY": "key",
        "MAILJET_SECRET_KEY": "secret",
        "MAILJET_FROM_EMAIL": "bookings@chaxxbarbers.com",
        "ADMIN_EMAIL": "owner@chaxxbarbers.com",
    }
    values.update(overrides)
    return Settings(**values)


def make_booking(**overrides) -> models.Booking:
    values = {
        "id": 7,
        "customer_name": "Ada <Lovelace>",
        "phone_number": "+13065550100",
        "email": "ada@example.com",
        "appointment_time": datetime(2025, 6, 2, 14, 30),
        "payment_status": models.PaymentStatus.unpaid,
    }
    values.update(overrides)
    return models.Booking(**values)


def mailjet_success(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={"Messages": [{"Status": "success", "To": [{"Email": "x", "MessageID": 1152921}]}]},
    )


def test_confirmation_email_renders_booking_details():
    content = build_confirmation_email(make_booking())

    assert content.subject == "Booking Confirmation - Chaxx Barbershop"
    assert "Monday, June 2, 2025 at 2:30 PM" in content.html
    assert "Ada &lt;Lovelace&gt;" in content.html
    assert "#7" in content.html
    assert "unpaid" in content.html


def test_admin_summary_subject_depends_on_batch_size():
    single = build_admin_summary_email([make_booking()])
    bulk = build_admin_summary_email([make_booking(), make_booking(id=8, email=None)])

    assert single.subject == "New Booking - Chaxx Barbershop"
    assert bulk.subject == "New Bulk Booking: 2 Appointments"
    assert "N/A" in bulk.html


def test_mailjet_confirmation_is_sent():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return mailjet_success(request)

    notifier = MailjetNotifier(make_settings(), transport=httpx.MockTransport(handler))

    result = notifier.send_booking_confirmation(make_booking())

    assert result.sent is True
    assert result.status == "sent"
    assert result.message_id == "1152921"
    assert result.recipient == "ada@example.com"
    assert captured[0].url == "https://api.mailjet.com/v3.1/send"
    assert captured[0].headers["Authorization"].startswith("Basic ")


def test_mailjet_skips_booking_without_email():
    notifier = MailjetNotifier(make_settings(), transport=httpx.MockTransport(mailjet_success))

    result = notifier.send_booking_confirmation(make_booking(email=None))

    assert result.status == "skipped"
    assert result.reason == "No email provided"


def test_mailjet_without_credentials_fails_softly():
    notifier = MailjetNotifier(make_settings(MAILJET_API_KEY=""))

    result = notifier.send_admin_summary([make_booking()])

    assert result.sent is False
    assert result.reason == "Mailjet not configured"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"ErrorMessage": "boom"}),
        httpx.Response(200, json={"Messages": [{"Status": "error"}]}),
    ],
)
def test_mailjet_failures_are_reported(response):
    notifier = MailjetNotifier(make_settings(), transport=httpx.MockTransport(lambda request: response))

    result = notifier.send_admin_summary([make_booking()])

    assert result.sent is False
    assert result.status == "failed"
    assert result.recipient == "owner@chaxxbarbers.com"


def test_transport_errors_are_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    notifier = MailjetNotifier(make_settings(), transport=httpx.MockTransport(handler))

    result = notifier.send_booking_confirmation(make_booking())

    assert result.sent is False
    assert "unreachable" in result.error


def test_get_notifier_selects_provider():
    assert isinstance(get_notifier(make_settings(NOTIFICATION_PROVIDER="stub")), StubNotifier)
    assert isinstance(get_notifier(make_settings(NOTIFICATION_PROVIDER="mailjet")), MailjetNotifier)
    with pytest.raises(ValueError):
        get_notifier(make_settings(NOTIFICATION_PROVIDER="pigeon"))


def test_test_email_template_and_stub_delivery():
    content = build_test_email(datetime(2025, 6, 2, 9, 0))
    result = StubNotifier(make_settings()).send_test_email("owner@chaxxbarbers.com")

    assert content.subject == "Mailjet Test - Chaxx Barbershop"
    assert "Monday, June 2, 2025 at 9:00 AM" in content.html
    assert result.sent is True
    assert result.recipient == "owner@chaxxbarbers.com"
