"""HTML bodies for booking emails."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Sequence

from ...db import models

SHOP_NAME = "Chaxx Barbershop"
SHOP_ADDRESS = "5649 Prefontaine Avenue, Regina SK"
SHOP_PHONES = "+1 (306) 216-7657, +1 (306) 550-6583"

_STYLE = (
    "body { font-family: Arial, sans-serif; margin: 0; padding: 20px; background: #f5f5f5; }"
    " .container { margin: 0 auto; background: white; padding: 30px; border-radius: 10px; }"
    " h1 { color: #2563eb; }"
    " .details { background: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0; }"
    " table { width: 100%; border-collapse: collapse; margin: 20px 0; }"
    " th { background: #2563eb; color: white; padding: 12px; text-align: left; }"
    " td { padding: 12px; border-bottom: 1px solid #e5e7eb; }"
)


@dataclass(slots=True)
class EmailContent:
    subject: str
    html: str


def _value(field) -> str:
    return getattr(field, "value", field)


def format_long(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    period = "PM" if moment.hour >= 12 else "AM"
    return f"{moment:%A, %B} {moment.day}, {moment.year} at {hour}:{moment.minute:02d} {period}"


def format_short(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    period = "PM" if moment.hour >= 12 else "AM"
    return f"{moment:%b} {moment.day}, {hour}:{moment.minute:02d} {period}"


def _page(body: str, width: int) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"UTF-8\">"
        f"<style>{_STYLE}</style></head><body>"
        f"<div class=\"container\" style=\"max-width: {width}px\">{body}</div>"
        "</body></html>"
    )


def build_confirmation_email(booking: models.Booking) -> EmailContent:
    body = (
        "<h1>Booking Confirmed!</h1>"
        f"<p>Hi {escape(booking.customer_name)},</p>"
        f"<p>Your appointment at {SHOP_NAME} has been confirmed!</p>"
        "<div class=\"details\">"
        f"<p><strong>Date &amp; Time:</strong> {format_long(booking.appointment_time)}</p>"
        f"<p><strong>Phone:</strong> {escape(booking.phone_number)}</p>"
        f"<p><strong>Payment Status:</strong> {_value(booking.payment_status)}</p>"
        f"<p><strong>Booking ID:</strong> #{booking.id}</p>"
        "</div>"
        "<p>We look forward to seeing you!</p>"
        f"<p><strong>{SHOP_NAME}</strong><br>{SHOP_ADDRESS}<br>{SHOP_PHONES}</p>"
    )
    return EmailContent(subject=f"Booking Confirmation - {SHOP_NAME}", html=_page(body, 600))


def build_admin_summary_email(bookings: Sequence[models.Booking]) -> EmailContent:
    is_bulk = len(bookings) > 1
    rows = "".join(
        "<tr>"
        f"<td><strong>{escape(booking.customer_name)}</strong></td>"
        f"<td>{escape(booking.phone_number)}</td>"
        f"<td>{escape(booking.email or 'N/A')}</td>"
        f"<td>{format_short(booking.appointment_time)}</td>"
        f"<td>{_value(booking.payment_status)}</td>"
        "</tr>"
        for booking in bookings
    )
    intro = (
        f"{len(bookings)} new appointments received"
        if is_bulk
        else "A new appointment has been booked"
    )
    body = (
        "<h1>New Booking Alert</h1>"
        f"<p>{intro}</p>"
        "<table><thead><tr><th>Customer</th><th>Phone</th><th>Email</th>"
        "<th>Time</th><th>Payment</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        f"<p style=\"color: #6b7280\">{SHOP_NAME} Booking System</p>"
    )
    subject = (
        f"New Bulk Booking: {len(bookings)} Appointments"
        if is_bulk
        else f"New Booking - {SHOP_NAME}"
    )
    return EmailContent(subject=subject, html=_page(body, 900))


def build_test_email(sent_at: datetime) -> EmailContent:
    body = (
        "<h1>Mailjet Test</h1>"
        f"<p>This is a test email from the {SHOP_NAME} booking system.</p>"
        f"<p>Sent {format_long(sent_at)}.</p>"
        "<p>If you can read this, email delivery is working.</p>"
    )
    return EmailContent(subject=f"Mailjet Test - {SHOP_NAME}", html=_page(body, 600))
