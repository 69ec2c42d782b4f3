"""Message templates for every (event, audience) pair of a booking fan-out."""

from __future__ import annotations

from typing import NamedTuple

from .models import BookingEvent


class Audience:
    USER = "user"
    VENUE = "venue"
    PROVIDER = "provider"


class MessageTemplate(NamedTuple):
    subject: str
    body: str
    sms: str


_DETAILS = (
    "Booking ID: {booking_id}\n"
    "Event Type: {event_type}\n"
    "Date: {start_date} to {end_date}\n"
)

MESSAGES: dict[tuple[str, str], MessageTemplate] = {
    (BookingEvent.CREATED, Audience.USER): MessageTemplate(
        subject="EventO - Booking Confirmation",
        body=(
            "Thank you for your booking with EventO!\n\n" + _DETAILS
            + "Status: {status_title}\nTotal Amount: {total_amount}\n\n"
            "Please complete your payment to confirm the booking."
        ),
        sms=(
            "Your booking with EventO (ID: {booking_id}) has been received and is "
            "pending payment. Total: {total_amount}"
        ),
    ),
    (BookingEvent.CREATED, Audience.VENUE): MessageTemplate(
        subject="EventO - New Booking Request",
        body=(
            "You have received a new booking request for your venue.\n\n" + _DETAILS
            + "Guest Count: {guest_count}\nStatus: {status_title}\n\n"
            "Please log in to your dashboard to view the details and confirm the booking."
        ),
        sms=(
            "New booking request (ID: {booking_id}) for your venue. Event: {event_type}, "
            "Date: {start_date}, Guests: {guest_count}"
        ),
    ),
    (BookingEvent.CREATED, Audience.PROVIDER): MessageTemplate(
        subject="EventO - New Service Request",
        body=(
            "You have received a new request for your {service_type} services.\n\n" + _DETAILS
            + "Guest Count: {guest_count}\nStatus: {status_title}\n\n"
            "Please log in to your dashboard to view the details and confirm the service."
        ),
        sms=(
            "New {service_type} service request (ID: {booking_id}). Event: {event_type}, "
            "Date: {start_date}, Guests: {guest_count}"
        ),
    ),
    (BookingEvent.STATUS_CHANGED, Audience.USER): MessageTemplate(
        subject="EventO - Booking {status_title}",
        body=(
            "Your booking with EventO has been {status}.\n\n" + _DETAILS
            + "Status: {status_title}\n\nPlease log in to your dashboard for more details."
        ),
        sms="Your booking (ID: {booking_id}) has been {status}. Please check your email for details.",
    ),
    (BookingEvent.STATUS_CHANGED, Audience.VENUE): MessageTemplate(
        subject="EventO - Booking {status_title}",
        body=(
            "A booking for your venue has been {status}.\n\n" + _DETAILS
            + "Status: {status_title}\n\nPlease log in to your dashboard for more details."
        ),
        sms="Booking (ID: {booking_id}) for your venue has been {status}. Please check your email for details.",
    ),
    (BookingEvent.STATUS_CHANGED, Audience.PROVIDER): MessageTemplate(
        subject="EventO - Service Request {status_title}",
        body=(
            "A service request for your {service_type} services has been {status}.\n\n" + _DETAILS
            + "Status: {status_title}\n\nPlease log in to your dashboard for more details."
        ),
        sms=(
            "Service request (ID: {booking_id}) for your {service_type} services has been "
            "{status}. Please check your email for details."
        ),
    ),
    (BookingEvent.PAID, Audience.USER): MessageTemplate(
        subject="EventO - Payment Confirmation",
        body=(
            "Thank you for your payment!\n\n" + _DETAILS
            + "Amount Paid: {amount}\nTransaction ID: {transaction_id}\n"
            "Status: {status_title}\n\nYour booking is now confirmed."
        ),
        sms=(
            "Payment confirmed for booking ID: {booking_id}. Amount: {amount}, "
            "Transaction ID: {transaction_id}. Your booking is now confirmed."
        ),
    ),
    (BookingEvent.PAID, Audience.VENUE): MessageTemplate(
        subject="EventO - Booking Payment Received",
        body=(
            "A payment has been received for a booking at your venue.\n\n" + _DETAILS
            + "Amount: {amount}\nTransaction ID: {transaction_id}\n\nThe booking is now confirmed."
        ),
        sms="Payment received for booking ID: {booking_id}. Amount: {amount}. The booking is now confirmed.",
    ),
    (BookingEvent.PAID, Audience.PROVIDER): MessageTemplate(
        subject="EventO - Service Payment Received",
        body=(
            "A payment has been received for your {service_type} services.\n\n" + _DETAILS
            + "Amount: {amount}\nTransaction ID: {transaction_id}\n\nThe service is now confirmed."
        ),
        sms=(
            "Payment received for service booking ID: {booking_id}. Amount: {amount}. "
            "The service is now confirmed."
        ),
    ),
    (BookingEvent.PAYMENT_RECORDED, Audience.USER): MessageTemplate(
        subject="EventO - Payment Received",
        body=(
            "We have received your payment.\n\n" + _DETAILS
            + "Amount Paid: {amount}\nTransaction ID: {transaction_id}\n"
            "Status: {status_title}\n\nThe payment has been recorded; the booking status is unchanged."
        ),
        sms=(
            "Payment received for booking ID: {booking_id}. Amount: {amount}, "
            "Transaction ID: {transaction_id}. Booking status: {status_title}."
        ),
    ),
    (BookingEvent.PAYMENT_RECORDED, Audience.VENUE): MessageTemplate(
        subject="EventO - Booking Payment Recorded",
        body=(
            "A payment has been recorded for a booking at your venue.\n\n" + _DETAILS
            + "Amount: {amount}\nTransaction ID: {transaction_id}\nStatus: {status_title}"
        ),
        sms="Payment recorded for booking ID: {booking_id}. Amount: {amount}. Status: {status_title}.",
    ),
    (BookingEvent.PAYMENT_RECORDED, Audience.PROVIDER): MessageTemplate(
        subject="EventO - Service Payment Recorded",
        body=(
            "A payment has been recorded for your {service_type} services.\n\n" + _DETAILS
            + "Amount: {amount}\nTransaction ID: {transaction_id}\nStatus: {status_title}"
        ),
        sms=(
            "Payment recorded for service booking ID: {booking_id}. Amount: {amount}. "
            "Status: {status_title}."
        ),
    ),
}


def render(event: str, audience: str, context: dict) -> tuple[str, str, str]:
    template = MESSAGES[(event, audience)]
    return (
        template.subject.format(**context),
        template.body.format(**context),
        template.sms.format(**context),
    )
