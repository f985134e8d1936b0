"""
SMS sender utility using Twilio Programmable SMS.
"""

import logging

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from booking.core import config
from booking.models.appointment import Appointment
from booking.models.settings import BusinessSettings

logger = logging.getLogger(__name__)

VISIT_SERVICE = 'Visite'
VISIT_FEE_NOTE = 'charged 50€ (cash payment)'


def is_configured() -> bool:
    return bool(config.TWILIO_SID and config.TWILIO_TOKEN and config.TWILIO_PHONE)


def format_phone_number(phone: str, country_prefix: str | None = None) -> str:
    """Turn a national number into E.164 using the configured country prefix."""
    if not phone:
        return phone

    cleaned = phone.replace(" ", "").replace("-", "").replace(".", "").replace("(", "").replace(")", "")
    if cleaned.startswith("+"):
        return cleaned

    prefix = country_prefix if country_prefix is not None else config.SMS_COUNTRY_PREFIX
    return f"{prefix}{cleaned.lstrip('0')}"


def build_client_confirmation(appointment: Appointment, settings: BusinessSettings) -> str:
    reason = appointment.service
    if appointment.service == VISIT_SERVICE:
        reason = f"{appointment.service} {VISIT_FEE_NOTE}"
    return (
        f"{settings.business_name}: your appointment is confirmed on {appointment.date} at {appointment.time}.\n"
        f"Reason: {reason}\n"
        f"To change it, call us on {settings.business_phone}."
    )


def build_business_confirmation(appointment: Appointment, settings: BusinessSettings, admin_url: str) -> str:
    return (
        f"{settings.business_name}: new appointment on {appointment.date} at {appointment.time}.\n"
        f"- By: {appointment.first_name} {appointment.last_name}\n"
        f"- Reason: {appointment.service}\n"
        f"- Phone: {appointment.phone}\n"
        f"- Address: {appointment.address}\n"
        f"Manage appointments: {admin_url}"
    )


def build_cancellation(appointment: Appointment, settings: BusinessSettings) -> str:
    return (
        f"{settings.business_name}: your appointment on {appointment.date} at {appointment.time} was cancelled.\n"
        f"For any question, call us on {settings.business_phone}."
    )


def send_sms(to_phone: str, body: str) -> bool:
    """
    Send an SMS using Twilio.

    Returns:
        True if the SMS was sent (or simulated because Twilio is not configured),
        False otherwise. Never raises, so a failed SMS cannot break a booking.
    """
    to_phone_formatted = format_phone_number(to_phone)
    if not to_phone_formatted:
        logger.error("Invalid phone number format: %r", to_phone)
        return False

    if not is_configured():
        logger.info("Simulated SMS to %s: %s", to_phone_formatted, body.replace("\n", " "))
        return True

    try:
        client = Client(config.TWILIO_SID, config.TWILIO_TOKEN)
        message = client.messages.create(
            body=body,
            from_=config.TWILIO_PHONE,
            to=to_phone_formatted,
        )
        logger.info("SMS sent to %s***. SID: %s", to_phone_formatted[:6], message.sid)
        return True

    except TwilioRestException as e:
        logger.error("Twilio API error sending SMS to %s: %s - %s", to_phone_formatted, e.code, e.msg)
        return False
    except Exception:
        logger.exception("Unexpected error sending SMS to %s", to_phone_formatted)
        return False
