"""Best-effort confirmation and cancellation messages.

Both entry points honour the same settings switches: email when
``emailNotifications`` is on, SMS when ``smsNotifications`` is on. They never
raise; a failed channel is logged and reported through the return value.
"""

import logging
import smtplib
from typing import Callable

from booking.core import config
from booking.models.appointment import Appointment
from booking.models.settings import BusinessSettings
from booking.notifications import mailer, sms

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(self, admin_url_provider: Callable[[], str] | None = None) -> None:
        self.admin_url_provider = admin_url_provider

    def _admin_url(self) -> str:
        if self.admin_url_provider is None:
            return config.ADMIN_BASE_URL
        try:
            return self.admin_url_provider()
        except Exception:
            logger.warning('Could not resolve admin URL for business SMS', exc_info=True)
            return config.ADMIN_BASE_URL

    def _send_email(self, appointment: Appointment, settings: BusinessSettings, subject: str, html: str) -> bool:
        if not mailer.is_configured():
            logger.warning('SMTP is not configured; skipping email to %s', appointment.email)
            return False
        try:
            mailer.send_html_email(
                to_email=appointment.email,
                subject=subject,
                html=html,
                sender_name=settings.business_name,
                sender_email=settings.business_email,
            )
            return True
        except (smtplib.SMTPException, OSError) as exc:
            logger.error('Email to %s failed (%s: %s)', appointment.email, type(exc).__name__, exc)
            return False

    def send_confirmation(self, appointment: Appointment, settings: BusinessSettings) -> bool:
        results: list[bool] = []

        if settings.email_notifications:
            html = mailer.render_confirmation_html(appointment, settings)
            results.append(self._send_email(appointment, settings, 'Your appointment is confirmed', html))

        if settings.sms_notifications:
            results.append(sms.send_sms(appointment.phone, sms.build_client_confirmation(appointment, settings)))
            if config.BUSINESS_SMS_NUMBER:
                body = sms.build_business_confirmation(appointment, settings, self._admin_url())
                results.append(sms.send_sms(config.BUSINESS_SMS_NUMBER, body))

        return all(results)

    def send_cancellation(self, appointment: Appointment, settings: BusinessSettings) -> bool:
        results: list[bool] = []

        if settings.email_notifications:
            html = mailer.render_cancellation_html(appointment, settings)
            results.append(self._send_email(appointment, settings, 'Your appointment was cancelled', html))

        if settings.sms_notifications:
            results.append(sms.send_sms(appointment.phone, sms.build_cancellation(appointment, settings)))

        return all(results)
