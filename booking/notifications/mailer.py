import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from booking.core import config
from booking.models.appointment import Appointment
from booking.models.settings import BusinessSettings

logger = logging.getLogger(__name__)


def is_configured() -> bool:
    return bool(config.SMTP_HOST and config.SMTP_USER and config.SMTP_PASS)


def _format_date(appointment: Appointment) -> str:
    return appointment.date.strftime('%A %d %B %Y')


def render_confirmation_html(appointment: Appointment, settings: BusinessSettings) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: #F26440; color: white; padding: 20px; text-align: center;">
    <h1 style="margin: 0;">{escape(settings.business_name)}</h1>
  </div>
  <div style="padding: 20px; background: #f9f9f9;">
    <h2 style="color: #333;">Hello {escape(appointment.first_name)},</h2>
    <p>Your appointment is confirmed.</p>
    <p><strong>Date:</strong> {_format_date(appointment)}</p>
    <p><strong>Time:</strong> {appointment.time}</p>
    <p><strong>Service:</strong> {escape(appointment.service)}</p>
    <p><strong>Estimated duration:</strong> {appointment.duration} minutes</p>
    <p><strong>Address:</strong> {escape(settings.business_address)}</p>
    <p style="color: #666; font-size: 14px;">
      To change or cancel your appointment, call us on {escape(settings.business_phone)}.
    </p>
  </div>
</div>
"""


def render_cancellation_html(appointment: Appointment, settings: BusinessSettings) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Hello {escape(appointment.first_name)},</h2>
  <p>Your appointment on {_format_date(appointment)} at {appointment.time} has been cancelled.</p>
  <p style="color: #666; font-size: 14px;">
    For any question, call {escape(settings.business_name)} on {escape(settings.business_phone)}.
  </p>
</div>
"""


def send_html_email(to_email: str, subject: str, html: str, sender_name: str, sender_email: str) -> None:
    sender = sender_email or config.SMTP_USER
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f'"{sender_name}" <{sender}>' if sender_name else sender
    msg["To"] = to_email
    msg.attach(MIMEText(html, "html", "utf-8"))

    with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=20) as server:
        server.starttls()
        server.login(config.SMTP_USER, config.SMTP_PASS)
        server.sendmail(sender, [to_email], msg.as_string())

    logger.info('Email "%s" sent to %s', subject, to_email)
