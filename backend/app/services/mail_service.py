"""
Outgoing mail over SMTP, configured from settings.mail_*.
When mail_user/mail_pass are missing the message is logged and reported as mocked.
"""
import smtplib
from email.mime.text import MIMEText

from backend.app.core.config import MAIL_SERVICE_HOSTS, settings
from backend.app.core.logging_config import get_logger

logger = get_logger("services.mail")

DEFAULT_FROM = '"Freelance Marketplace" <no-reply@example.com>'


def is_configured() -> bool:
    return bool(settings.mail_user and settings.mail_pass)


def _smtp_host() -> str:
    service = (settings.mail_service or "").strip().lower()
    return MAIL_SERVICE_HOSTS.get(service, settings.mail_host)


def send_mail(to: str, subject: str, html: str) -> dict:
    """Send an HTML email. Raises smtplib.SMTPException / OSError on transport failure."""
    if not is_configured():
        logger.warning("Mailer not configured, email not sent to=%s subject=%s", to, subject)
        return {"mocked": True}

    sender = settings.mail_from or settings.mail_user or DEFAULT_FROM
    msg = MIMEText(html, "html", "utf-8")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to

    host = _smtp_host()
    if settings.mail_secure:
        server = smtplib.SMTP_SSL(host, settings.mail_port, timeout=settings.mail_timeout)
    else:
        server = smtplib.SMTP(host, settings.mail_port, timeout=settings.mail_timeout)
    with server:
        if not settings.mail_secure:
            server.starttls()
        server.login(settings.mail_user, settings.mail_pass)
        server.sendmail(sender, [to], msg.as_string())

    logger.info("Email sent to=%s subject=%s host=%s", to, subject, host)
    return {"mocked": False}


def password_reset_html(otp: str, expire_minutes: int) -> str:
    return (
        '<div style="font-family: Arial, sans-serif;">'
        "<h2>Password Reset Code</h2>"
        "<p>Your one-time password (OTP) to reset your account is:</p>"
        f'<p style="font-size: 24px; font-weight: bold;">{otp}</p>'
        f"<p>This code expires in {expire_minutes} minutes.</p>"
        "<p>If you didn't request this, you can ignore this email.</p>"
        "</div>"
    )
