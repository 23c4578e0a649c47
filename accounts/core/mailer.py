"""
Email adapter for the accounts backend.

Delivery goes over SMTP (implicit TLS on 465, STARTTLS otherwise) using the
credentials carried by Settings. Callers get a bool back; delivery problems
are logged, never raised.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import logging
import smtplib
import ssl

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

SMTPS_PORT = 465


def smtp_configured(settings: Settings) -> bool:
    return all(
        (settings.smtp_host, settings.smtp_port, settings.smtp_user, settings.smtp_password, settings.smtp_from)
    )


def build_message(sender: str, to_email: str, subject: str, html_body: str, text_body: str | None) -> MIMEMultipart:
    """multipart/alternative with the plain part first; the HTML doubles as text when none is given."""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to_email
    msg.attach(MIMEText(text_body or html_body, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    return msg


def _connect(settings: Settings) -> smtplib.SMTP:
    context = ssl.create_default_context()
    if settings.smtp_port == SMTPS_PORT:
        return smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context)
    server = smtplib.SMTP(settings.smtp_host, settings.smtp_port)
    try:
        server.ehlo()
        server.starttls(context=context)
    except (smtplib.SMTPException, OSError):
        server.close()
        raise
    return server


def send_email(
    subject: str,
    to_email: str,
    html_body: str,
    text_body: str | None = None,
    *,
    settings: Settings | None = None,
) -> bool:
    """Send one message; False when SMTP is unconfigured or the server refuses it."""
    settings = settings or get_settings()
    if not smtp_configured(settings):
        logger.warning("SMTP not configured; skipping email %r", subject)
        return False
    msg = build_message(settings.smtp_from, to_email, subject, html_body, text_body)
    try:
        with _connect(settings) as server:
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.smtp_from, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Failed to send email to %s: %s", to_email, exc)
        return False
    logger.info("sent %r to %s", subject, to_email)
    return True
