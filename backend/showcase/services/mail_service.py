"""
Showcase API: Mail Service
=============================

What:  Sends the contact-form acknowledgement email through an SMTP relay.
How:   Builds an RFC 5322 message with email.message.EmailMessage and hands it
       to aiosmtplib, which opens a connection, authenticates and sends.
Who:   Called by POST /api/contact.
When:  Once per contact submission. Nothing is queued or retried.

Message Template:
    From:    <GMAIL_USER>
    To:      <submitted email>
    Subject: Thank you for contacting us!

    Hi <name>,

    We received your message:
    "<message>"

    Regards,
    Team
"""

import logging
from email.message import EmailMessage
from typing import Any, Optional

import aiosmtplib
from fastapi import Request

from showcase.config import Settings
from showcase.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)

CONTACT_SUBJECT = "Thank you for contacting us!"

CONTACT_BODY_TEMPLATE = (
    "Hi {name},\n"
    "\n"
    "We received your message:\n"
    "\"{message}\"\n"
    "\n"
    "Regards,\n"
    "Team"
)


def _as_text(value: Any) -> str:
    """Render a submitted value into the message; a missing value becomes empty text."""
    return "" if value is None else str(value)


class Mailer:
    """
    Configured SMTP sender shared by the whole process.

    A connection is opened per send; the relay settings and credentials are
    fixed when the app is built.
    """

    def __init__(
        self,
        hostname: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        sender: Optional[str] = None,
    ):
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender or username

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            hostname=settings.mail_host,
            port=settings.mail_port,
            username=settings.gmail_user,
            password=settings.gmail_pass,
            use_tls=settings.mail_use_tls,
        )

    def build_contact_reply(
        self,
        name: Any,
        email: Any,
        message: Any,
    ) -> EmailMessage:
        """Compose the acknowledgement sent back to a contact submitter."""
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = _as_text(email)
        msg["Subject"] = CONTACT_SUBJECT
        msg.set_content(CONTACT_BODY_TEMPLATE.format(name=_as_text(name), message=_as_text(message)))
        return msg

    async def send(self, msg: EmailMessage) -> None:
        """
        Deliver one message through the relay.

        Raises:
            MailDeliveryError carrying the relay or socket error text.
        """
        recipient = msg["To"]
        try:
            await aiosmtplib.send(
                msg,
                hostname=self.hostname,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                use_tls=self.use_tls,
            )
        except (aiosmtplib.SMTPException, OSError, ValueError) as e:
            logger.warning("Mail to %s failed: %s", recipient, str(e))
            raise MailDeliveryError(
                message=str(e) or type(e).__name__,
                recipient=recipient,
                context={"error_type": type(e).__name__},
            )
        logger.info("Mail sent to %s", recipient)

    async def send_contact_reply(
        self,
        name: Any,
        email: Any,
        message: Any,
    ) -> None:
        await self.send(self.build_contact_reply(name, email, message))


def get_mailer(request: Request) -> Mailer:
    """FastAPI dependency returning the application's Mailer."""
    return request.app.state.mailer
