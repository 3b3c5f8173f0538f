import asyncio
import logging
import smtplib
from email.message import EmailMessage

from auth_service.app.services.email_sender import IEmailSender

logger = logging.getLogger(__name__)


class SmtpEmailSender(IEmailSender):
    """Sends mail through an SMTP server (SMTPS when secure, STARTTLS otherwise)."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        secure: bool = False,
        from_name: str = "NoteMitra",
        timeout: int = 15,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.secure = secure
        self.from_name = from_name
        self.timeout = timeout

    def _build_message(self, to: str, subject: str, html: str, text: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f'"{self.from_name}" <{self.username}>'
        msg["To"] = to
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        if self.secure:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                server.login(self.username, self.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)

    async def send(self, to: str, subject: str, html: str, text: str) -> bool:
        msg = self._build_message(to, subject, html, text)
        try:
            # smtplib blocks; keep the event loop free
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"Failed to send email to {to}: {exc}")
            return False
        logger.info(f"Sent email to {to} with subject '{subject}'")
        return True


class LoggingEmailSender(IEmailSender):
    """Non-sending mode used when SMTP credentials are absent. Reports success."""

    async def send(self, to: str, subject: str, html: str, text: str) -> bool:
        logger.warning(f"SMTP not configured; email to {to} with subject '{subject}' was not sent")
        return True
