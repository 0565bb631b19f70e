import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

from yelpcamp.core.config import Settings
from yelpcamp.errors import MailError

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to: str, subject: Optional[str], body: str) -> None: ...


class SmtpMailer:
    def __init__(self, settings: Settings):
        self.host = settings.MAIL_HOST
        self.port = settings.MAIL_PORT
        self.username = settings.MAIL_USERNAME
        self.password = settings.MAIL_PASSWORD
        self.sender = settings.mail_sender
        self.use_tls = settings.MAIL_USE_TLS

    def send(self, to: str, subject: Optional[str], body: str) -> None:
        msg = EmailMessage()
        msg["To"] = to
        msg["From"] = self.sender or ""
        if subject:
            msg["Subject"] = subject
        msg.set_content(body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("mail to %s failed: %s", to, e)
            raise MailError(str(e)) from e
        logger.info("mail sent to %s", to)


def reset_request_body(host: str, token: str) -> str:
    return (
        "You are receiving this because you (or someone else) have requested the reset of the "
        "password associated with your account. "
        "Please click on the following link, or paste it into your browser to complete the "
        f"password reset process: http://{host}/reset/{token}\n\n"
        "If you did not request this, please ignore this email."
    )


def reset_done_body(email: str) -> str:
    return (
        "Hello,\n\n"
        f"This is a confirmation that the password for your account {email} has just been changed.\n"
    )
