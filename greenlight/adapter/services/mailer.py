import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Mapping

from greenlight.adapter.services.email_templates import TEMPLATES
from greenlight.app.services.notifications import INotificationTransport
from greenlight.domain.errors import Error, ErrorCode
from greenlight.domain.result import Result, Return

logger = logging.getLogger(__name__)


class SmtpMailer(INotificationTransport):
    """SMTP delivery of the bundled e-mail templates. Blocking; run it off the event loop."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        timeout: float = 5.0,
        starttls: bool = False,
    ):
        self.host = host
        self.port = port
        self.username = username
        self._password = password
        self.sender = sender
        self.timeout = timeout
        self.starttls = starttls

    @classmethod
    def from_config(cls, config) -> "SmtpMailer":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            sender=config.SMTP_SENDER,
            timeout=config.SMTP_TIMEOUT_SECONDS,
            starttls=config.SMTP_STARTTLS,
        )

    def build_message(self, recipient: str, template_id: str, data: Mapping[str, Any]) -> MIMEMultipart:
        template = TEMPLATES[template_id]
        rendered = template.render(data)

        message = MIMEMultipart("alternative")
        message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = rendered["subject"]
        message.attach(MIMEText(rendered["plain_body"], "plain"))
        message.attach(MIMEText(rendered["html_body"], "html"))
        return message

    def send(self, recipient: str, template_id: str, data: Mapping[str, Any]) -> Result[None]:
        if template_id not in TEMPLATES:
            return Return.err(
                Error(ErrorCode.INTERNAL_ERROR, f"Unknown e-mail template: {template_id}")
            )
        try:
            message = self.build_message(recipient, template_id, data)
        except KeyError as exc:
            return Return.err(
                Error(ErrorCode.INTERNAL_ERROR, f"Template {template_id} is missing {exc}")
            )

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self._password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            return Return.err(
                Error(
                    ErrorCode.INTERNAL_ERROR,
                    f"Sending {template_id} e-mail failed: {type(exc).__name__}",
                )
            )

        logger.info("Sent %s e-mail", template_id)
        return Return.ok(None)
