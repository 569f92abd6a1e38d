import logging
from abc import ABC, abstractmethod
from email.message import EmailMessage
from email.utils import make_msgid

import aiosmtplib
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from quote_relay.config import Settings
from quote_relay.errors import ConfigurationError, SendError
from quote_relay.schemas import MailMessage

LOG = logging.getLogger("quote_relay.email")


class Mailer(ABC):
    """Sends one MailMessage and returns the transport's message id."""

    @abstractmethod
    async def send(self, message: MailMessage) -> str:
        ...


class SmtpMailer(Mailer):
    def __init__(self, host: str, port: int, username: str, password: str, timeout: float = 30.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

    def _compose(self, message: MailMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = message.sender
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg["Message-ID"] = make_msgid(domain=message.sender.rpartition("@")[2] or None)
        msg.set_content(message.body)
        return msg

    async def send(self, message: MailMessage) -> str:
        msg = self._compose(message)
        try:
            await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.port == 465,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise SendError(f"SMTP send failed: {e}") from e
        return msg["Message-ID"]


class SesMailer(Mailer):
    def __init__(self, region: str, client=None):
        self.region = region
        self._ses = client

    def _client(self):
        if self._ses is None:
            self._ses = boto3.client("ses", region_name=self.region)
        return self._ses

    def _send_sync(self, message: MailMessage) -> str:
        try:
            res = self._client().send_email(
                Source=message.sender,
                Destination={"ToAddresses": [message.to]},
                Message={
                    "Subject": {"Data": message.subject},
                    "Body": {"Text": {"Data": message.body}},
                },
            )
        except ClientError as e:
            raise SendError(f"SES send failed: {e.response['Error'].get('Message')}") from e
        except BotoCoreError as e:
            raise SendError(f"SES send failed: {e}") from e
        return res["MessageId"]

    async def send(self, message: MailMessage) -> str:
        # boto3 is blocking
        return await run_in_threadpool(self._send_sync, message)


def build_mailer(s: Settings) -> Mailer:
    """Create the transport named by MAIL_TRANSPORT. Raises ConfigurationError if it is not fully configured."""
    missing = s.missing_mail_settings()
    LOG.info("Creating %s transport: %s", s.MAIL_TRANSPORT, {
        "user": "SET" if s.MAIL_USERNAME else "NOT SET",
        "pass": "SET" if s.MAIL_PASSWORD else "NOT SET",
    })
    if missing:
        raise ConfigurationError(missing)
    if s.MAIL_TRANSPORT == "ses":
        return SesMailer(region=s.SES_REGION)
    return SmtpMailer(
        host=s.SMTP_HOST,
        port=s.SMTP_PORT,
        username=s.MAIL_USERNAME or "",
        password=s.MAIL_PASSWORD or "",
        timeout=s.SMTP_TIMEOUT,
    )
