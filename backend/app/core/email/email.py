import logging
import smtplib
import ssl
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.message import EmailMessage
from typing import Any, Dict, List, Optional, Protocol

import boto3
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import AppConfig
from app.core.response.outcome import SideEffectOutcome

logger = logging.getLogger(__name__)


class MissingRecipient(ValueError):
    pass


class Transport(Protocol):
    def deliver(self, message: EmailMessage) -> None: ...

    def verify(self) -> None: ...

    def close(self) -> None: ...


class SMTPTransport:
    """
    One persistent SMTP connection shared by every sender in the process.

    Background tasks run in a thread pool, so access to the connection is
    serialised with a lock. A connection the server has dropped is replaced
    before the next message; the message itself is sent once.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        debug: bool = False,
        reject_unauthorized: bool = True,
        timeout: float = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.debug = debug
        self.timeout = timeout
        self.ssl_context = ssl.create_default_context()
        if not reject_unauthorized:
            self.ssl_context.check_hostname = False
            self.ssl_context.verify_mode = ssl.CERT_NONE
        self._connection: Optional[smtplib.SMTP] = None
        self._lock = threading.Lock()

    def _connect(self) -> smtplib.SMTP:
        if self.port == 465:
            connection = smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout, context=self.ssl_context
            )
        else:
            connection = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            connection.ehlo()
            if connection.has_extn("starttls"):
                connection.starttls(context=self.ssl_context)
                connection.ehlo()
        if self.debug:
            connection.set_debuglevel(1)
        if self.user and self.password:
            connection.login(self.user, self.password)
        return connection

    def _is_alive(self) -> bool:
        if self._connection is None:
            return False
        try:
            return self._connection.noop()[0] == 250
        except smtplib.SMTPException:
            return False
        except OSError:
            return False

    def _ensure_connection(self) -> smtplib.SMTP:
        if not self._is_alive():
            if self._connection is not None:
                try:
                    self._connection.close()
                except OSError as e:
                    logger.warning(f"Closing stale SMTP connection failed: {e}")
            self._connection = self._connect()
        return self._connection

    def deliver(self, message: EmailMessage) -> None:
        with self._lock:
            self._ensure_connection().send_message(message)

    def verify(self) -> None:
        with self._lock:
            self._ensure_connection()

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                try:
                    self._connection.quit()
                except smtplib.SMTPException:
                    pass
                except OSError:
                    pass
                self._connection = None


class SESTransport:
    def __init__(self, access_key: str, secret_key: str, region: str):
        self.client = boto3.client(
            "ses",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
        )

    def deliver(self, message: EmailMessage) -> None:
        response = self.client.send_raw_email(
            Source=message["From"],
            Destinations=[message["To"]],
            RawMessage={"Data": message.as_string()},
        )
        logger.info(f"Email accepted by SES, message id {response['MessageId']}")

    def verify(self) -> None:
        self.client.get_send_quota()

    def close(self) -> None:
        pass


@dataclass
class SandboxTransport:
    """Keeps messages in memory instead of delivering them."""

    outbox: List[EmailMessage] = field(default_factory=list)

    def __post_init__(self):
        self._lock = threading.Lock()

    def deliver(self, message: EmailMessage) -> None:
        with self._lock:
            self.outbox.append(message)
        logger.info(
            f"[sandbox] captured email to {message['To']}: {message['Subject']!r}"
        )

    def verify(self) -> None:
        logger.warning(
            "No SMTP or SES transport configured. Using the sandbox outbox; "
            "emails will not reach real inboxes."
        )

    def close(self) -> None:
        pass

    def messages_to(self, recipient: str) -> List[EmailMessage]:
        with self._lock:
            return [message for message in self.outbox if message["To"] == recipient]


class Mailer:
    """Renders jinja2 email templates and hands them to a transport."""

    def __init__(self, transport: Transport, sender: str, templates_dir: str):
        self.transport = transport
        self.sender = sender
        self.templates = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(["html", "email"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def is_sandbox(self) -> bool:
        return isinstance(self.transport, SandboxTransport)

    def render_template(self, template_path: str, context: Optional[Dict[str, Any]] = None) -> str:
        return self.templates.get_template(template_path).render(context or {})

    def send(self, to: Optional[str], subject: str, body_html: str) -> None:
        """
        Hand one HTML message to the transport.

        Returns once the transport accepted it; delivery is not confirmed.
        """
        if not to:
            raise MissingRecipient("Missing recipient")

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = to
        message["Date"] = datetime.now(timezone.utc)
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(body_html, subtype="html")

        self.transport.deliver(message)

    def send_template(
        self,
        to: Optional[str],
        subject: str,
        template_path: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.send(to, subject, self.render_template(template_path, context))

    def send_best_effort(
        self,
        to: Optional[str],
        subject: str,
        template_path: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> SideEffectOutcome:
        """Like send_template, but failures are logged and reported, never raised."""
        name = f"email:{template_path}"
        try:
            self.send_template(to, subject, template_path, context)
        except Exception as e:
            logger.exception(f"Failed to send {template_path} email to {to}")
            return SideEffectOutcome.failed(name, e)
        return SideEffectOutcome.ok(name)

    def verify(self) -> bool:
        try:
            self.transport.verify()
        except Exception as e:
            logger.error(f"Mail transport verification failed: {e}")
            return False
        logger.info(f"Mail transport ready ({type(self.transport).__name__})")
        return True

    def close(self) -> None:
        self.transport.close()


def build_mailer(config: AppConfig) -> Mailer:
    if config.SMTP_HOST:
        transport = SMTPTransport(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            user=config.SMTP_USER,
            password=config.SMTP_PASS,
            debug=config.SMTP_DEBUG,
            reject_unauthorized=config.SMTP_TLS_REJECT_UNAUTH,
        )
    elif config.SES_ACCESS_KEY and config.SES_SECRET_KEY:
        transport = SESTransport(
            access_key=config.SES_ACCESS_KEY,
            secret_key=config.SES_SECRET_KEY,
            region=config.SES_REGION,
        )
    else:
        transport = SandboxTransport()
    return Mailer(
        transport=transport,
        sender=config.from_email,
        templates_dir=config.TEMPLATES_DIR,
    )
