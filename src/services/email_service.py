"""SMTP delivery of templated emails."""
import logging
import re
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

logger = logging.getLogger(__name__)


class EmailConfigError(Exception):
    """SMTP settings are incomplete."""


class TemplateNotFoundError(Exception):
    """A ``.txt`` or ``.html`` part of a template is missing."""


@dataclass
class EmailResult:
    """Outcome of one delivery attempt."""

    success: bool
    error: Optional[str] = None


class EmailService:
    """
    Renders Jinja2 email templates and hands them to an SMTP relay.

    Each template is a pair of files, ``<name>.txt`` and ``<name>.html``,
    sent together as a multipart/alternative message. Transport problems
    are returned as a failed EmailResult instead of raised.
    """

    RECIPIENT_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")

    DEFAULT_SUBJECTS = {
        "password_recovery": "Recuperação de Senha",
    }

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        from_email: str,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        use_tls: bool = False,
        from_name: str = "Recuperação de Conta",
        template_dir: str = "src/templates/email",
    ):
        """
        Args:
            smtp_host: Relay hostname
            smtp_port: Relay port
            from_email: Sender address
            smtp_user: Login name, no login when empty
            smtp_password: Required together with smtp_user
            use_tls: Upgrade the connection with STARTTLS
            from_name: Display name of the sender
            template_dir: Directory holding the template pairs

        Raises:
            EmailConfigError: A required setting is missing
        """
        missing = [
            name
            for name, value in (
                ("smtp_host", smtp_host),
                ("smtp_port", smtp_port),
                ("from_email", from_email),
            )
            if not value
        ]
        if smtp_user and not smtp_password:
            missing.append("smtp_password (smtp_user is set)")
        if missing:
            raise EmailConfigError(f"Missing email settings: {', '.join(missing)}")

        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user or None
        self._smtp_password = smtp_password
        self._use_tls = use_tls
        self._from_email = from_email
        self._from_name = from_name

        self._templates = Environment(
            loader=FileSystemLoader(template_dir), autoescape=True
        )

    def send_email(
        self,
        to_email: str,
        subject: str,
        body_text: str,
        body_html: Optional[str] = None,
    ) -> EmailResult:
        """Deliver one message. Never raises on transport errors."""
        if not to_email or not self.RECIPIENT_PATTERN.match(to_email):
            return EmailResult(success=False, error=f"Invalid recipient address: {to_email!r}")

        message = self._build_message(to_email, subject, body_text, body_html)

        try:
            with smtplib.SMTP(self._smtp_host, self._smtp_port) as relay:
                if self._use_tls:
                    relay.starttls()
                if self._smtp_user:
                    relay.login(self._smtp_user, self._smtp_password)
                relay.sendmail(self._from_email, to_email, message.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {to_email} failed: {e}")
            return EmailResult(success=False, error=str(e))

        logger.info(f"Email '{subject}' delivered to {to_email}")
        return EmailResult(success=True)

    def render_template(
        self, template_name: str, context: Dict[str, Any]
    ) -> Tuple[str, str]:
        """
        Render both parts of a template.

        Returns:
            (plain_text, html)

        Raises:
            TemplateNotFoundError: Either file is missing
        """
        return (
            self._render(f"{template_name}.txt", context),
            self._render(f"{template_name}.html", context),
        )

    def send_template(
        self,
        to: str,
        template: str,
        context: Dict[str, Any],
        subject: Optional[str] = None,
    ) -> EmailResult:
        """
        Render a template and deliver it.

        The subject falls back to DEFAULT_SUBJECTS, then to the template
        name in title case. A missing template is a failed result.
        """
        try:
            text_body, html_body = self.render_template(template, context)
        except TemplateNotFoundError as e:
            logger.error(str(e))
            return EmailResult(success=False, error=str(e))

        if subject is None:
            subject = self.DEFAULT_SUBJECTS.get(template, template.replace("_", " ").title())

        return self.send_email(
            to_email=to,
            subject=subject,
            body_text=text_body,
            body_html=html_body,
        )

    def _render(self, filename: str, context: Dict[str, Any]) -> str:
        try:
            return self._templates.get_template(filename).render(**context)
        except TemplateNotFound as e:
            raise TemplateNotFoundError(f"Email template '{filename}' not found") from e

    def _build_message(
        self, to_email: str, subject: str, body_text: str, body_html: Optional[str]
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative") if body_html else MIMEMultipart()
        message["From"] = f"{self._from_name} <{self._from_email}>"
        message["To"] = to_email
        message["Subject"] = subject
        message.attach(MIMEText(body_text, "plain", "utf-8"))
        if body_html:
            message.attach(MIMEText(body_html, "html", "utf-8"))
        return message
