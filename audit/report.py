"""
Report formatting and email delivery for extension_audit

The report is a single plaintext email covering every flagged account.
Nothing is sent when no account has findings.

Usage:
    from audit.report import SmtpEmailSender, send_report

    sender = SmtpEmailSender.from_config(config)
    send_report(results, config, sender)
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import List, Sequence

from audit.config import LOGGER_NAME, Config
from audit.models import AccountFindings

logger = logging.getLogger(f"{LOGGER_NAME}.{__name__}")

REPORT_TITLE = "Disapproved Ad Extensions Report"
SEPARATOR = "-" * 40


def format_report(results: Sequence[AccountFindings]) -> str:
    """
    Build the plaintext report body.

    Each account gets a header line, a separator, a Type/Text/Disapproval
    Reason block per finding (each followed by a blank line) and a trailing
    blank line.
    """
    lines = [REPORT_TITLE, ""]

    for result in results:
        account = result.account
        lines.append(f"Account: {account.name} ({account.customer_id})")
        lines.append(SEPARATOR)

        for finding in result.findings:
            lines.append(f"Type: {finding.extension_type}")
            lines.append(f"Text: {finding.text}")
            lines.append(f"Disapproval Reason: {finding.disapproval_reason}")
            lines.append("")

        lines.append("")

    return "\n".join(lines) + "\n"


class SmtpEmailSender:
    """Sends plaintext email through an SMTP server."""

    def __init__(
        self,
        host: str,
        port: int,
        from_addr: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True
    ):
        self.host = host
        self.port = port
        self.from_addr = from_addr
        self.username = username
        self.password = password
        self.use_tls = use_tls

    @classmethod
    def from_config(cls, config: Config) -> "SmtpEmailSender":
        return cls(
            host=config.smtp_host,
            port=config.smtp_port,
            from_addr=config.email_from,
            username=config.smtp_username,
            password=config.smtp_password,
            use_tls=config.smtp_use_tls,
        )

    def send(self, recipients: List[str], subject: str, body: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.from_addr
        msg["To"] = ", ".join(recipients)
        msg.set_content(body)

        with smtplib.SMTP(self.host, self.port) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(msg)


def send_report(results: Sequence[AccountFindings], config: Config, sender) -> bool:
    """
    Send the report if there is anything to report.

    Args:
        results: Accounts with at least one finding
        config: Supplies recipients and subject
        sender: Object exposing ``send(recipients, subject, body)``

    Returns:
        True if an email was sent
    """
    if not results:
        logger.info("No disapproved extensions found, no email sent")
        return False

    sender.send(config.email_recipients, config.email_subject, format_report(results))
    logger.info(f"Report email sent to {len(config.email_recipients)} recipient(s)")
    return True
