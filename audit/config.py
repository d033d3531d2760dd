"""
Configuration Loader for extension_audit

Settings come from environment variables, optionally seeded from a .env
file via python-dotenv. They are validated once and cached; a bad value
raises ConfigurationError with instructions for fixing it.

Usage:
    from audit.config import get_config

    config = get_config()
    print(config.label_name)
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_LABEL_NAME = "TB_Script"
DEFAULT_EMAIL_SUBJECT = "Disapproved Ad Extensions Report"
DEFAULT_SCHEDULE = "0 7 * * *"

# Root of every logger in the project; setup_logging attaches handlers here
LOGGER_NAME = "extension_audit"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

PROJECT_ROOT = Path(__file__).parent.parent


class ConfigurationError(Exception):
    """
    Raised when configuration is invalid or incomplete.

    Attributes:
        message: Human-readable description of the error
        fix: Actionable instructions to resolve the issue
    """

    def __init__(self, message: str, fix: str = ""):
        self.message = message
        self.fix = fix
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        rule = "=" * 60
        text = f"\n{rule}\nCONFIGURATION ERROR\n{rule}\n\n{self.message}"
        if self.fix:
            text += f"\n\nHOW TO FIX:\n{self.fix}"
        return text + f"\n\n{rule}\n"


@dataclass
class Config:
    """
    Validated audit settings.

    Attributes:
        label_name: Only accounts carrying this label are audited
        email_recipients: Report recipients
        email_subject: Report subject line
        email_from: Sender address
        smtp_host: SMTP server host
        smtp_port: SMTP server port
        smtp_username: SMTP login (empty to skip login)
        smtp_password: SMTP password
        smtp_use_tls: Whether to issue STARTTLS before sending
        schedule: Cron expression used by the scheduler
        log_dir: Directory for log files
        log_level: Logging level name
    """

    label_name: str
    email_recipients: List[str]
    email_subject: str

    email_from: str
    smtp_host: str
    smtp_port: int
    smtp_username: str
    smtp_password: str
    smtp_use_tls: bool

    schedule: str

    log_dir: Path
    log_level: str


_config_instance: Optional[Config] = None


def load_env_file() -> bool:
    """Load the first .env file found (cwd, then project root). Returns True if one was loaded."""
    for env_path in (Path.cwd() / ".env", PROJECT_ROOT / ".env"):
        if env_path.exists():
            load_dotenv(env_path)
            return True
    return False


def parse_recipients(raw: str) -> List[str]:
    """Split a comma-separated recipient list, dropping blanks."""
    return [addr.strip() for addr in raw.split(",") if addr.strip()]


def _label_name() -> str:
    label_name = os.getenv("AUDIT_LABEL_NAME", DEFAULT_LABEL_NAME).strip()
    if not label_name:
        raise ConfigurationError(
            message="AUDIT_LABEL_NAME is set but empty.",
            fix=f"Set AUDIT_LABEL_NAME={DEFAULT_LABEL_NAME} or remove it to use the default."
        )
    return label_name


def _recipients() -> List[str]:
    recipients = parse_recipients(os.getenv("AUDIT_EMAIL_RECIPIENTS", ""))
    if not recipients:
        raise ConfigurationError(
            message="Missing AUDIT_EMAIL_RECIPIENTS environment variable.",
            fix="   AUDIT_EMAIL_RECIPIENTS=ads-team@example.com,owner@example.com"
        )
    return recipients


def _smtp_port() -> int:
    raw = os.getenv("SMTP_PORT", "587").strip()
    if not raw.isdigit() or int(raw) < 1:
        raise ConfigurationError(
            message=f"Invalid SMTP_PORT value: {raw}",
            fix="SMTP_PORT must be a positive integer (587 for STARTTLS)"
        )
    return int(raw)


def _sender_address(smtp_username: str) -> str:
    email_from = os.getenv("AUDIT_EMAIL_FROM", "").strip() or smtp_username
    if not email_from:
        raise ConfigurationError(
            message="No sender address configured.",
            fix="Set AUDIT_EMAIL_FROM, or SMTP_USERNAME when it is an email address."
        )
    return email_from


def _schedule() -> str:
    schedule = os.getenv("AUDIT_SCHEDULE", DEFAULT_SCHEDULE).strip()
    if len(schedule.split()) != 5:
        raise ConfigurationError(
            message=f"Invalid AUDIT_SCHEDULE: {schedule!r}",
            fix=f"Use a 5-field cron expression, e.g. AUDIT_SCHEDULE={DEFAULT_SCHEDULE} for 7 AM daily"
        )
    return schedule


def _log_dir() -> Path:
    log_dir = Path(os.getenv("LOG_DIR", "./logs"))
    if not log_dir.is_absolute():
        log_dir = (PROJECT_ROOT / log_dir).resolve()

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        raise ConfigurationError(
            message=f"Cannot create log directory: {log_dir}",
            fix="Create it with write permission, or point LOG_DIR somewhere writable."
        )
    return log_dir


def _log_level() -> str:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(
            message=f"Invalid LOG_LEVEL: {log_level}",
            fix=f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}"
        )
    return log_level


def get_config(force_reload: bool = False) -> Config:
    """
    Load and validate configuration from environment variables.

    The result is cached; force_reload=True re-reads the environment.

    Raises:
        ConfigurationError: If any required setting is missing or invalid
    """
    global _config_instance

    if _config_instance is not None and not force_reload:
        return _config_instance

    env_loaded = load_env_file()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger = logging.getLogger(f"{LOGGER_NAME}.config")
    logger.info("Loaded .env file" if env_loaded else "No .env file found, using the process environment")

    smtp_username = os.getenv("SMTP_USERNAME", "").strip()

    config = Config(
        label_name=_label_name(),
        email_recipients=_recipients(),
        email_subject=os.getenv("AUDIT_EMAIL_SUBJECT", "").strip() or DEFAULT_EMAIL_SUBJECT,
        email_from=_sender_address(smtp_username),
        smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com").strip(),
        smtp_port=_smtp_port(),
        smtp_username=smtp_username,
        smtp_password=os.getenv("SMTP_PASSWORD", "").strip(),
        smtp_use_tls=os.getenv("SMTP_USE_TLS", "1").lower() in ("1", "true", "yes"),
        schedule=_schedule(),
        log_dir=_log_dir(),
        log_level=_log_level(),
    )

    # No secrets in the log
    logger.info(
        f"Configuration loaded: label={config.label_name}, "
        f"recipients={len(config.email_recipients)}, "
        f"smtp={config.smtp_host}:{config.smtp_port}, schedule='{config.schedule}'"
    )

    _config_instance = config
    return _config_instance


def setup_logging(config: Config) -> logging.Logger:
    """
    Attach console and daily-rotated file handlers to the project logger.

    Log files are kept for 30 days under config.log_dir.
    """
    from logging.handlers import TimedRotatingFileHandler

    level = getattr(logging, config.log_level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))

    file_handler = TimedRotatingFileHandler(
        config.log_dir / f"{LOGGER_NAME}.log",
        when="midnight",
        backupCount=30,
        encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    ))

    for handler in (console_handler, file_handler):
        handler.setLevel(level)
        logger.addHandler(handler)

    return logger
