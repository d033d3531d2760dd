"""
Audit job for the extension_audit scheduler.

A failed run is recorded and logged, then the error is re-raised; there
are no retries.
"""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional

from audit.config import DEFAULT_SCHEDULE, LOGGER_NAME


@dataclass
class JobConfig:
    """
    Configuration for a scheduled audit job.

    Attributes:
        name: Unique job identifier
        enabled: Whether the job is put on the schedule (off unless asked for)
        schedule: Cron expression (e.g., '0 7 * * *' for 7 AM daily)
        label_name: Override for the audited account label (None uses configuration)
    """
    name: str
    enabled: bool = False
    schedule: str = DEFAULT_SCHEDULE
    label_name: Optional[str] = None


@dataclass
class JobRun:
    """One execution of an audit job."""
    job_name: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    success: bool = False
    accounts_audited: int = 0
    accounts_flagged: int = 0
    email_sent: bool = False
    error_message: Optional[str] = None


def run_configured_audit(label_name: Optional[str] = None, job_logger: Optional[logging.Logger] = None):
    """Build the client and sender from configuration and run one audit."""
    from audit.config import get_config
    from audit.gads_auditor import GAdsAuditor
    from audit.gads_config import get_gads_client, get_gads_config
    from audit.pipeline import run_audit
    from audit.report import SmtpEmailSender

    config = get_config()
    if label_name:
        config = dataclasses.replace(config, label_name=label_name)

    auditor = GAdsAuditor(get_gads_client(), get_gads_config().manager_customer_id, job_logger)
    return run_audit(auditor, config, SmtpEmailSender.from_config(config), job_logger)


class AuditJob:
    """Runs the audit for one JobConfig and keeps a history of its runs."""

    def __init__(self, config: JobConfig, audit_fn: Optional[Callable[..., Any]] = None):
        """
        Args:
            config: Job configuration
            audit_fn: Callable(label_name, logger) returning an AuditSummary;
                      defaults to run_configured_audit
        """
        self.config = config
        self.audit_fn = audit_fn or run_configured_audit
        self.last_run: Optional[JobRun] = None
        self.run_history: List[JobRun] = []
        self.logger = logging.getLogger(f"{LOGGER_NAME}.job.{config.name}")

    def execute(self, force: bool = False) -> JobRun:
        """
        Run the audit once.

        A disabled job returns an unsuccessful JobRun without running unless
        ``force`` is set.

        Raises:
            Whatever the audit raised, after recording the failed run
        """
        if not self.config.enabled and not force:
            self.logger.warning(f"Job {self.config.name} is disabled")
            now = datetime.now()
            return JobRun(self.config.name, now, completed_at=now, error_message="Job is disabled")

        run = JobRun(job_name=self.config.name, started_at=datetime.now())
        self.last_run = run
        self.run_history.append(run)

        self.logger.info(f"Starting job {self.config.name}")

        try:
            summary = self.audit_fn(self.config.label_name, self.logger)
        except Exception as e:
            run.completed_at = datetime.now()
            run.error_message = str(e)
            self.logger.error(f"Job {self.config.name} failed: {e}")
            raise

        run.completed_at = datetime.now()
        run.success = True
        run.accounts_audited = summary.accounts_audited
        run.accounts_flagged = len(summary.results)
        run.email_sent = summary.email_sent

        self.logger.info(
            f"Job {self.config.name} completed: {run.accounts_audited} audited, "
            f"{run.accounts_flagged} flagged, email {'sent' if run.email_sent else 'not sent'}"
        )
        return run
