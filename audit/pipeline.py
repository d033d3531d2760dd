"""
End-to-end audit run: select accounts, check each one, report.

Any platform or send failure propagates and ends the run.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from audit.checkers import EXTENSION_CHECKS, process_account, select_accounts
from audit.config import LOGGER_NAME, Config
from audit.models import AccountFindings
from audit.report import format_report, send_report


@dataclass
class AuditSummary:
    """
    Outcome of one audit run.

    Attributes:
        accounts_audited: Number of labelled accounts checked
        results: Accounts with at least one finding, in processing order
        email_sent: Whether the report email went out
        report_body: Formatted report ('' when nothing was found)
    """
    accounts_audited: int = 0
    results: List[AccountFindings] = field(default_factory=list)
    email_sent: bool = False
    report_body: str = ""

    @property
    def findings_count(self) -> int:
        return sum(len(result.findings) for result in self.results)


def run_audit(
    auditor,
    config: Config,
    sender=None,
    logger: Optional[logging.Logger] = None
) -> AuditSummary:
    """
    Audit every labelled account and email the findings.

    Args:
        auditor: GAdsAuditor (or any object with list_accounts/list_extensions)
        config: Validated configuration
        sender: Email sender; None formats the report without sending
        logger: Optional logger instance

    Returns:
        AuditSummary for the run
    """
    logger = logger or logging.getLogger(f"{LOGGER_NAME}.{__name__}")
    summary = AuditSummary()

    accounts = select_accounts(auditor.list_accounts(), config.label_name)
    logger.info(f"{len(accounts)} account(s) carry label '{config.label_name}'")

    for account in accounts:
        logger.info(f"Checking {account.name} ({account.customer_id})")
        result = process_account(auditor, account, EXTENSION_CHECKS)
        summary.accounts_audited += 1

        if result.has_disapproved_extensions:
            summary.results.append(result)

    if summary.results:
        summary.report_body = format_report(summary.results)

    logger.info(
        f"Audit complete: {summary.accounts_audited} audited, "
        f"{len(summary.results)} flagged, {summary.findings_count} findings"
    )

    if sender is None:
        if summary.results:
            logger.info("Dry run: report not sent")
        return summary

    summary.email_sent = send_report(summary.results, config, sender)
    return summary
