"""
Command-Line Interface Utilities for extension_audit Scripts

This module provides standardized CLI argument parsing and setup:
- Common argument definitions (--label, --dry-run, etc.)
- Logging setup for scripts
- Console banners and summaries

Usage:
    from scripts.utils.cli import create_audit_parser, setup_script_logging

    parser = create_audit_parser("Disapproved Extensions Audit")
    args = parser.parse_args()

    logger = setup_script_logging("extension_audit", log_dir, args.verbose)
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


def create_audit_parser(description: str) -> argparse.ArgumentParser:
    """
    Create a standardized argument parser for audit scripts.

    Includes common arguments:
    - --label: Override the account label to audit
    - --verbose/-v: Enable verbose logging
    - --dry-run: Build the report but don't send it
    - --check-connection: Validate credentials only

    Args:
        description: Description for the argument parser

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python {script}                           # Audit labelled accounts, email findings
  python {script} --label Audit_Me          # Audit accounts with another label
  python {script} --dry-run                 # Print the report instead of sending it
  python {script} --check-connection        # Validate Google Ads credentials only
        """.format(script="scripts/run_extension_audit.py")
    )

    audit_group = parser.add_argument_group('Audit Options')

    audit_group.add_argument(
        "--label",
        type=str,
        metavar="NAME",
        help="Account label to audit (default: AUDIT_LABEL_NAME)"
    )

    exec_group = parser.add_argument_group('Execution Options')

    exec_group.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )

    exec_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the audit and print the report, don't send email"
    )

    exec_group.add_argument(
        "--check-connection",
        action="store_true",
        help="Validate Google Ads credentials and exit"
    )

    return parser


def setup_script_logging(
    name: str,
    log_dir: Optional[Path] = None,
    verbose: bool = False
) -> logging.Logger:
    """
    Set up logging for a script.

    Creates a logger with:
    - Console handler with appropriate level
    - File handler (if log_dir provided) with daily rotation

    Args:
        name: Logger name (typically script name without .py)
        log_dir: Directory for log files (optional)
        verbose: If True, use DEBUG level; otherwise INFO

    Returns:
        Configured logger instance
    """
    from logging.handlers import TimedRotatingFileHandler

    log_level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(console_handler)

    # File handler (optional)
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f"{name}_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=30,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        ))
        logger.addHandler(file_handler)

    return logger


def print_banner(title: str, timestamp: bool = True) -> None:
    """
    Print a formatted banner for script startup.

    Example:
        >>> print_banner("Disapproved Extensions Audit")
        ============================================================
        extension_audit - Disapproved Extensions Audit
        Started at: 2025-02-02 10:30:00
        ============================================================
    """
    print("=" * 60)
    print(f"extension_audit - {title}")
    if timestamp:
        print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)


def print_step(step_num: int, description: str) -> None:
    """Print a step indicator for script progress."""
    print(f"\nStep {step_num}: {description}...")


def print_completion(
    success: bool,
    accounts_audited: int = 0,
    accounts_flagged: int = 0,
    email_sent: bool = False
) -> None:
    """
    Print a completion summary.

    Args:
        success: Whether the run was successful
        accounts_audited: Labelled accounts checked
        accounts_flagged: Accounts with at least one finding
        email_sent: Whether the report email went out
    """
    print("\n" + "=" * 60)

    if success:
        print("AUDIT COMPLETED SUCCESSFULLY")
        print("=" * 60)
        print(f"Accounts audited: {accounts_audited}")
        print(f"Accounts with disapproved extensions: {accounts_flagged}")
        print(f"Report email: {'sent' if email_sent else 'not sent'}")
    else:
        print("AUDIT FAILED")
        print("=" * 60)
        print("Check the logs for error details.")

    print(f"Finished at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)
