#!/usr/bin/env python3
"""
Disapproved Extensions Audit for extension_audit

This script audits every client account under the manager account that
carries the configured label, looking for enabled extensions that are not
approved:
- Sitelink, Call, Callout, Location
- Price, Image, Promotion

Findings are emailed as one plaintext report. Nothing is sent when every
account is clean.

Usage:
    # Audit and email
    python scripts/run_extension_audit.py

    # Print the report instead of sending it
    python scripts/run_extension_audit.py --dry-run

    # Audit accounts with a different label
    python scripts/run_extension_audit.py --label Audit_Me

Exit codes:
    0: Audit completed (email sent or nothing to report)
    1: Configuration error
    2: Google Ads or email failure
"""

import dataclasses
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from scripts.utils.cli import (
    create_audit_parser,
    print_banner,
    print_completion,
    print_step,
    setup_script_logging,
)


def main() -> int:
    """Main audit execution."""
    args = create_audit_parser("Audit manager accounts for disapproved ad extensions").parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    print_banner("Disapproved Extensions Audit")

    # ========================================
    # Step 1: Load Configuration
    # ========================================
    print_step(1, "Loading configuration")

    from audit.config import ConfigurationError, get_config
    from audit.gads_config import get_gads_client, get_gads_config

    try:
        config = get_config()
        gads_config = get_gads_config()
    except ConfigurationError as e:
        print(f"  [X] Configuration error: {e}")
        return 1

    if args.label:
        config = dataclasses.replace(config, label_name=args.label)

    print("  [OK] Configuration loaded")
    print(f"  [i] Manager ID: {gads_config.manager_customer_id}")
    print(f"  [i] Label: {config.label_name}")

    logger = setup_script_logging("extension_audit", config.log_dir, args.verbose)

    # ========================================
    # Step 2: Initialize Client
    # ========================================
    logger.info("=" * 50)
    logger.info("Step 2: Initializing Google Ads client")
    logger.info("=" * 50)

    from audit.gads_auditor import GAdsAuditor

    try:
        client = get_gads_client()
        auditor = GAdsAuditor(client, gads_config.manager_customer_id, logger=logger)
    except Exception as e:
        logger.error(f"  [X] Failed to create Google Ads client: {e}")
        return 2

    if args.check_connection:
        success, message = auditor.check_connection()
        if success:
            logger.info(f"  [OK] {message}")
            return 0
        logger.error(f"  [X] {message}")
        return 2

    # ========================================
    # Step 3: Run Audit
    # ========================================
    logger.info("=" * 50)
    logger.info("Step 3: Auditing labelled accounts")
    logger.info("=" * 50)

    from audit.pipeline import run_audit
    from audit.report import SmtpEmailSender

    sender = None if args.dry_run else SmtpEmailSender.from_config(config)

    try:
        summary = run_audit(auditor, config, sender=sender, logger=logger)
    except Exception as e:
        logger.error(f"Audit failed: {e}")
        print_completion(False)
        return 2

    if args.dry_run:
        print("\n" + (summary.report_body or "No disapproved extensions found."))

    print_completion(
        True,
        accounts_audited=summary.accounts_audited,
        accounts_flagged=len(summary.results),
        email_sent=summary.email_sent,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
