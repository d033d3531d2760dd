#!/usr/bin/env python3
"""
List Google Ads Client Accounts and their Labels

This script lists all enabled client accounts under the manager account and
marks the ones the audit would check (those carrying the configured label).
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from audit.checkers import select_accounts
from audit.config import get_config
from audit.gads_auditor import GAdsAuditor
from audit.gads_config import get_gads_client, get_gads_config


def main():
    print("=" * 60)
    print("Google Ads - Client Accounts and Labels")
    print("=" * 60)

    config = get_config()
    gads_config = get_gads_config()
    auditor = GAdsAuditor(get_gads_client(), gads_config.manager_customer_id)

    print(f"\nQuerying accounts under manager: {gads_config.manager_customer_id}")
    print("-" * 60)

    try:
        accounts = auditor.list_accounts()
    except Exception as e:
        print(f"Error: {e}")
        return 1

    selected = {account.customer_id for account in select_accounts(accounts, config.label_name)}

    for account in accounts:
        marker = "AUDITED" if account.customer_id in selected else "skipped"
        print(f"\n[{marker}] {account.name}")
        print(f"  Customer ID: {account.customer_id}")
        print(f"  Labels: {', '.join(account.labels) or '(none)'}")

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"Total client accounts: {len(accounts)}")
    print(f"  - Carrying label '{config.label_name}': {len(selected)}")

    if not selected:
        print(f"\nNo accounts carry the label '{config.label_name}'.")
        print("Apply the label to accounts in the manager account, or set AUDIT_LABEL_NAME.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
