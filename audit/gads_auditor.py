"""
Google Ads query layer for extension_audit

This module wraps the read-only GAQL queries the audit needs:
- Client accounts under the manager, with their label names
- Enabled, not-approved extensions (assets) of one type for one account

Every per-account query takes the customer ID explicitly; the auditor keeps
no notion of a currently selected account.

Usage:
    from audit.gads_auditor import GAdsAuditor

    auditor = GAdsAuditor(client, manager_customer_id)
    accounts = auditor.list_accounts()
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from google.ads.googleads.client import GoogleAdsClient
from google.ads.googleads.errors import GoogleAdsException

from audit.config import LOGGER_NAME
from audit.models import Account, ExtensionRecord

ENABLED = "ENABLED"
APPROVED = "APPROVED"

# Extensions can be attached at account, campaign or ad group level
LINK_RESOURCES = ("customer_asset", "campaign_asset", "ad_group_asset")

# Business Profile locations are synced into asset sets rather than linked directly
ASSET_SET_LINK_RESOURCES = LINK_RESOURCES + ("asset_set_asset",)


def enum_name(value: Any) -> str:
    """Return the name of a proto-plus enum, or the value as a string."""
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name
    return "" if value is None else str(value)


def build_extension_query(link_resource: str, asset_type: str, text_field: str) -> str:
    """Build the GAQL query for enabled, not-approved assets of one type."""
    fields = ["asset.resource_name", "asset.name", f"{link_resource}.status",
              "asset.policy_summary.approval_status"]
    if text_field not in fields:
        fields.append(text_field)

    return f"""
        SELECT
            {', '.join(fields)}
        FROM {link_resource}
        WHERE asset.type = '{asset_type}'
            AND {link_resource}.status = '{ENABLED}'
            AND asset.policy_summary.approval_status != '{APPROVED}'
    """


class GAdsAuditor:
    """
    Read-only Google Ads access for the audit.

    This class handles:
    - Listing client accounts under the manager account
    - Resolving applied label resource names to label names
    - Listing extensions of a given type for a given account
    - Checking that the credentials reach the manager account
    """

    def __init__(
        self,
        client: GoogleAdsClient,
        manager_customer_id: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the auditor.

        Args:
            client: GoogleAdsClient instance
            manager_customer_id: Manager (MCC) account ID
            logger: Optional logger instance
        """
        self.client = client
        self.manager_customer_id = manager_customer_id.replace('-', '')
        self.logger = logger or logging.getLogger(f"{LOGGER_NAME}.{__name__}")

        self.ga_service = client.get_service("GoogleAdsService")

        self.logger.info(f"Initialized Google Ads auditor for manager: {self.manager_customer_id}")

    def _execute_query(self, customer_id: str, query: str) -> List[Any]:
        """
        Execute a GAQL query and return the rows.

        The client library's iterator pages through results on its own.
        """
        try:
            return list(self.ga_service.search(customer_id=customer_id, query=query))
        except GoogleAdsException as e:
            message = e.failure.errors[0].message if e.failure.errors else str(e)
            self.logger.error(f"Google Ads API error for customer {customer_id}: {message}")
            raise

    def get_label_names(self) -> Dict[str, str]:
        """Map label resource names owned by the manager to label names."""
        query = """
            SELECT
                label.resource_name,
                label.name
            FROM label
        """
        rows = self._execute_query(self.manager_customer_id, query)
        return {row.label.resource_name: row.label.name for row in rows}

    def list_accounts(self) -> List[Account]:
        """
        List enabled client accounts under the manager, with label names.

        Returns:
            Accounts in the order the platform returned them
        """
        label_names = self.get_label_names()

        query = """
            SELECT
                customer_client.id,
                customer_client.descriptive_name,
                customer_client.applied_labels,
                customer_client.manager,
                customer_client.status
            FROM customer_client
            WHERE customer_client.manager = FALSE
                AND customer_client.status = 'ENABLED'
        """

        accounts = []
        for row in self._execute_query(self.manager_customer_id, query):
            cc = row.customer_client
            labels = tuple(
                label_names[resource_name]
                for resource_name in cc.applied_labels
                if resource_name in label_names
            )
            accounts.append(Account(
                customer_id=str(cc.id),
                name=cc.descriptive_name,
                labels=labels,
            ))

        self.logger.info(f"Found {len(accounts)} client accounts under {self.manager_customer_id}")
        return accounts

    def list_extensions(self, customer_id: str, check) -> List[ExtensionRecord]:
        """
        List enabled, not-approved extensions of one type for one account.

        Args:
            customer_id: Account to query
            check: ExtensionCheck describing the asset type and text field

        Returns:
            One record per asset; an asset linked at several levels is listed once
        """
        records: List[ExtensionRecord] = []
        seen = set()

        for link_resource in check.link_resources:
            query = build_extension_query(link_resource, check.asset_type, check.text_field)

            for row in self._execute_query(customer_id, query):
                asset = row.asset
                if asset.resource_name in seen:
                    continue
                seen.add(asset.resource_name)

                records.append(ExtensionRecord(
                    resource_name=asset.resource_name,
                    status=enum_name(getattr(row, link_resource).status),
                    approval_status=enum_name(asset.policy_summary.approval_status),
                    text=check.extract(asset),
                ))

        self.logger.debug(
            f"Customer {customer_id}: {len(records)} {check.label} extensions returned"
        )
        return records

    def check_connection(self) -> Tuple[bool, str]:
        """
        Confirm the credentials can read the manager account and that it is an MCC.

        Returns:
            Tuple of (success, message); failures carry a HOW TO FIX hint
        """
        query = """
            SELECT
                customer.id,
                customer.descriptive_name,
                customer.manager
            FROM customer
            LIMIT 1
        """

        try:
            rows = self._execute_query(self.manager_customer_id, query)
        except GoogleAdsException as e:
            return False, _connection_hint(e)

        if not rows:
            return False, f"No customer data returned for {self.manager_customer_id}"

        customer = rows[0].customer
        if not customer.manager:
            return False, (
                f"Account {customer.id} ({customer.descriptive_name}) is not a manager account.\n\n"
                "HOW TO FIX:\n"
                "Set GOOGLE_ADS_MANAGER_ID to the MCC that owns the audited accounts"
            )

        return True, (
            "Google Ads connection successful!\n"
            f"Manager: {customer.descriptive_name}\n"
            f"Customer ID: {customer.id}"
        )


def _connection_hint(error: GoogleAdsException) -> str:
    text = " ".join(e.message for e in error.failure.errors) or str(error)
    upper = text.upper()

    if "PERMISSION" in upper or "NOT FOUND" in upper:
        fix = ("1. Verify GOOGLE_ADS_MANAGER_ID is the MCC ID\n"
               "2. Ensure the OAuth user has access to that manager account")
    elif "DEVELOPER TOKEN" in upper or "DEVELOPER_TOKEN" in upper:
        fix = ("1. Verify developer_token in google_ads.yaml\n"
               "2. A test-access token only works against test accounts")
    else:
        fix = ("Regenerate refresh_token with scripts/generate_gads_refresh_token.py\n"
               "if the OAuth client or consent has changed")

    return f"Google Ads connection failed: {text}\n\nHOW TO FIX:\n{fix}"
