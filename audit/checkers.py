"""
Extension checkers and per-account processing.

All seven extension types go through one checker, ``check_extensions``,
driven by the ``EXTENSION_CHECKS`` table. Each entry names the asset type
to query, the GAQL field holding the display text, how to read that text
off an asset row, and the type label used in the report.

Usage:
    from audit.checkers import process_account, select_accounts

    for account in select_accounts(auditor.list_accounts(), "TB_Script"):
        result = process_account(auditor, account)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Sequence

from audit.config import LOGGER_NAME
from audit.gads_auditor import APPROVED, ASSET_SET_LINK_RESOURCES, ENABLED, LINK_RESOURCES
from audit.models import Account, AccountFindings, ExtensionRecord, Finding

logger = logging.getLogger(f"{LOGGER_NAME}.{__name__}")


@dataclass(frozen=True)
class ExtensionCheck:
    """
    Descriptor for one extension type.

    Attributes:
        label: Type tag shown in the report (e.g. 'Sitelink')
        asset_type: Google Ads AssetType name (e.g. 'SITELINK')
        text_field: GAQL field selected for the display text
        extract: Reads the display text from an asset row
        link_resources: GAQL resources linking the asset to the account, in query order
    """
    label: str
    asset_type: str
    text_field: str
    extract: Callable[[Any], str]
    link_resources: Sequence[str] = LINK_RESOURCES


def _price_headers(asset) -> str:
    return ", ".join(offering.header for offering in asset.price_asset.price_offerings)


# Order here is the order findings appear in the report
EXTENSION_CHECKS: Sequence[ExtensionCheck] = (
    ExtensionCheck("Sitelink", "SITELINK", "asset.sitelink_asset.link_text",
                   lambda asset: asset.sitelink_asset.link_text),
    ExtensionCheck("Call", "CALL", "asset.call_asset.phone_number",
                   lambda asset: asset.call_asset.phone_number),
    ExtensionCheck("Callout", "CALLOUT", "asset.callout_asset.callout_text",
                   lambda asset: asset.callout_asset.callout_text),
    ExtensionCheck("Location", "LOCATION", "asset.location_asset.place_id",
                   lambda asset: asset.location_asset.place_id, ASSET_SET_LINK_RESOURCES),
    ExtensionCheck("Price", "PRICE", "asset.price_asset.price_offerings", _price_headers),
    ExtensionCheck("Image", "IMAGE", "asset.name",
                   lambda asset: asset.name),
    ExtensionCheck("Promotion", "PROMOTION", "asset.promotion_asset.promotion_target",
                   lambda asset: asset.promotion_asset.promotion_target),
)


def is_disapproved(record: ExtensionRecord) -> bool:
    """True for an enabled extension whose approval status is anything but APPROVED."""
    return record.status == ENABLED and record.approval_status != APPROVED


def select_accounts(accounts: Iterable[Account], label_name: str) -> List[Account]:
    """Keep the accounts whose labels contain ``label_name``, preserving order."""
    return [account for account in accounts if label_name in account.labels]


def check_extensions(auditor, account: Account, check: ExtensionCheck) -> List[Finding]:
    """
    Return one Finding per enabled, not-approved extension of one type.

    An empty list is the normal outcome for a clean account.
    """
    return [
        Finding(
            extension_type=check.label,
            text=record.text,
            disapproval_reason=record.approval_status,
        )
        for record in auditor.list_extensions(account.customer_id, check)
        if is_disapproved(record)
    ]


def process_account(
    auditor,
    account: Account,
    checks: Sequence[ExtensionCheck] = EXTENSION_CHECKS
) -> AccountFindings:
    """
    Run every extension check against one account.

    Args:
        auditor: Object exposing ``list_extensions(customer_id, check)``
        account: Account to audit
        checks: Descriptor table, in report order

    Returns:
        AccountFindings with findings concatenated in ``checks`` order
    """
    result = AccountFindings(account=account)

    for check in checks:
        findings = check_extensions(auditor, account, check)
        if findings:
            logger.info(f"{account.name} ({account.customer_id}): {len(findings)} disapproved {check.label} extensions")
        result.findings.extend(findings)

    return result
