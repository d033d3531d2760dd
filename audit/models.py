"""
Data model for the disapproved extensions audit.

Everything here is transient: records are built during one run, folded
into the report body and then discarded.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Account:
    """
    A client account under the manager hierarchy.

    Attributes:
        customer_id: Google Ads customer ID (no dashes)
        name: Descriptive account name
        labels: Names of the labels applied to the account
    """
    customer_id: str
    name: str
    labels: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtensionRecord:
    """One extension row as returned by the platform, as plain strings."""
    resource_name: str
    status: str
    approval_status: str
    text: str


@dataclass(frozen=True)
class Finding:
    """
    One disapproved extension.

    Attributes:
        extension_type: Sitelink, Call, Callout, Location, Price, Image or Promotion
        text: Type-specific display text (link text, phone number, ...)
        disapproval_reason: The extension's approval status, verbatim
    """
    extension_type: str
    text: str
    disapproval_reason: str


@dataclass
class AccountFindings:
    """Findings collected for one account, in checker order."""
    account: Account
    findings: List[Finding] = field(default_factory=list)

    @property
    def has_disapproved_extensions(self) -> bool:
        return bool(self.findings)
