"""Unit tests for the extension checker table and account processing."""

import pytest

from audit.checkers import (
    EXTENSION_CHECKS,
    check_extensions,
    is_disapproved,
    process_account,
    select_accounts,
)
from audit.models import Account, ExtensionRecord, Finding

from conftest import ns


class _StubAuditor:
    """Returns canned records per (customer_id, check label)."""

    def __init__(self, records):
        self.records = records
        self.calls = []

    def list_extensions(self, customer_id, check):
        self.calls.append((customer_id, check.label))
        return self.records.get((customer_id, check.label), [])


def _record(text, approval_status="DISAPPROVED", status="ENABLED"):
    return ExtensionRecord(
        resource_name=f"customers/1/assets/{text}",
        status=status,
        approval_status=approval_status,
        text=text,
    )


ACCOUNT = Account(customer_id="123", name="A", labels=("TB_Script",))


def test_checker_table_order_and_labels():
    assert [c.label for c in EXTENSION_CHECKS] == [
        "Sitelink", "Call", "Callout", "Location", "Price", "Image", "Promotion",
    ]
    assert [c.asset_type for c in EXTENSION_CHECKS] == [
        "SITELINK", "CALL", "CALLOUT", "LOCATION", "PRICE", "IMAGE", "PROMOTION",
    ]


@pytest.mark.parametrize("label, asset, expected", [
    ("Sitelink", ns(sitelink_asset=ns(link_text="Shop Now")), "Shop Now"),
    ("Call", ns(call_asset=ns(phone_number="+1 555 0100")), "+1 555 0100"),
    ("Callout", ns(callout_asset=ns(callout_text="Free Shipping")), "Free Shipping"),
    ("Location", ns(location_asset=ns(place_id="ChIJ123")), "ChIJ123"),
    ("Price", ns(price_asset=ns(price_offerings=[ns(header="Basic"), ns(header="Pro")])), "Basic, Pro"),
    ("Image", ns(name="hero-banner.png"), "hero-banner.png"),
    ("Promotion", ns(promotion_asset=ns(promotion_target="Winter Sale")), "Winter Sale"),
])
def test_text_extractors(label, asset, expected):
    check = next(c for c in EXTENSION_CHECKS if c.label == label)
    assert check.extract(asset) == expected


def test_is_disapproved():
    assert is_disapproved(_record("x", "DISAPPROVED"))
    assert is_disapproved(_record("x", "AREA_OF_INTEREST_ONLY"))
    assert is_disapproved(_record("x", "UNKNOWN"))
    assert not is_disapproved(_record("x", "APPROVED"))
    assert not is_disapproved(_record("x", "DISAPPROVED", status="PAUSED"))
    assert not is_disapproved(_record("x", "DISAPPROVED", status="REMOVED"))


def test_select_accounts_keeps_only_labelled_in_order():
    accounts = [
        Account("1", "One", ("TB_Script",)),
        Account("2", "Two", ("Other",)),
        Account("3", "Three", ()),
        Account("4", "Four", ("Other", "TB_Script")),
    ]
    selected = select_accounts(accounts, "TB_Script")
    assert [a.customer_id for a in selected] == ["1", "4"]
    assert select_accounts(accounts, "Missing") == []


def test_check_extensions_filters_and_keeps_reason_verbatim():
    sitelink = EXTENSION_CHECKS[0]
    auditor = _StubAuditor({
        ("123", "Sitelink"): [
            _record("Shop Now", "DISAPPROVED"),
            _record("About Us", "APPROVED"),
            _record("Paused Link", "DISAPPROVED", status="PAUSED"),
            _record("Pending", "APPROVED_LIMITED"),
        ],
    })

    findings = check_extensions(auditor, ACCOUNT, sitelink)

    assert findings == [
        Finding("Sitelink", "Shop Now", "DISAPPROVED"),
        Finding("Sitelink", "Pending", "APPROVED_LIMITED"),
    ]
    assert auditor.calls == [("123", "Sitelink")]


def test_check_extensions_empty_is_silent():
    assert check_extensions(_StubAuditor({}), ACCOUNT, EXTENSION_CHECKS[1]) == []


def test_process_account_concatenates_in_checker_order():
    auditor = _StubAuditor({
        ("123", "Promotion"): [_record("Winter Sale")],
        ("123", "Sitelink"): [_record("Shop Now")],
        ("123", "Call"): [_record("+1 555 0100", "UNDER_REVIEW")],
    })

    result = process_account(auditor, ACCOUNT)

    assert result.account is ACCOUNT
    assert result.has_disapproved_extensions
    assert [f.extension_type for f in result.findings] == ["Sitelink", "Call", "Promotion"]
    assert [label for _, label in auditor.calls] == [c.label for c in EXTENSION_CHECKS]


def test_process_account_without_findings():
    result = process_account(_StubAuditor({}), ACCOUNT)
    assert result.findings == []
    assert not result.has_disapproved_extensions
