"""End-to-end audit runs against a fake Google Ads service."""

from audit.config import setup_logging
from audit.gads_auditor import GAdsAuditor
from audit.pipeline import run_audit

from conftest import FakeClient, FakeGoogleAdsService, asset_row, client_row, label_row, ns

TB = "customers/999/labels/1"


def _auditor(**service_kwargs):
    service = FakeGoogleAdsService(
        labels=[label_row(TB, "TB_Script"), label_row("customers/999/labels/2", "Other")],
        **service_kwargs,
    )
    return GAdsAuditor(FakeClient(service), "999"), service


def test_single_disapproved_sitelink_sends_one_email(config, sender):
    auditor, _ = _auditor(
        clients=[client_row(123, "A", [TB])],
        assets={
            ("123", "customer_asset", "SITELINK"): [
                asset_row("customers/123/assets/1", sitelink_asset=ns(link_text="Shop Now")),
            ],
        },
    )

    summary = run_audit(auditor, config, sender)

    assert summary.accounts_audited == 1
    assert summary.email_sent
    assert len(sender.calls) == 1
    body = sender.calls[0]["body"]
    assert "Account: A (123)" in body
    lines = body.splitlines()
    start = lines.index("Type: Sitelink")
    assert lines[start:start + 3] == ["Type: Sitelink", "Text: Shop Now", "Disapproval Reason: DISAPPROVED"]


def test_clean_labelled_accounts_send_nothing(config, sender):
    auditor, _ = _auditor(clients=[client_row(123, "A", [TB]), client_row(456, "B", [TB])])

    summary = run_audit(auditor, config, sender)

    assert summary.accounts_audited == 2
    assert summary.results == []
    assert not summary.email_sent
    assert sender.calls == []


def test_unlabelled_accounts_are_never_queried(config, sender):
    auditor, service = _auditor(
        clients=[client_row(123, "A", [TB]), client_row(456, "B", ["customers/999/labels/2"])],
        assets={
            ("456", "customer_asset", "CALL"): [
                asset_row("customers/456/assets/1", call_asset=ns(phone_number="+1 555 0100")),
            ],
        },
    )

    summary = run_audit(auditor, config, sender)

    assert summary.accounts_audited == 1
    assert sender.calls == []
    assert "456" not in {cid for cid, _ in service.queries}


def test_disabled_and_approved_extensions_are_ignored(config, sender):
    auditor, _ = _auditor(
        clients=[client_row(123, "A", [TB])],
        assets={
            ("123", "customer_asset", "CALLOUT"): [
                asset_row("customers/123/assets/1", approval_status="APPROVED",
                          callout_asset=ns(callout_text="Free Shipping")),
                asset_row("customers/123/assets/2", status="PAUSED",
                          callout_asset=ns(callout_text="24/7 Support")),
            ],
        },
    )

    summary = run_audit(auditor, config, sender)

    assert summary.results == []
    assert sender.calls == []


def test_report_orders_accounts_and_checker_types(config, sender):
    auditor, _ = _auditor(
        clients=[client_row(456, "B", [TB]), client_row(789, "Clean", [TB]), client_row(123, "A", [TB])],
        assets={
            ("456", "customer_asset", "PROMOTION"): [
                asset_row("customers/456/assets/3", promotion_asset=ns(promotion_target="Winter Sale")),
            ],
            ("456", "ad_group_asset", "SITELINK"): [
                asset_row("customers/456/assets/4", link_resource="ad_group_asset",
                          sitelink_asset=ns(link_text="Shop Now")),
            ],
            ("123", "campaign_asset", "PRICE"): [
                asset_row("customers/123/assets/5", link_resource="campaign_asset",
                          approval_status="UNDER_REVIEW",
                          price_asset=ns(price_offerings=[ns(header="Basic")])),
            ],
        },
    )

    summary = run_audit(auditor, config, sender)

    assert [r.account.name for r in summary.results] == ["B", "A"]
    assert summary.findings_count == 3

    lines = sender.calls[0]["body"].splitlines()
    headers = [line for line in lines if line.startswith("Account: ")]
    types_ = [line for line in lines if line.startswith("Type: ")]
    assert headers == ["Account: B (456)", "Account: A (123)"]
    assert types_ == ["Type: Sitelink", "Type: Promotion", "Type: Price"]
    assert "Disapproval Reason: UNDER_REVIEW" in lines


def test_dry_run_formats_without_sending(config):
    auditor, _ = _auditor(
        clients=[client_row(123, "A", [TB])],
        assets={
            ("123", "customer_asset", "IMAGE"): [
                asset_row("customers/123/assets/1", name="hero.png"),
            ],
        },
    )

    summary = run_audit(auditor, config, sender=None)

    assert not summary.email_sent
    assert "Type: Image\nText: hero.png\nDisapproval Reason: DISAPPROVED" in summary.report_body


def test_inclusion_is_stable_across_runs(config):
    auditor, _ = _auditor(
        clients=[client_row(123, "A", [TB]), client_row(456, "B", [TB])],
        assets={
            ("456", "customer_asset", "CALL"): [
                asset_row("customers/456/assets/1", call_asset=ns(phone_number="+1 555 0100")),
            ],
        },
    )

    first = run_audit(auditor, config)
    second = run_audit(auditor, config)

    assert [r.account for r in first.results] == [r.account for r in second.results]
    assert first.report_body == second.report_body


def test_location_synced_through_asset_set_is_reported(config, sender):
    auditor, service = _auditor(
        clients=[client_row(123, "A", [TB])],
        assets={
            ("123", "asset_set_asset", "LOCATION"): [
                asset_row("customers/123/assets/7", link_resource="asset_set_asset",
                          location_asset=ns(place_id="ChIJ-store-1")),
            ],
        },
    )

    summary = run_audit(auditor, config, sender)

    assert [f.text for f in summary.results[0].findings] == ["ChIJ-store-1"]
    asset_set_queries = [q for _, q in service.queries if "FROM asset_set_asset" in q]
    assert len(asset_set_queries) == 1
    assert "asset.type = 'LOCATION'" in asset_set_queries[0]


def test_run_writes_checker_and_email_lines_to_log_file(config, sender):
    auditor, _ = _auditor(
        clients=[client_row(123, "A", [TB])],
        assets={
            ("123", "customer_asset", "CALLOUT"): [
                asset_row("customers/123/assets/1", callout_asset=ns(callout_text="Free Delivery")),
            ],
        },
    )

    app_logger = setup_logging(config)
    try:
        run_audit(auditor, config, sender)
    finally:
        for handler in list(app_logger.handlers):
            handler.close()
            app_logger.removeHandler(handler)

    log_text = (config.log_dir / "extension_audit.log").read_text(encoding="utf-8")
    assert "1 disapproved Callout extensions" in log_text
    assert "Report email sent to 2 recipient(s)" in log_text
