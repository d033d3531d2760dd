"""Shared fakes for the audit tests.

The fake Google Ads service answers GAQL queries by the FROM resource (and,
for asset links, the asset type in the WHERE clause) without evaluating the
rest of the WHERE clause, so rows the real API would have filtered out reach
the Python-side checks.
"""

import re
import types
from pathlib import Path

import pytest

from audit.config import Config


def ns(**kwargs):
    return types.SimpleNamespace(**kwargs)


def label_row(resource_name, name):
    return ns(label=ns(resource_name=resource_name, name=name))


def client_row(customer_id, name, applied_labels=()):
    return ns(customer_client=ns(
        id=customer_id,
        descriptive_name=name,
        applied_labels=list(applied_labels),
        manager=False,
        status="ENABLED",
    ))


def asset_row(resource_name, approval_status="DISAPPROVED", status="ENABLED",
              link_resource="customer_asset", name="", **asset_fields):
    """Build an asset-link row; asset_fields are e.g. sitelink_asset=ns(link_text=...)."""
    asset = ns(
        resource_name=resource_name,
        name=name,
        policy_summary=ns(approval_status=approval_status),
        **asset_fields,
    )
    return ns(asset=asset, **{link_resource: ns(status=status)})


class FakeGoogleAdsService:
    def __init__(self, manager_id="999", labels=(), clients=(), assets=None):
        self.manager_id = manager_id
        self.labels = list(labels)
        self.clients = list(clients)
        # {(customer_id, link_resource, asset_type): [rows]}
        self.assets = assets or {}
        self.queries = []

    def search(self, customer_id, query):
        self.queries.append((customer_id, query))
        resource = re.search(r"FROM\s+(\w+)", query).group(1)

        if resource == "label":
            return iter(self.labels)
        if resource == "customer_client":
            return iter(self.clients)

        asset_type = re.search(r"asset\.type = '(\w+)'", query).group(1)
        return iter(self.assets.get((str(customer_id), resource, asset_type), []))


class FakeClient:
    def __init__(self, service):
        self._service = service

    def get_service(self, name):  # noqa: ARG002
        return self._service


class RecordingSender:
    def __init__(self):
        self.calls = []

    def send(self, recipients, subject, body):
        self.calls.append({"recipients": recipients, "subject": subject, "body": body})


@pytest.fixture
def config(tmp_path):
    return Config(
        label_name="TB_Script",
        email_recipients=["ads@example.com", "owner@example.com"],
        email_subject="Disapproved Ad Extensions Report",
        email_from="reports@example.com",
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_username="reports@example.com",
        smtp_password="secret",
        smtp_use_tls=True,
        schedule="0 7 * * *",
        log_dir=Path(tmp_path),
        log_level="INFO",
    )


@pytest.fixture
def sender():
    return RecordingSender()
