"""
Google Ads credentials for extension_audit

The audit always runs as the manager (MCC) account: every query, including
the per-client ones, is sent with the manager ID as login_customer_id. The
manager ID comes from GOOGLE_ADS_MANAGER_ID, or from login_customer_id in
google_ads.yaml when the variable is unset.

Usage:
    from audit.gads_config import get_gads_config, get_gads_client

    client = get_gads_client()
    manager_id = get_gads_config().manager_customer_id
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from audit.config import LOGGER_NAME, ConfigurationError, load_env_file

REQUIRED_YAML_FIELDS = ['developer_token', 'client_id', 'client_secret', 'refresh_token']


@dataclass
class GAdsConfig:
    """
    Resolved Google Ads settings.

    Attributes:
        yaml_path: Credentials file the settings were read from
        manager_customer_id: Manager (MCC) account ID, without dashes
        credentials: Contents of the credentials file
    """

    yaml_path: Path
    manager_customer_id: str
    credentials: Dict[str, Any]

    def client_settings(self) -> Dict[str, Any]:
        """Settings for GoogleAdsClient.load_from_dict, logged in as the manager."""
        settings = dict(self.credentials)
        settings['login_customer_id'] = self.manager_customer_id
        settings.setdefault('use_proto_plus', True)
        return settings


_gads_config_instance: Optional[GAdsConfig] = None


def _resolve_yaml_path() -> Path:
    raw = os.getenv("GOOGLE_ADS_YAML_PATH")
    if not raw:
        raise ConfigurationError(
            message="Missing GOOGLE_ADS_YAML_PATH environment variable.",
            fix=(
                "Point .env at your Google Ads credentials file:\n"
                "   GOOGLE_ADS_YAML_PATH=/full/path/to/secrets/google_ads.yaml"
            )
        )

    path = Path(raw)
    if not path.is_absolute():
        path = (Path(__file__).parent.parent / path).resolve()

    if not path.exists():
        raise ConfigurationError(
            message=f"Google Ads credentials file not found: {path}",
            fix=f"Create {path} with {', '.join(REQUIRED_YAML_FIELDS)}"
        )
    return path


def _read_credentials(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            message=f"Failed to parse {path.name}: {e}",
            fix="Ensure the YAML file is properly formatted"
        )

    # Placeholders such as YOUR_REFRESH_TOKEN count as missing
    missing = [
        name for name in REQUIRED_YAML_FIELDS
        if not data.get(name) or data.get(name) == f'YOUR_{name.upper()}'
    ]
    if missing:
        raise ConfigurationError(
            message=f"Google Ads credentials missing required fields: {missing}",
            fix=(
                "Fill in every OAuth field of google_ads.yaml. A refresh token can be\n"
                "generated with scripts/generate_gads_refresh_token.py"
            )
        )
    return data


def _resolve_manager_id(credentials: Dict[str, Any]) -> str:
    manager_id = os.getenv("GOOGLE_ADS_MANAGER_ID") or credentials.get('login_customer_id')
    if not manager_id:
        raise ConfigurationError(
            message="Missing GOOGLE_ADS_MANAGER_ID environment variable.",
            fix=(
                "Set the manager (MCC) account that owns the audited accounts in .env:\n"
                "   GOOGLE_ADS_MANAGER_ID=123-456-7890\n"
                "or set login_customer_id in google_ads.yaml"
            )
        )
    return str(manager_id).replace('-', '')


def get_gads_config(force_reload: bool = False) -> GAdsConfig:
    """
    Load and validate the Google Ads settings (cached).

    Raises:
        ConfigurationError: If the credentials file or manager ID is missing or invalid
    """
    global _gads_config_instance

    if _gads_config_instance is not None and not force_reload:
        return _gads_config_instance

    load_env_file()

    yaml_path = _resolve_yaml_path()
    credentials = _read_credentials(yaml_path)

    _gads_config_instance = GAdsConfig(
        yaml_path=yaml_path,
        manager_customer_id=_resolve_manager_id(credentials),
        credentials=credentials,
    )

    logging.getLogger(f"{LOGGER_NAME}.{__name__}").info(
        f"Google Ads credentials loaded from {yaml_path} "
        f"(manager {_gads_config_instance.manager_customer_id})"
    )
    return _gads_config_instance


def get_gads_client():
    """Create a GoogleAdsClient that authenticates as the manager account."""
    from google.ads.googleads.client import GoogleAdsClient

    return GoogleAdsClient.load_from_dict(get_gads_config().client_settings())
