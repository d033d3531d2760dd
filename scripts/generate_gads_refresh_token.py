#!/usr/bin/env python3
"""
Generate Google Ads OAuth Refresh Token

This script helps you generate a refresh token for Google Ads API access.
It reads client_id and client_secret from the google_ads.yaml pointed to by
GOOGLE_ADS_YAML_PATH and opens a browser for you to authenticate.

Usage:
    python scripts/generate_gads_refresh_token.py
"""

import os
import sys
from pathlib import Path

import yaml
from google_auth_oauthlib.flow import InstalledAppFlow

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from audit.config import load_env_file

# Google Ads API scope
SCOPES = ["https://www.googleapis.com/auth/adwords"]


def main():
    """Generate refresh token using OAuth flow."""
    print("=" * 60)
    print("Google Ads OAuth Refresh Token Generator")
    print("=" * 60)
    print()

    load_env_file()
    yaml_path = os.getenv("GOOGLE_ADS_YAML_PATH")
    if not yaml_path or not Path(yaml_path).exists():
        print("  [X] Set GOOGLE_ADS_YAML_PATH to an existing google_ads.yaml first")
        return 1

    with open(yaml_path, 'r') as f:
        yaml_data = yaml.safe_load(f) or {}

    if not yaml_data.get("client_id") or not yaml_data.get("client_secret"):
        print("  [X] google_ads.yaml needs client_id and client_secret")
        return 1

    print("This will open a browser window for you to authenticate.")
    print("Sign in with the Google account that has access to the manager account.")
    print()

    client_config = {
        "installed": {
            "client_id": yaml_data["client_id"],
            "client_secret": yaml_data["client_secret"],
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost", "urn:ietf:wg:oauth:2.0:oob"],
        }
    }

    flow = InstalledAppFlow.from_client_config(client_config, scopes=SCOPES)

    # Opens a browser and waits for authentication
    credentials = flow.run_local_server(port=8080)

    print()
    print("=" * 60)
    print("SUCCESS! Here is your refresh token:")
    print("=" * 60)
    print()
    print(f"refresh_token: {credentials.refresh_token}")
    print()
    print("=" * 60)
    print("Next steps:")
    print(f"1. Update {yaml_path} with this refresh_token")
    print("2. Run: python scripts/run_extension_audit.py --check-connection")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
