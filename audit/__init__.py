"""
Audit Package for extension_audit

This package contains:
- config.py: Central configuration loader with validation
- gads_config.py: Google Ads credentials and client factory
- gads_auditor.py: Read-only GAQL queries (accounts, labels, extensions)
- checkers.py: The extension checker table and per-account processing
- report.py: Plaintext report formatting and SMTP delivery
- pipeline.py: The end-to-end audit run
"""

from audit.config import Config, ConfigurationError, get_config

__all__ = ["Config", "ConfigurationError", "get_config"]
