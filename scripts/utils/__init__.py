"""
Shared utilities for extension_audit scripts.

This package provides common functionality for the audit scripts:
- cli: Command-line argument parsing, logging and console output
"""

from scripts.utils.cli import (
    create_audit_parser,
    print_banner,
    print_completion,
    print_step,
    setup_script_logging,
)

__all__ = [
    'create_audit_parser',
    'print_banner',
    'print_completion',
    'print_step',
    'setup_script_logging',
]
