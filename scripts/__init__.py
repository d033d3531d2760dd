"""
Scripts Package for extension_audit

Contains runnable scripts for:
- run_extension_audit.py: Run the disapproved extensions audit
- list_labelled_accounts.py: Show client accounts and their labels
- generate_gads_refresh_token.py: Create an OAuth refresh token
"""
