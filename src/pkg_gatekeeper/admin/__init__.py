"""
pkg_gatekeeper.admin

Operator command line:

- issue-token: sign a bearer token from env-configured settings.
- init-db: create the audit table.
- list-audit: print a page of audit records as JSON.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
