"""Cloud Director credential resolution."""

from fleet_reconcile.domains.credentials.resolver import UserCredentials, resolve_user_credentials

__all__ = ["UserCredentials", "resolve_user_credentials"]
