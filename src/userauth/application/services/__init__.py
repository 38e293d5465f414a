"""Application services for account management."""

from userauth.application.services.account_service import AccountService

__all__ = ["AccountService"]
