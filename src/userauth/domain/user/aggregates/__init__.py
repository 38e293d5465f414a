"""Aggregates for the user domain."""

from userauth.domain.user.aggregates.user_account import UserAccount

__all__ = ["UserAccount"]
