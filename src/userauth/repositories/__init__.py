"""Repository interfaces for userauth.

This package defines the abstract user store that the account service
consumes. Implementations live under ``userauth.infrastructure``.
"""

from userauth.repositories.user_store import UserStore

__all__ = ["UserStore"]
