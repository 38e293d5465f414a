"""Abstract user store interface.

This interface defines the contract for credential persistence and the
lockout counters. Implementations can use SQLAlchemy, an in-memory dict, or
any other storage, as long as email and username are unique once
normalized and counter updates on one account do not lose writes.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from userauth.domain.user import UserAccount
from userauth.result import Outcome


class UserStore(ABC):
    """
    Abstract store for user accounts.

    Implementations own password hashing and the failed-access counter.
    Lookups by email and username are case-insensitive. Implementations
    take the lockout thresholds as a required argument; pass the same
    ``IdentityPolicy.lockout`` the ``AccountService`` is built with.
    """

    @abstractmethod
    async def create(self, user: UserAccount, password: str) -> Outcome:
        """
        Hash the password and persist a new account.

        Parameters
        ----------
        user
            The account to create
        password
            The plaintext password

        Returns
        -------
        Success, or failure with "User already exists!" when the email or
        username is taken
        """

    @abstractmethod
    async def check_password(self, user: UserAccount, password: str) -> bool:
        """Verify a plaintext password against the stored hash."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID | str) -> UserAccount | None:
        """Find an account by its identifier."""

    @abstractmethod
    async def find_by_email(self, email: str) -> UserAccount | None:
        """Find an account by email, ignoring case."""

    @abstractmethod
    async def find_by_name(self, username: str) -> UserAccount | None:
        """Find an account by username, ignoring case."""

    @abstractmethod
    async def is_locked_out(self, user: UserAccount) -> bool:
        """
        Check if an account is currently locked out.

        Parameters
        ----------
        user
            The account to check

        Returns
        -------
        True while the stored lockout end lies in the future
        """

    @abstractmethod
    async def access_failed(self, user: UserAccount) -> Outcome:
        """
        Record a failed password check.

        Increments the failed access count and sets the lockout end when the
        count reaches the configured threshold.
        """

    @abstractmethod
    async def reset_access_failed_count(self, user: UserAccount) -> Outcome:
        """Clear the failed access count and any lockout end."""

    @abstractmethod
    async def get_access_failed_count(self, user: UserAccount) -> int:
        """Return the current failed access count."""
