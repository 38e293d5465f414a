"""Authentication exceptions.

Expected failures (bad input, wrong password, lockout, invalid tokens) are
reported through the result types in ``userauth.result`` and never raised
across the public services. The exceptions below are reserved for contract
violations and infrastructure faults.
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class ResultContractError(AuthError, ValueError):
    """Raised when a result object is built or read against its contract.

    Examples are a success created without data, or reading the data of a
    failed result.
    """

    def __init__(self, message: str = "Result contract violated"):
        super().__init__(message)


class UserStoreError(AuthError):
    """Raised by user store adapters when the backing storage fails."""

    def __init__(self, message: str = "User store operation failed"):
        super().__init__(message)
