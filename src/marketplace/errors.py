"""Errors outside Protean's own exception set.

Input problems are reported with ``protean.exceptions.ValidationError`` and
missing records with ``ObjectNotFoundError``. The classes below cover
identity, permissions and storage failures.
"""


class MarketplaceError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(MarketplaceError):
    """No valid session, or credentials did not match."""


class AuthorizationError(MarketplaceError):
    """The caller is known but lacks the role or ownership required."""


class PersistenceError(MarketplaceError):
    """The store rejected or failed a write; nothing was committed."""
