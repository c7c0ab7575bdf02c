"""Exceptions raised by the token search service."""

from typing import Optional


class TokenSearchError(Exception):
    """Base token search error."""
    pass


class TokenSourceError(TokenSearchError):
    """A token list source could not be fetched or parsed."""
    def __init__(self, message: str, location: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.location = location
        self.status_code = status_code


class CatalogInitializationError(TokenSearchError):
    """Building the token catalog failed outside the per-source boundary."""
    pass


class UnknownChainError(TokenSearchError, ValueError):
    """A chain selector did not resolve to a known chain."""
    pass
