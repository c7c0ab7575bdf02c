"""Service layer helpers"""

from .token_catalog import TokenCatalog, initialize

__all__ = [
    "TokenCatalog",
    "initialize",
]
