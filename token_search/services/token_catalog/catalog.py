"""
Token Catalog

The merged, deduplicated collection of tokens. Entries are kept in
insertion order with an identity index for merging; lookups used by the
query layer are plain scans in catalog order.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from ...core.chain_types import ChainId
from .models import Identity, SourceSummary, Token


class CatalogFrozenError(RuntimeError):
    """Raised when a finished catalog is mutated."""
    pass


class TokenCatalog:
    """
    Ordered token collection, unique per (lower-cased address, chain).

    Built once by the initializer, then frozen; every query method is
    read-only.
    """

    def __init__(self) -> None:
        self._tokens: List[Token] = []
        self._by_identity: Dict[Identity, Token] = {}
        self._sources: List[SourceSummary] = []
        self._frozen = False

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens)

    @property
    def sources(self) -> List[SourceSummary]:
        return list(self._sources)

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # Mutation (initialization only)
    # =========================================================================

    def ensure_writable(self) -> None:
        if self._frozen:
            raise CatalogFrozenError("token catalog is read-only after initialization")

    def get(self, identity: Identity) -> Optional[Token]:
        return self._by_identity.get(identity)

    def add(self, token: Token) -> None:
        self.ensure_writable()
        identity = token.identity
        if identity in self._by_identity:
            raise ValueError(f"token already in catalog: {identity}")
        self._tokens.append(token)
        self._by_identity[identity] = token

    def record_source(self, summary: SourceSummary) -> None:
        self.ensure_writable()
        self._sources.append(summary)

    def freeze(self) -> None:
        self._frozen = True

    # =========================================================================
    # Queries
    # =========================================================================

    def get_token_by_address(self, address: str, chain: ChainId) -> Optional[Token]:
        """Return the token with this address (any case) on this chain, if any."""
        normalized_address = address.lower()
        for token in self._tokens:
            if token.address.lower() == normalized_address and token.chain == chain:
                return token
        return None

    def get_tokens_by_chain(self, chain: ChainId) -> List[Token]:
        return [token for token in self._tokens if token.chain == chain]

    def search_tokens(self, query: str, chain: Optional[ChainId] = None) -> List[Token]:
        """Case-insensitive substring match on symbol or name."""
        normalized_query = query.lower()
        return [
            token
            for token in self._tokens
            if (chain is None or token.chain == chain)
            and (
                normalized_query in token.symbol.lower()
                or normalized_query in token.name.lower()
            )
        ]

    def search_address(self, query: str, chain: Optional[ChainId] = None) -> List[Token]:
        """Case-insensitive substring match on address."""
        normalized_query = query.lower()
        return [
            token
            for token in self._tokens
            if (chain is None or token.chain == chain)
            and normalized_query in token.address.lower()
        ]
