"""
Search composition over a finished token catalog.

Substring search narrows the candidates, the search type decides whether
an exact field match is required, and results are ranked by how many
source lists carry each token before being truncated.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional

from ...core.chain_types import ChainId
from .catalog import TokenCatalog
from .models import Identity, Token


class SearchType(str, Enum):
    FULL_MATCH = "full-match"
    PARTIAL_MATCH = "partial-match"


DEFAULT_SEARCH_TYPE = SearchType.FULL_MATCH


def parse_search_type(value: str | SearchType | None) -> SearchType:
    if value is None:
        return DEFAULT_SEARCH_TYPE
    try:
        return SearchType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in SearchType)
        raise ValueError(f"Unknown search type {value!r}; expected one of: {allowed}") from None


def is_exact_match(token: Token, query: str) -> bool:
    normalized_query = query.lower()
    return token.symbol.lower() == normalized_query or token.name.lower() == normalized_query


def refine(
    tokens: Iterable[Token],
    query: str,
    search_type: str | SearchType | None = None,
) -> List[Token]:
    """Apply the full-match filter; partial-match passes results through."""
    if parse_search_type(search_type) is SearchType.PARTIAL_MATCH:
        return list(tokens)
    return [t for t in tokens if is_exact_match(t, query)]


def rank(tokens: Iterable[Token]) -> List[Token]:
    """Order by number of source lists, descending; ties keep catalog order."""
    return sorted(tokens, key=lambda t: len(t.token_lists), reverse=True)


def truncate(tokens: List[Token], limit: Optional[int]) -> List[Token]:
    if limit is None:
        return list(tokens)
    if limit < 0:
        raise ValueError("limit must not be negative")
    return tokens[:limit]


def find_tokens(
    catalog: TokenCatalog,
    query: str,
    *,
    chain: Optional[ChainId] = None,
    search_type: str | SearchType | None = None,
    limit: Optional[int] = None,
) -> List[Token]:
    """Name/symbol search: substring prefilter, refine, rank, truncate."""
    matched = catalog.search_tokens(query, chain)
    matched = refine(matched, query, search_type)
    return truncate(rank(matched), limit)


def general_search(
    catalog: TokenCatalog,
    query: str,
    *,
    chain: Optional[ChainId] = None,
    search_type: str | SearchType | None = None,
    limit: Optional[int] = None,
) -> List[Token]:
    """Address, name and symbol search.

    Address matches come first, followed by name/symbol matches not
    already included. Full-match still compares name and symbol only.
    """
    seen: set[Identity] = set()
    matched: List[Token] = []
    for token in catalog.search_address(query, chain) + catalog.search_tokens(query, chain):
        if token.identity in seen:
            continue
        seen.add(token.identity)
        matched.append(token)

    matched = refine(matched, query, search_type)
    return truncate(rank(matched), limit)
