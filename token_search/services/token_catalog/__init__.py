"""
Token Catalog Service

Merges token lists from several sources into one deduplicated catalog
keyed by (address, chain) and answers lookups and searches over it.
"""

from .service import initialize
from .catalog import CatalogFrozenError, TokenCatalog
from .merge import MergeResult, merge_token_list
from .models import SourceList, SourceSummary, Token, TokenListVersion
from .search import SearchType, find_tokens, general_search, rank, refine, truncate
from .sources import (
    FileTokenListSource,
    HttpTokenListSource,
    TokenListSource,
    build_source,
    load_source,
    parse_csv_token_list,
    parse_token_list_payload,
)

__all__ = [
    "initialize",
    "CatalogFrozenError",
    "TokenCatalog",
    "MergeResult",
    "merge_token_list",
    "SourceList",
    "SourceSummary",
    "Token",
    "TokenListVersion",
    "SearchType",
    "find_tokens",
    "general_search",
    "rank",
    "refine",
    "truncate",
    "FileTokenListSource",
    "HttpTokenListSource",
    "TokenListSource",
    "build_source",
    "load_source",
    "parse_csv_token_list",
    "parse_token_list_payload",
]
