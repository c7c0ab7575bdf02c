"""Tool handlers shared by the MCP server and the CLI.

Handlers take plain arguments, resolve chain selectors and return JSON
ready payloads. A lookup miss is returned as None; turning it into an
error result is up to the transport.
"""

import logging
from typing import Any, Dict, Optional

from ..core.chain_types import ChainId, DEFAULT_CHAIN_ID, normalize_to_chain_id
from ..services.token_catalog import TokenCatalog, find_tokens, general_search
from ..services.token_catalog.search import parse_search_type

_logger = logging.getLogger(__name__)


def resolve_chain(
    chain: Optional[str | int] = None,
    chain_id: Optional[int] = None,
    default: Optional[ChainId] = None,
) -> Optional[ChainId]:
    """Pick the chain from a numeric chainId or a chain name/alias.

    chainId wins when both are given; None falls back to ``default``.
    Raises UnknownChainError for unrecognised selectors.
    """
    if chain_id is not None:
        return normalize_to_chain_id(chain_id)
    if chain is None or (isinstance(chain, str) and not chain.strip()):
        return default
    return normalize_to_chain_id(chain)


class TokenSearchTools:
    """Query handlers bound to one finished catalog."""

    def __init__(
        self,
        catalog: TokenCatalog,
        *,
        default_chain: ChainId = DEFAULT_CHAIN_ID,
        search_limit: int = 100,
        general_search_limit: int = 1000,
    ) -> None:
        self.catalog = catalog
        self.default_chain = default_chain
        self.search_limit = search_limit
        self.general_search_limit = general_search_limit

    def get_token_by_address(
        self,
        address: str,
        chain: Optional[str | int] = None,
        chain_id: Optional[int] = None,
    ) -> tuple[ChainId, Optional[Dict[str, Any]]]:
        resolved = resolve_chain(chain, chain_id, self.default_chain)
        token = self.catalog.get_token_by_address(address, resolved)
        if token is None:
            _logger.debug(f"Token not found: {address} on {resolved}")
            return resolved, None
        return resolved, token.to_dict()

    def search_tokens(
        self,
        query: str,
        chain: Optional[str | int] = None,
        chain_id: Optional[int] = None,
        search_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        resolved = resolve_chain(chain, chain_id, self.default_chain)
        tokens = find_tokens(
            self.catalog,
            query,
            chain=resolved,
            search_type=parse_search_type(search_type),
            limit=limit or self.search_limit,
        )
        return {"count": len(tokens), "tokens": [t.to_dict() for t in tokens]}

    def get_tokens_by_chain(self, chain: str | int) -> Dict[str, Any]:
        resolved = normalize_to_chain_id(chain)
        tokens = self.catalog.get_tokens_by_chain(resolved)
        return {"chain": resolved, "count": len(tokens), "tokens": [t.to_dict() for t in tokens]}

    def general_search(
        self,
        query: str,
        chain: Optional[str | int] = None,
        chain_id: Optional[int] = None,
        search_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        resolved = resolve_chain(chain, chain_id)
        tokens = general_search(
            self.catalog,
            query,
            chain=resolved,
            search_type=parse_search_type(search_type),
            limit=limit or self.general_search_limit,
        )
        return {"count": len(tokens), "tokens": [t.to_dict() for t in tokens]}

    def list_sources(self) -> Dict[str, Any]:
        return {
            "tokenCount": len(self.catalog),
            "sources": [s.to_dict() for s in self.catalog.sources],
        }
