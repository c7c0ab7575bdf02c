import asyncio
import json
import logging
import sys
from typing import Annotated, Any, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from .api.tools import TokenSearchTools
from .config import Settings, settings
from .errors import CatalogInitializationError, UnknownChainError
from .logging_config import setup_logging
from .services.token_catalog import TokenCatalog, initialize

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "This server provides tools to search for tokens by name, symbol, or address, "
    "and to retrieve token details."
)

SearchTypeArg = Annotated[
    Optional[Literal["full-match", "partial-match"]],
    Field(description="Type of match: full-match (exact) or partial-match (contains)"),
]
ChainArg = Annotated[
    Optional[str],
    Field(description="Chain name or alias, e.g. ethereum, solana, bnb, ton (optional)"),
]
ChainIdArg = Annotated[Optional[int], Field(description="The numeric chain ID (optional)")]
LimitArg = Annotated[Optional[int], Field(description="Maximum number of tokens to return", ge=1)]


def _render(payload: Any) -> str:
    return json.dumps(payload, indent=2)


def create_server(catalog: TokenCatalog, config: Optional[Settings] = None) -> FastMCP:
    """Register the token tools for a finished catalog on a new FastMCP server."""
    config = config or settings
    tools = TokenSearchTools(
        catalog,
        default_chain=config.default_chain_id,
        search_limit=config.default_search_limit,
        general_search_limit=config.general_search_limit,
    )
    mcp = FastMCP(name=config.server_name, instructions=INSTRUCTIONS)

    @mcp.tool(name="get-token-by-address", description="Get a token by its address and optional chain")
    def get_token_by_address(
        address: Annotated[str, Field(description="The token address")],
        chain: ChainArg = None,
        chainId: ChainIdArg = None,  # noqa: N803
    ) -> str:
        try:
            resolved, token = tools.get_token_by_address(address, chain, chainId)
        except UnknownChainError as e:
            raise ToolError(str(e)) from e
        if token is None:
            raise ToolError(f"Token not found with address {address} on chain {resolved}")
        return _render(token)

    @mcp.tool(name="search-tokens", description="Search for tokens by name or symbol")
    def search_tokens(
        query: Annotated[str, Field(description="Search query for token name or symbol")],
        chain: ChainArg = None,
        chainId: ChainIdArg = None,  # noqa: N803
        searchType: SearchTypeArg = None,  # noqa: N803
        limit: LimitArg = None,
    ) -> str:
        try:
            return _render(tools.search_tokens(query, chain, chainId, searchType, limit))
        except ValueError as e:
            raise ToolError(str(e)) from e

    @mcp.tool(name="get-tokens-by-chain", description="List every token known on a chain")
    def get_tokens_by_chain(
        chain: Annotated[str, Field(description="Chain name, alias or numeric chain ID")],
    ) -> str:
        try:
            return _render(tools.get_tokens_by_chain(chain))
        except ValueError as e:
            raise ToolError(str(e)) from e

    @mcp.tool(name="general-search", description="Search for tokens by address, name or symbol")
    def general_search(
        query: Annotated[str, Field(description="Search query for token address, name or symbol")],
        chain: ChainArg = None,
        chainId: ChainIdArg = None,  # noqa: N803
        searchType: SearchTypeArg = None,  # noqa: N803
        limit: LimitArg = None,
    ) -> str:
        try:
            return _render(tools.general_search(query, chain, chainId, searchType, limit))
        except ValueError as e:
            raise ToolError(str(e)) from e

    @mcp.resource("tokens://sources", mime_type="application/json")
    def token_sources() -> str:
        """Token lists merged into the catalog and the catalog size."""
        return _render(tools.list_sources())

    return mcp


def build_catalog(config: Optional[Settings] = None) -> TokenCatalog:
    """Build the catalog; exits the process when initialization fails."""
    config = config or settings
    try:
        return asyncio.run(initialize(config.token_sources, timeout_s=config.request_timeout_seconds))
    except CatalogInitializationError as e:
        logger.error(f"Failed to initialize token list: {e.__cause__ or e}")
        sys.exit(1)


def run(config: Optional[Settings] = None, log_level: Optional[str] = None) -> None:
    """Build the catalog, then serve it over stdio.

    ``log_level`` overrides the configured level (CLI --log-level).
    """
    config = config or settings
    setup_logging(log_level or config.log_level, config.log_stream)
    catalog = build_catalog(config)
    create_server(catalog, config).run(transport="stdio")


if __name__ == "__main__":
    run()
