"""
Tests for the MCP tool surface and the shared tool handlers.
"""

import json

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from mcp.shared.memory import create_connected_server_and_client_session

from token_search.api.tools import TokenSearchTools, resolve_chain
from token_search.config import Settings
from token_search.errors import UnknownChainError
from token_search.main import create_server
from token_search.services.token_catalog import (
    SourceList,
    Token,
    TokenCatalog,
    TokenListVersion,
    merge_token_list,
)


def make_list(name, *tokens):
    return SourceList(name=name, timestamp="", version=TokenListVersion(), tokens=list(tokens))


@pytest.fixture
def catalog():
    catalog = TokenCatalog()
    merge_token_list(catalog, make_list(
        "Uniswap Labs Default",
        Token(address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", chain=1, name="USD Coin", symbol="USDC",
              decimals=6, logo_uri="https://example.com/usdc.png"),
        Token(address="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174", chain=137, name="USD Coin", symbol="USDC", decimals=6),
        Token(address="0x6B175474E89094C44Da98b954EedeAC495271d0F", chain=1, name="Dai Stablecoin", symbol="DAI"),
    ))
    merge_token_list(catalog, make_list(
        "solana_tokens",
        Token(address="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", chain="solana", name="USD Coin", symbol="USDC", decimals=6),
    ))
    merge_token_list(catalog, make_list(
        "Gemini Token List",
        Token(address="0x6b175474e89094c44da98b954eedeac495271d0f", chain=1, name="Dai", symbol="DAI"),
    ))
    catalog.freeze()
    return catalog


@pytest.fixture
def tools(catalog):
    return TokenSearchTools(catalog, default_chain=1, search_limit=100, general_search_limit=1000)


@pytest.fixture
def server(catalog, monkeypatch):
    monkeypatch.delenv("TOKEN_SOURCES", raising=False)
    monkeypatch.delenv("DEFAULT_CHAIN", raising=False)
    return create_server(catalog, Settings())


def _payload(result):
    """Decode the JSON text of a FastMCP call_tool result."""
    if isinstance(result, tuple):
        result = result[0]
    return json.loads(result[0].text)


# =============================================================================
# Handler Tests
# =============================================================================

class TestResolveChain:
    def test_chain_id_wins(self):
        assert resolve_chain("solana", 137) == 137

    def test_chain_name(self):
        assert resolve_chain("sol") == "solana"

    def test_default_when_missing(self):
        assert resolve_chain(None, None, default=1) == 1
        assert resolve_chain("  ", None, default=1) == 1
        assert resolve_chain() is None

    def test_unknown_chain(self):
        with pytest.raises(UnknownChainError):
            resolve_chain("atlantis")


class TestTokenSearchTools:
    def test_lookup_defaults_to_primary_chain(self, tools):
        chain, token = tools.get_token_by_address("0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48")

        assert chain == 1
        assert token == {
            "address": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
            "chainId": 1,
            "decimals": 6,
            "logoURI": "https://example.com/usdc.png",
            "name": "USD Coin",
            "symbol": "USDC",
            "tokenLists": ["Uniswap Labs Default"],
        }

    def test_lookup_miss(self, tools):
        chain, token = tools.get_token_by_address("0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", chain_id=10)

        assert chain == 10
        assert token is None

    def test_named_chain_serialised_as_chain(self, tools):
        _, token = tools.get_token_by_address("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", chain="solana")

        assert token["chain"] == "solana"
        assert "chainId" not in token

    def test_search_filters_by_default_chain(self, tools):
        result = tools.search_tokens("usdc")

        assert result["count"] == 1
        assert result["tokens"][0]["chainId"] == 1

    def test_search_ranks_by_token_lists(self, tools):
        result = tools.search_tokens("d", search_type="partial-match")

        assert [t["symbol"] for t in result["tokens"]] == ["DAI", "USDC"]
        assert result["tokens"][0]["tokenLists"] == ["Uniswap Labs Default", "Gemini Token List"]

    def test_search_limit(self, tools):
        result = tools.search_tokens("d", search_type="partial-match", limit=1)

        assert result["count"] == 1

    def test_search_rejects_unknown_search_type(self, tools):
        with pytest.raises(ValueError):
            tools.search_tokens("usdc", search_type="fuzzy")

    def test_tokens_by_chain(self, tools):
        result = tools.get_tokens_by_chain("solana")

        assert result["chain"] == "solana"
        assert result["count"] == 1

    def test_general_search_spans_chains_by_default(self, tools):
        result = tools.general_search("USDC")

        assert result["count"] == 3

    def test_general_search_by_partial_address(self, tools):
        result = tools.general_search("0x6b1754", search_type="partial-match")

        assert [t["symbol"] for t in result["tokens"]] == ["DAI"]

    def test_list_sources(self, tools):
        assert tools.list_sources() == {"tokenCount": 4, "sources": []}


# =============================================================================
# MCP Server Tests
# =============================================================================

class TestMcpServer:
    @pytest.mark.asyncio
    async def test_registers_tools(self, server):
        names = {tool.name for tool in await server.list_tools()}

        assert names == {"get-token-by-address", "search-tokens", "get-tokens-by-chain", "general-search"}

    @pytest.mark.asyncio
    async def test_get_token_by_address(self, server):
        result = await server.call_tool(
            "get-token-by-address",
            {"address": "0x2791BCA1F2DE4661ED88A30C99A7A9449AA84174", "chainId": 137},
        )

        assert _payload(result)["symbol"] == "USDC"

    @pytest.mark.asyncio
    async def test_get_token_by_address_not_found_is_tool_error(self, server):
        with pytest.raises(ToolError, match="Token not found with address 0xdead on chain 1"):
            await server.call_tool("get-token-by-address", {"address": "0xdead"})

    @pytest.mark.asyncio
    async def test_unknown_chain_is_tool_error(self, server):
        with pytest.raises(ToolError, match="Unknown chain"):
            await server.call_tool("get-tokens-by-chain", {"chain": "atlantis"})

    @pytest.mark.asyncio
    async def test_search_tokens_partial_match(self, server):
        result = await server.call_tool(
            "search-tokens",
            {"query": "usd", "searchType": "partial-match"},
        )

        payload = _payload(result)
        assert payload["count"] == 1
        assert payload["tokens"][0]["name"] == "USD Coin"

    @pytest.mark.asyncio
    async def test_search_tokens_full_match_excludes_substring(self, server):
        result = await server.call_tool("search-tokens", {"query": "usd"})

        assert _payload(result) == {"count": 0, "tokens": []}

    @pytest.mark.asyncio
    async def test_get_tokens_by_chain(self, server):
        result = await server.call_tool("get-tokens-by-chain", {"chain": "ethereum"})

        payload = _payload(result)
        assert payload["chain"] == 1
        assert payload["count"] == 2

    @pytest.mark.asyncio
    async def test_general_search(self, server):
        result = await server.call_tool(
            "general-search",
            {"query": "usd coin", "chain": "polygon", "limit": 5},
        )

        payload = _payload(result)
        assert payload["count"] == 1
        assert payload["tokens"][0]["chainId"] == 137

    @pytest.mark.asyncio
    async def test_sources_resource(self, server):
        contents = list(await server.read_resource("tokens://sources"))

        assert json.loads(contents[0].content)["tokenCount"] == 4


class TestMcpProtocol:
    """Tool results as a connected client sees them."""

    @pytest.mark.asyncio
    async def test_not_found_is_an_error_result(self, server):
        async with create_connected_server_and_client_session(server._mcp_server) as client:
            result = await client.call_tool("get-token-by-address", {"address": "0xdead"})

        assert result.isError is True
        assert "Token not found with address 0xdead on chain 1" in result.content[0].text

    @pytest.mark.asyncio
    async def test_unknown_chain_is_an_error_result(self, server):
        async with create_connected_server_and_client_session(server._mcp_server) as client:
            result = await client.call_tool("get-tokens-by-chain", {"chain": "atlantis"})

        assert result.isError is True

    @pytest.mark.asyncio
    async def test_found_token_is_a_normal_result(self, server):
        async with create_connected_server_and_client_session(server._mcp_server) as client:
            result = await client.call_tool("get-token-by-address", {"address": "0x6b175474e89094c44da98b954eedeac495271d0f"})

        assert not result.isError
        assert json.loads(result.content[0].text)["tokenLists"] == ["Uniswap Labs Default", "Gemini Token List"]
