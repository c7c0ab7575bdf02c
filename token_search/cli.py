#!/usr/bin/env python3
"""Command line entry point: serve the MCP server or query the catalog locally"""

import argparse
import asyncio
import json
import sys
from typing import Any, List, Optional

from .api.tools import TokenSearchTools
from .config import settings
from .errors import CatalogInitializationError, UnknownChainError
from .logging_config import setup_logging
from .services.token_catalog import TokenCatalog, initialize


def print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


async def load_catalog() -> TokenCatalog:
    return await initialize(settings.token_sources, timeout_s=settings.request_timeout_seconds)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="token-search", description="Token list search server")
    parser.add_argument("--log-level", help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the MCP server over stdio")

    lookup_parser = subparsers.add_parser("lookup", help="Get a token by address")
    lookup_parser.add_argument("address", help="Token address")
    lookup_parser.add_argument("--chain", help="Chain name, alias or ID (default: configured chain)")

    for name, help_text in (
        ("search", "Search tokens by name or symbol"),
        ("general", "Search tokens by address, name or symbol"),
    ):
        search_parser = subparsers.add_parser(name, help=help_text)
        search_parser.add_argument("query", help="Search query")
        search_parser.add_argument("--chain", help="Chain name, alias or ID")
        search_parser.add_argument("--partial", action="store_true", help="Substring match instead of exact")
        search_parser.add_argument("--limit", type=int, help="Maximum number of tokens to return")

    chain_parser = subparsers.add_parser("chain", help="List every token on a chain")
    chain_parser.add_argument("chain", help="Chain name, alias or ID")

    subparsers.add_parser("sources", help="Show the merged token lists")

    return parser


def run_query(args: argparse.Namespace, tools: TokenSearchTools) -> int:
    command = args.command
    search_type = "partial-match" if getattr(args, "partial", False) else "full-match"

    if command == "lookup":
        resolved, token = tools.get_token_by_address(args.address, args.chain)
        if token is None:
            print(f"❌ Token not found with address {args.address} on chain {resolved}", file=sys.stderr)
            return 1
        print_json(token)

    elif command == "search":
        print_json(tools.search_tokens(args.query, args.chain, search_type=search_type, limit=args.limit))

    elif command == "general":
        print_json(tools.general_search(args.query, args.chain, search_type=search_type, limit=args.limit))

    elif command == "chain":
        print_json(tools.get_tokens_by_chain(args.chain))

    elif command == "sources":
        print_json(tools.list_sources())

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "serve":
        from .main import run
        run(log_level=args.log_level)
        return 0

    setup_logging(args.log_level)

    if getattr(args, "limit", None) is not None and args.limit <= 0:
        parser.error("--limit must be positive")

    try:
        catalog = asyncio.run(load_catalog())
    except CatalogInitializationError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    tools = TokenSearchTools(
        catalog,
        default_chain=settings.default_chain_id,
        search_limit=settings.default_search_limit,
        general_search_limit=settings.general_search_limit,
    )
    try:
        return run_query(args, tools)
    except UnknownChainError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
