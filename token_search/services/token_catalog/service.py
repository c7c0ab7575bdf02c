"""
Token Catalog Service

Builds the token catalog from the configured sources.

Sources are processed as a strict pipeline: fetch, parse and merge one
source completely before the next fetch starts. Merging keeps the first
non-empty value per field, so running fetches concurrently would make the
result depend on network timing.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import httpx

from ...config import TokenSourceConfig, settings
from ...errors import CatalogInitializationError
from .catalog import TokenCatalog
from .merge import merge_token_list
from .models import SourceSummary
from .sources import build_source, load_source

logger = logging.getLogger(__name__)


async def initialize(
    sources: Optional[Sequence[TokenSourceConfig]] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    log: Optional[logging.Logger] = None,
    timeout_s: Optional[float] = None,
) -> TokenCatalog:
    """
    Build a frozen token catalog.

    Args:
        sources: Sources in merge order (default: settings.token_sources).
        client: HTTP client for URL sources; created (and closed) here when
            not provided.
        log: Logger receiving progress and source errors.
        timeout_s: Fetch timeout for an internally created client.

    Returns:
        The finished, read-only TokenCatalog.

    Raises:
        CatalogInitializationError: If anything fails outside the
            per-source error boundary.
    """
    log = log or logger
    sources = list(settings.token_sources if sources is None else sources)
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout_s or settings.request_timeout_seconds)

    try:
        log.info("Initializing token list...")
        catalog = TokenCatalog()

        for config in sources:
            source = build_source(config, client)
            log.info(f"Fetching token list from: {source.location}")
            source_list = await load_source(source, log)
            if source_list is None:
                continue

            log.info(f"Merging token list: {source_list.name}")
            result = merge_token_list(catalog, source_list)
            catalog.record_source(
                SourceSummary(
                    name=source_list.name,
                    location=source.location,
                    version=str(source_list.version),
                    timestamp=source_list.timestamp,
                    token_count=len(source_list.tokens),
                    inserted=result.inserted,
                    updated=result.updated,
                )
            )
            log.debug(
                f"Merged {source_list.name}: {result.inserted} new, {result.updated} existing"
            )

        catalog.freeze()
        log.info(f"Token list initialized with {len(catalog)} tokens")
        return catalog
    except Exception as e:
        raise CatalogInitializationError(f"Failed to initialize token list: {e}") from e
    finally:
        if owns_client:
            await client.aclose()
