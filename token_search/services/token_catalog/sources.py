"""
Token Catalog Data Sources

External token lists feeding the catalog:
- Token-list JSON served over HTTP (Uniswap token list schema)
- Token-list JSON stored in a local file
- Schema-less CSV exports, tagged with a configured chain

Every source produces a SourceList. Failures raise TokenSourceError inside
the source and are turned into a logged, empty result by load_source().
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from ...config import TokenSourceConfig
from ...core.chain_types import ChainId, normalize_to_chain_id
from ...errors import TokenSourceError, UnknownChainError
from .models import SourceList, Token, TokenListVersion, normalize_logo_uri

logger = logging.getLogger(__name__)

# CSV header name -> canonical column
CSV_COLUMN_ALIASES: Dict[str, str] = {
    "token_address": "address",
    "address": "address",
    "name": "name",
    "symbol": "symbol",
    "decimals": "decimals",
    "logo_uri": "logoURI",
    "logouri": "logoURI",
    "logo_url": "logoURI",
    "logo": "logoURI",
}
CSV_REQUIRED_COLUMNS = ("address", "name", "symbol", "decimals")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _normalize_header(cell: str) -> str:
    return re.sub(r"[\s\-]+", "_", cell.replace("\ufeff", "").strip().lower())


def parse_token_list_payload(
    data: Any,
    location: str,
    *,
    default_name: Optional[str] = None,
    chain: Optional[ChainId] = None,
) -> SourceList:
    """
    Parse a token-list JSON document.

    Args:
        data: Decoded JSON payload.
        location: URL or path, used in error messages.
        default_name: List name when the payload carries none.
        chain: Chain applied to records without a usable chainId.

    Raises:
        TokenSourceError: If the payload is not a token list.
    """
    if not isinstance(data, dict) or not isinstance(data.get("tokens"), list):
        raise TokenSourceError("payload is not a token list (missing 'tokens' array)", location)

    tokens: List[Token] = []
    for item in data["tokens"]:
        if not isinstance(item, dict) or not item.get("address"):
            continue
        record_chain = chain
        if item.get("chainId") is not None:
            try:
                record_chain = normalize_to_chain_id(item["chainId"])
            except UnknownChainError:
                record_chain = chain
        if record_chain is None:
            continue
        tokens.append(Token.from_api(item, record_chain))

    keywords = data.get("keywords")
    return SourceList(
        name=str(data.get("name") or default_name or location),
        timestamp=str(data.get("timestamp") or _now_iso()),
        version=TokenListVersion.from_api(data.get("version")),
        tokens=tokens,
        keywords=[str(k) for k in keywords] if isinstance(keywords, list) else [],
        logo_uri=normalize_logo_uri(data.get("logoURI")),
    )


def parse_csv_token_list(
    text: str,
    name: str,
    chain: ChainId,
    *,
    location: str = "",
    timestamp: Optional[str] = None,
) -> SourceList:
    """
    Parse a CSV token export.

    The first line is the header; cells may be double-quoted and quoted
    cells may contain commas. Rows missing a required value are skipped,
    non-numeric decimals become 18 and a "NULL" logo becomes absent.

    Raises:
        TokenSourceError: If the header lacks a required column.
    """
    rows = csv.reader(io.StringIO(text))
    header: Optional[List[str]] = None
    for row in rows:
        if any(cell.strip() for cell in row):
            header = row
            break
    if header is None:
        raise TokenSourceError("CSV file is empty", location)

    columns: Dict[str, int] = {}
    for index, cell in enumerate(header):
        canonical = CSV_COLUMN_ALIASES.get(_normalize_header(cell))
        if canonical and canonical not in columns:
            columns[canonical] = index

    missing = [col for col in CSV_REQUIRED_COLUMNS if col not in columns]
    if missing:
        raise TokenSourceError(f"CSV header missing required columns: {', '.join(missing)}", location)

    tokens: List[Token] = []
    for row in rows:
        if not any(cell.strip() for cell in row):
            continue
        record: Dict[str, str] = {}
        for column, index in columns.items():
            if index < len(row):
                record[column] = row[index].strip()
        if not all(record.get(col) for col in CSV_REQUIRED_COLUMNS):
            continue
        tokens.append(Token.from_api(record, chain))

    return SourceList(
        name=name,
        timestamp=timestamp or _now_iso(),
        version=TokenListVersion(),
        tokens=tokens,
    )


class TokenListSource(ABC):
    """Base token list source."""

    def __init__(self, config: TokenSourceConfig) -> None:
        self.config = config

    @property
    def location(self) -> str:
        return self.config.location

    @abstractmethod
    async def fetch(self) -> SourceList:
        """Fetch and parse the list; raises TokenSourceError on failure."""
        pass


class HttpTokenListSource(TokenListSource):
    """Token-list JSON served over HTTP."""

    def __init__(self, config: TokenSourceConfig, client: httpx.AsyncClient) -> None:
        super().__init__(config)
        self._client = client

    async def fetch(self) -> SourceList:
        try:
            response = await self._client.get(self.location, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TokenSourceError(f"HTTP error! Status: {status}", self.location, status) from e
        except httpx.HTTPError as e:
            raise TokenSourceError(str(e) or e.__class__.__name__, self.location) from e

        if self.config.format == "csv":
            return parse_csv_token_list(
                response.text,
                self.config.name or Path(httpx.URL(self.location).path).stem or self.location,
                self.config.chain_id,
                location=self.location,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TokenSourceError(f"invalid JSON: {e}", self.location) from e

        source_list = parse_token_list_payload(
            data, self.location, default_name=self.config.name, chain=self.config.chain_id
        )
        if self.config.name:
            source_list.name = self.config.name
        return source_list


class FileTokenListSource(TokenListSource):
    """Token list stored on the local filesystem (CSV or token-list JSON)."""

    async def fetch(self) -> SourceList:
        path = Path(self.config.path)
        try:
            text = path.read_text(encoding="utf-8")
            modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc).isoformat()
        except (OSError, UnicodeDecodeError) as e:
            raise TokenSourceError(str(e), self.location) from e

        if self.config.format == "csv":
            return parse_csv_token_list(
                text,
                self.config.name or path.stem,
                self.config.chain_id,
                location=self.location,
                timestamp=modified,
            )

        try:
            data = json.loads(text)
        except ValueError as e:
            raise TokenSourceError(f"invalid JSON: {e}", self.location) from e

        source_list = parse_token_list_payload(
            data, self.location, default_name=self.config.name or path.stem, chain=self.config.chain_id
        )
        if self.config.name:
            source_list.name = self.config.name
        return source_list


def build_source(config: TokenSourceConfig, client: httpx.AsyncClient) -> TokenListSource:
    """Create the source implementation matching a source config."""
    if config.url:
        return HttpTokenListSource(config, client)
    return FileTokenListSource(config)


async def load_source(
    source: TokenListSource,
    log: Optional[logging.Logger] = None,
) -> Optional[SourceList]:
    """
    Load one source, isolating its failure.

    Returns:
        The parsed SourceList, or None when the source could not be
        fetched or parsed. Never raises TokenSourceError.
    """
    log = log or logger
    try:
        return await source.fetch()
    except TokenSourceError as e:
        log.error(f"Error fetching token list from {source.location}: {e}")
        return None
    except Exception as e:
        log.exception(f"Error fetching token list from {source.location}: {e}")
        return None
