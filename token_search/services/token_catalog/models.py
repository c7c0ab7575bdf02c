"""
Token Catalog Models

Data models for merged token metadata and the source lists feeding it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ...core.chain_types import ChainId, is_named_chain

DEFAULT_DECIMALS = 18
NULL_LOGO_SENTINEL = "NULL"

Identity = Tuple[str, ChainId]


def parse_decimals(value: Any) -> int:
    """Parse a decimals value, falling back to 18 for anything non-numeric."""
    if isinstance(value, bool):
        return DEFAULT_DECIMALS
    if isinstance(value, int):
        return value if value >= 0 else DEFAULT_DECIMALS
    if isinstance(value, float):
        if value.is_integer() and value >= 0:
            return int(value)
        return DEFAULT_DECIMALS
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return DEFAULT_DECIMALS
    return parsed if parsed >= 0 else DEFAULT_DECIMALS


def normalize_logo_uri(value: Any) -> Optional[str]:
    """Map empty values and the "NULL" sentinel to an absent logo."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == NULL_LOGO_SENTINEL:
        return None
    return text


@dataclass
class Token:
    """A catalog entry, unique per (lower-cased address, chain)."""
    address: str
    chain: ChainId
    name: str = ""
    symbol: str = ""
    decimals: int = DEFAULT_DECIMALS
    logo_uri: Optional[str] = None
    token_lists: List[str] = field(default_factory=list)

    @property
    def identity(self) -> Identity:
        return (self.address.lower(), self.chain)

    @classmethod
    def from_api(cls, data: Dict[str, Any], chain: ChainId) -> "Token":
        """Parse a token record from a token-list JSON payload or CSV row."""
        return cls(
            address=str(data.get("address") or "").strip(),
            chain=chain,
            name=str(data.get("name") or ""),
            symbol=str(data.get("symbol") or ""),
            decimals=parse_decimals(data.get("decimals")),
            logo_uri=normalize_logo_uri(data.get("logoURI")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"address": self.address}
        if is_named_chain(self.chain):
            data["chain"] = self.chain
        else:
            data["chainId"] = self.chain
        data["decimals"] = self.decimals
        if self.logo_uri is not None:
            data["logoURI"] = self.logo_uri
        data["name"] = self.name
        data["symbol"] = self.symbol
        data["tokenLists"] = list(self.token_lists)
        return data


@dataclass(frozen=True)
class TokenListVersion:
    major: int = 1
    minor: int = 0
    patch: int = 0

    @classmethod
    def from_api(cls, data: Any) -> "TokenListVersion":
        if not isinstance(data, dict):
            return cls()

        def _part(key: str, default: int) -> int:
            try:
                return int(data.get(key, default))
            except (TypeError, ValueError):
                return default

        return cls(major=_part("major", 1), minor=_part("minor", 0), patch=_part("patch", 0))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass
class SourceList:
    """One unmerged token list as read from a single source."""
    name: str
    timestamp: str
    version: TokenListVersion
    tokens: List[Token] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    logo_uri: Optional[str] = None


@dataclass
class SourceSummary:
    """What a merged source contributed to the catalog."""
    name: str
    location: str
    version: str
    timestamp: str
    token_count: int
    inserted: int = 0
    updated: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "location": self.location,
            "version": self.version,
            "timestamp": self.timestamp,
            "tokenCount": self.token_count,
            "inserted": self.inserted,
            "updated": self.updated,
        }
