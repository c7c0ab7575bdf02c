from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.chain_types import ChainId, normalize_to_chain_id


BASE_DIR = Path(__file__).resolve().parents[1]

DEFAULT_TOKEN_LIST_URLS = [
    "http://defi.cmc.eth",
    "http://erc20.cmc.eth",
    "http://stablecoin.cmc.eth",
    "https://ipfs.io/ipns/tokens.uniswap.org",
    "https://www.gemini.com/uniswap/manifest.json",
]


class TokenSourceConfig(BaseModel):
    """A single token list source: a token-list JSON URL or a local CSV file."""

    url: Optional[str] = Field(default=None, description="Token list JSON endpoint")
    path: Optional[Path] = Field(default=None, description="Local token list file")
    chain: Optional[str] = Field(
        default=None,
        description="Chain assigned to every row of a CSV list (e.g. solana, bnb, ton)",
    )
    name: Optional[str] = Field(default=None, description="List name override")
    format: Optional[Literal["tokenlist", "csv"]] = Field(
        default=None,
        description="Source format; inferred from the file suffix when omitted",
    )

    @model_validator(mode="after")
    def _check_location(self) -> "TokenSourceConfig":
        if bool(self.url) == bool(self.path):
            raise ValueError("exactly one of 'url' or 'path' must be set")
        if self.format is None:
            suffix = Path(self.url or str(self.path)).suffix.lower()
            self.format = "csv" if suffix == ".csv" else "tokenlist"
        if self.format == "csv" and not self.chain:
            raise ValueError("csv sources require a 'chain'")
        if self.chain:
            normalize_to_chain_id(self.chain)
        return self

    @property
    def location(self) -> str:
        return self.url or str(self.path)

    @property
    def chain_id(self) -> Optional[ChainId]:
        return normalize_to_chain_id(self.chain) if self.chain else None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    server_name: str = Field(default="TokenSearch", description="MCP server name")
    log_level: str = Field(default="INFO", description="Logging level")
    log_stream: Literal["stderr", "stdout"] = Field(
        default="stderr",
        description="Log output stream (stdout carries the stdio MCP protocol)",
    )
    log_format: Literal["json", "console", "auto"] = Field(
        default="auto",
        description="Log renderer; auto uses console output at DEBUG and JSON otherwise",
    )

    # Source Settings
    request_timeout_seconds: int = Field(default=30, ge=1, description="Token list fetch timeout")
    token_sources: List[TokenSourceConfig] = Field(
        default_factory=lambda: [TokenSourceConfig(url=url) for url in DEFAULT_TOKEN_LIST_URLS],
        description="Token list sources, merged in declaration order",
    )

    # Query Defaults
    default_chain: str = Field(default="1", description="Chain used when a tool call names none")
    default_search_limit: int = Field(default=100, ge=1, description="Default result limit for search-tokens")
    general_search_limit: int = Field(default=1000, ge=1, description="Default result limit for general-search")

    @property
    def default_chain_id(self) -> ChainId:
        return normalize_to_chain_id(self.default_chain)


# Global settings instance
settings = Settings()
