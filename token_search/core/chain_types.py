"""
Chain identification types and utilities.

Token lists key their entries by one of two kinds of chain identifier:
- EVM chains (integer chain IDs: 1, 137, 8453, etc.)
- Named chains served from schema-less CSV lists ("solana", "bnb", "ton")

Both kinds share the ChainId type so that a single catalog can hold them
side by side.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Union

from ..errors import UnknownChainError

ChainName = Literal["solana", "bnb", "ton"]
ChainId = Union[int, ChainName]

SOLANA_CHAIN_ID: ChainName = "solana"
BNB_CHAIN_ID: ChainName = "bnb"
TON_CHAIN_ID: ChainName = "ton"

NAMED_CHAINS = (SOLANA_CHAIN_ID, BNB_CHAIN_ID, TON_CHAIN_ID)

# Default chain when none specified
DEFAULT_CHAIN_ID: int = 1  # Ethereum mainnet

CHAIN_METADATA: Dict[ChainId, Dict[str, Any]] = {
    1: {
        'name': 'Ethereum',
        'aliases': ['ethereum', 'eth', 'mainnet', 'ethereum mainnet'],
    },
    10: {
        'name': 'Optimism',
        'aliases': ['optimism', 'op'],
    },
    56: {
        'name': 'BNB Smart Chain',
        'aliases': ['bnb smart chain', 'bsc mainnet'],
    },
    137: {
        'name': 'Polygon',
        'aliases': ['polygon', 'matic'],
    },
    8453: {
        'name': 'Base',
        'aliases': ['base'],
    },
    42161: {
        'name': 'Arbitrum',
        'aliases': ['arbitrum', 'arb'],
    },
    # Named chains (CSV token lists)
    "solana": {
        'name': 'Solana',
        'aliases': ['solana', 'sol'],
    },
    "bnb": {
        'name': 'BNB',
        'aliases': ['bnb', 'bsc', 'binance'],
    },
    "ton": {
        'name': 'TON',
        'aliases': ['ton', 'toncoin', 'the open network'],
    },
}

CHAIN_ALIAS_TO_ID: Dict[str, ChainId] = {
    alias: chain_id
    for chain_id, details in CHAIN_METADATA.items()
    for alias in details.get('aliases', [])
}


def is_named_chain(chain_id: ChainId) -> bool:
    """Check if the chain ID is one of the named (non-numeric) chains."""
    return isinstance(chain_id, str) and chain_id in NAMED_CHAINS


def is_evm_chain_id(chain_id: ChainId) -> bool:
    """Check if the chain ID represents an EVM-compatible chain."""
    return isinstance(chain_id, int) and not isinstance(chain_id, bool)


def normalize_to_chain_id(chain: str | int | float | None, default: ChainId = DEFAULT_CHAIN_ID) -> ChainId:
    """
    Convert user input to a canonical ChainId.

    Args:
        chain: Chain identifier as string (e.g., "ethereum", "sol", "137")
               or integer (e.g., 1, 137) or None.
        default: Returned when ``chain`` is None or blank.

    Returns:
        Canonical ChainId (int for EVM, a chain name for named chains).

    Raises:
        UnknownChainError: If the chain identifier is not recognized.

    Examples:
        >>> normalize_to_chain_id("ethereum")
        1
        >>> normalize_to_chain_id("SOL")
        'solana'
        >>> normalize_to_chain_id("137")
        137
        >>> normalize_to_chain_id(None)
        1
    """
    if chain is None:
        return default

    if isinstance(chain, bool):
        raise UnknownChainError(f"Unknown chain identifier: {chain!r}")

    if isinstance(chain, int):
        if chain <= 0:
            raise UnknownChainError(f"Unknown chain identifier: {chain!r}")
        return chain

    # JSON numbers may decode as floats (1.0)
    if isinstance(chain, float):
        if not chain.is_integer():
            raise UnknownChainError(f"Unknown chain identifier: {chain!r}")
        return normalize_to_chain_id(int(chain))

    if not isinstance(chain, str):
        raise UnknownChainError(f"Unknown chain identifier: {chain!r}")

    chain_lower = chain.lower().strip()
    if not chain_lower:
        return default

    if chain_lower in CHAIN_ALIAS_TO_ID:
        return CHAIN_ALIAS_TO_ID[chain_lower]

    try:
        chain_int = int(chain_lower)
    except ValueError:
        raise UnknownChainError(f"Unknown chain identifier: {chain!r}") from None
    return normalize_to_chain_id(chain_int)


def chain_id_to_name(chain_id: ChainId) -> str:
    """Get the human-readable name for a chain ID."""
    metadata = CHAIN_METADATA.get(chain_id)
    if metadata:
        return metadata.get("name", f"Chain {chain_id}")
    return f"Chain {chain_id}"


__all__ = [
    "ChainId",
    "ChainName",
    "SOLANA_CHAIN_ID",
    "BNB_CHAIN_ID",
    "TON_CHAIN_ID",
    "NAMED_CHAINS",
    "DEFAULT_CHAIN_ID",
    "CHAIN_METADATA",
    "is_named_chain",
    "is_evm_chain_id",
    "normalize_to_chain_id",
    "chain_id_to_name",
]
