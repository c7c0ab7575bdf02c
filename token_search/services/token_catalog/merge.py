"""
Token list merging.

Lists are folded into the catalog one at a time, in source order. The
first list to provide a non-empty field wins: later lists only fill
fields that are still empty (falsy), so merge order matters.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .catalog import TokenCatalog
from .models import SourceList, Token

FILLABLE_FIELDS = ("name", "symbol", "decimals", "logo_uri")


@dataclass
class MergeResult:
    inserted: int = 0
    updated: int = 0


def fill_missing_fields(existing: Token, incoming: Token) -> None:
    """Copy incoming values into fields the existing token has left empty.

    An existing decimals of 0 counts as empty.
    """
    for field_name in FILLABLE_FIELDS:
        if not getattr(existing, field_name) and getattr(incoming, field_name):
            setattr(existing, field_name, getattr(incoming, field_name))


def merge_token_list(catalog: TokenCatalog, source_list: SourceList) -> MergeResult:
    """Merge one source list into the catalog."""
    catalog.ensure_writable()
    list_name = source_list.name
    result = MergeResult()

    for token in source_list.tokens:
        existing = catalog.get(token.identity)
        if existing is None:
            catalog.add(replace(token, token_lists=[list_name]))
            result.inserted += 1
            continue

        fill_missing_fields(existing, token)
        if list_name not in existing.token_lists:
            existing.token_lists.append(list_name)
        result.updated += 1

    return result
