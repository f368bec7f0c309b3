"""Pure search, filter, sort and pagination primitives over row sequences.

Rows are either mappings or plain objects. None of these functions mutate
the input sequence or raise on malformed rows: a missing field reads as
``None``.
"""

from __future__ import annotations

import math
import unicodedata
from collections.abc import Mapping
from typing import Any, Iterable, Sequence

from app.comunidad.datatable.types import FilterField, SortState, as_text, is_bypass


def field_value(row: Any, key: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def matches_search(row: Any, search: str, search_fields: Iterable[str]) -> bool:
    term = (search or "").lower()
    if not term:
        return True
    for key in search_fields:
        value = field_value(row, key)
        if value and term in as_text(value).lower():
            return True
    return False


def matches_filters(row: Any, filters: Mapping[str, Any], filter_fields: Iterable[FilterField]) -> bool:
    for filter_field in filter_fields:
        value = filters.get(filter_field.key)
        if is_bypass(value):
            continue
        if not filter_field.matches(field_value(row, filter_field.key), value):
            return False
    return True


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def collation_key(value: Any) -> tuple:
    # base letters, then accents, then lowercase before uppercase, then raw text
    text = as_text(value)
    folded = text.casefold()
    return (
        _strip_accents(folded),
        unicodedata.normalize("NFKD", folded),
        tuple(char.isupper() for char in text),
        text,
    )


def sort_rows(rows: Sequence[Any], sort: SortState) -> list[Any]:
    if not sort.column:
        return list(rows)
    present = []
    missing = []
    for row in rows:
        (missing if field_value(row, sort.column) is None else present).append(row)
    present.sort(
        key=lambda row: collation_key(field_value(row, sort.column)),
        reverse=sort.direction == "desc",
    )
    return present + missing


def paginate(rows: Sequence[Any], current_page: int, page_size: int) -> list[Any]:
    if page_size <= 0:
        return []
    start = (current_page - 1) * page_size
    return list(rows[start : start + page_size])


def count_pages(total_items: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total_items / page_size)
