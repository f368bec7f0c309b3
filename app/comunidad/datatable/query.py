"""Bind table state to URL query parameters.

``q`` holds the search text, ``sort``/``dir`` the sort state, ``f_<key>`` each
declared filter, and ``page_size``/``page`` the pagination window.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping
from urllib.parse import urlencode

from app.comunidad.datatable.state import DataTableState
from app.comunidad.datatable.types import ALL_SENTINEL, DataTableConfig, as_text

FILTER_PREFIX = "f_"


def _positive_int(raw: Any) -> int | None:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def state_from_query(config: DataTableConfig | Mapping[str, Any], params: Mapping[str, Any]) -> DataTableState:
    state = DataTableState(config)
    search = params.get("q")
    if search:
        state.set_search(str(search))

    column = params.get("sort")
    if column:
        direction = "desc" if params.get("dir") == "desc" else "asc"
        state.set_sort(str(column))
        if state.sort.direction != direction:
            state.set_sort(str(column))

    partial = {
        key[len(FILTER_PREFIX) :]: value
        for key, value in params.items()
        if key.startswith(FILTER_PREFIX) and len(key) > len(FILTER_PREFIX)
    }
    if partial:
        state.set_filters(partial)

    page_size = _positive_int(params.get("page_size"))
    if page_size is not None:
        state.set_page_size(page_size)

    # page last, every other setter resets it
    page = _positive_int(params.get("page"))
    if page is not None:
        state.set_current_page(page)
    return state


def _filter_param(value: Any) -> str:
    if value is None:
        return ALL_SENTINEL
    return as_text(value)


def query_for(state: DataTableState, **overrides: Any) -> dict[str, str]:
    """Serialise ``state`` to query parameters, leaving out values equal to the mount defaults.

    An override of ``None`` removes the parameter.
    """
    config = state.config
    params: dict[str, str] = {}
    if state.search:
        params["q"] = state.search
    if state.sort != config.initial_sort and state.sort.column:
        params["sort"] = state.sort.column
        params["dir"] = state.sort.direction
    seeded = {"search": "", "showDeleted": False, **config.initial_filters}
    for filter_field in config.filter_fields:
        value = state.filters.get(filter_field.key)
        if value != seeded.get(filter_field.key):
            params[f"{FILTER_PREFIX}{filter_field.key}"] = _filter_param(value)
    if state.page_size != config.initial_page_size:
        params["page_size"] = str(state.page_size)
    if state.current_page != 1:
        params["page"] = str(state.current_page)
    for key, value in overrides.items():
        if value is None:
            params.pop(key, None)
        else:
            params[key] = as_text(value)
    return params


def query_string(state: DataTableState, **overrides: Any) -> str:
    params = query_for(state, **overrides)
    return f"?{urlencode(params)}" if params else ""


def href_for(base_path: str, state: DataTableState, intent: Callable[[DataTableState], None]) -> str:
    """Link that reproduces ``intent`` applied to a copy of ``state``."""
    target = state.copy()
    intent(target)
    return f"{base_path}{query_string(target)}"
