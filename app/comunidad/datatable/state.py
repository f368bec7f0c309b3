from __future__ import annotations

from typing import Any, Mapping, Sequence

from app.comunidad.datatable.pipeline import count_pages, matches_filters, matches_search, paginate, sort_rows
from app.comunidad.datatable.types import DataTableConfig, SortState


def _seed_filters(initial_filters: Mapping[str, Any]) -> dict[str, Any]:
    return {"search": "", "showDeleted": False, **initial_filters}


class DataTableState:
    """Search, filter, sort and pagination state mounted over one row collection.

    Derived views are computed lazily and cached until the next mutation.
    Every mutation except ``set_current_page`` and ``set_data`` sends the
    table back to page 1.
    """

    def __init__(self, config: DataTableConfig | Mapping[str, Any]):
        if not isinstance(config, DataTableConfig):
            config = DataTableConfig.from_mapping(config)
        self.config = config
        self._data: list[Any] = list(config.data)
        self.search = ""
        self.filters = _seed_filters(config.initial_filters)
        self.sort: SortState = config.initial_sort
        self.current_page = 1
        self.page_size = config.initial_page_size
        self._cache: dict[str, Any] = {}

    @property
    def data(self) -> list[Any]:
        return self._data

    def _changed(self, *, reset_page: bool = True) -> None:
        self._cache.clear()
        if reset_page:
            self.current_page = 1

    def set_search(self, text: str) -> None:
        self.search = text or ""
        self._changed()

    def set_filters(self, partial: Mapping[str, Any]) -> None:
        merged = dict(self.filters)
        for key, raw in partial.items():
            filter_field = self.config.filter_field(key)
            merged[key] = filter_field.coerce(raw) if filter_field else raw
        self.filters = merged
        self._changed()

    def set_sort(self, column: str) -> None:
        self.sort = self.sort.toggled(column)
        self._changed()

    def set_current_page(self, page: int) -> None:
        self.current_page = page
        self._changed(reset_page=False)

    def set_page_size(self, size: int) -> None:
        self.page_size = size
        self._changed()

    def set_data(self, rows: Sequence[Any]) -> None:
        self._data = list(rows)
        self._changed(reset_page=False)

    def reset_state(self) -> None:
        self.search = ""
        self.filters = _seed_filters(self.config.initial_filters)
        self.sort = self.config.default_sort or SortState()
        self.page_size = self.config.initial_page_size
        self._changed()

    def _cached(self, name: str, compute):
        if name not in self._cache:
            self._cache[name] = compute()
        return self._cache[name]

    @property
    def filtered_data(self) -> list[Any]:
        return self._cached(
            "filtered",
            lambda: [
                row
                for row in self._data
                if matches_search(row, self.search, self.config.search_fields)
                and matches_filters(row, self.filters, self.config.filter_fields)
            ],
        )

    @property
    def sorted_data(self) -> list[Any]:
        return self._cached("sorted", lambda: sort_rows(self.filtered_data, self.sort))

    @property
    def paginated_data(self) -> list[Any]:
        return self._cached("paginated", lambda: paginate(self.sorted_data, self.current_page, self.page_size))

    @property
    def total_items(self) -> int:
        return len(self.sorted_data)

    @property
    def total_pages(self) -> int:
        return count_pages(self.total_items, self.page_size)

    def copy(self) -> DataTableState:
        clone = DataTableState.__new__(DataTableState)
        clone.config = self.config
        clone._data = self._data
        clone.search = self.search
        clone.filters = dict(self.filters)
        clone.sort = self.sort
        clone.current_page = self.current_page
        clone.page_size = self.page_size
        clone._cache = {}
        return clone

    def snapshot(self) -> dict[str, Any]:
        return {
            "search": self.search,
            "filters": dict(self.filters),
            "sort": {"column": self.sort.column, "direction": self.sort.direction},
            "current_page": self.current_page,
            "page_size": self.page_size,
        }
