from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Sequence, Union

ALL_SENTINEL = "all"
ALL_LABEL = "Todos"

SortDirection = Literal["asc", "desc"]

_TRUTHY = {"true", "1", "on", "yes"}


def as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_bypass(value: Any) -> bool:
    return value is None or value == ALL_SENTINEL


@dataclass(frozen=True)
class SortState:
    column: str | None = None
    direction: SortDirection = "asc"

    def toggled(self, column: str) -> SortState:
        if self.column == column and self.direction == "asc":
            return SortState(column=column, direction="desc")
        return SortState(column=column, direction="asc")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | SortState | None) -> SortState | None:
        if raw is None or isinstance(raw, SortState):
            return raw
        direction = raw.get("direction") or "asc"
        return cls(column=raw.get("column"), direction="desc" if direction == "desc" else "asc")


@dataclass(frozen=True)
class FilterOption:
    value: str
    label: str


@dataclass(frozen=True)
class SelectFilterField:
    key: str
    label: str
    options: tuple[FilterOption, ...] = ()
    type: Literal["select"] = "select"

    def coerce(self, raw: Any) -> Any:
        if is_bypass(raw):
            return raw
        return as_text(raw)

    def matches(self, row_value: Any, filter_value: Any) -> bool:
        return as_text(row_value) == as_text(filter_value)


@dataclass(frozen=True)
class SwitchFilterField:
    key: str
    label: str
    type: Literal["switch"] = "switch"

    def coerce(self, raw: Any) -> Any:
        if is_bypass(raw) or isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            return raw.strip().lower() in _TRUTHY
        return bool(raw)

    def matches(self, row_value: Any, filter_value: Any) -> bool:
        # null or missing never matches, in either direction
        return isinstance(row_value, bool) and row_value == filter_value


FilterField = Union[SelectFilterField, SwitchFilterField]


def build_filter_field(raw: Mapping[str, Any] | FilterField) -> FilterField:
    if isinstance(raw, (SelectFilterField, SwitchFilterField)):
        return raw
    key = str(raw["key"])
    label = str(raw.get("label") or key)
    if raw.get("type") == "switch":
        return SwitchFilterField(key=key, label=label)
    options = tuple(
        option if isinstance(option, FilterOption) else FilterOption(value=str(option["value"]), label=str(option["label"]))
        for option in raw.get("options") or ()
    )
    return SelectFilterField(key=key, label=label, options=options)


@dataclass
class DataTableConfig:
    data: Sequence[Any]
    search_fields: Sequence[str] = ()
    filter_fields: Sequence[FilterField] = ()
    sortable_columns: Sequence[str] = ()
    initial_filters: dict[str, Any] = field(default_factory=dict)
    initial_sort: SortState = field(default_factory=SortState)
    initial_page_size: int = 10
    default_sort: SortState | None = None

    def __post_init__(self) -> None:
        self.filter_fields = [build_filter_field(item) for item in self.filter_fields]
        self.initial_sort = SortState.from_mapping(self.initial_sort) or SortState()
        self.default_sort = SortState.from_mapping(self.default_sort)
        self.initial_filters = dict(self.initial_filters or {})

    def filter_field(self, key: str) -> FilterField | None:
        for item in self.filter_fields:
            if item.key == key:
                return item
        return None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> DataTableConfig:
        """Build a config from either the camelCase or the snake_case shape."""

        def pick(camel: str, snake: str, default=None):
            if camel in raw:
                return raw[camel]
            return raw.get(snake, default)

        return cls(
            data=raw.get("data") or [],
            search_fields=list(pick("searchFields", "search_fields", [])),
            filter_fields=list(pick("filterFields", "filter_fields", [])),
            sortable_columns=list(pick("sortableColumns", "sortable_columns", [])),
            initial_filters=pick("initialFilters", "initial_filters", {}) or {},
            initial_sort=pick("initialSort", "initial_sort") or SortState(),
            initial_page_size=pick("initialPageSize", "initial_page_size", 10) or 10,
            default_sort=pick("defaultSort", "default_sort"),
        )
