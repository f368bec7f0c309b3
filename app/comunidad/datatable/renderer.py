from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from app.comunidad.datatable.columns import ActionColumn, Column, DataColumn, RowAction
from app.comunidad.datatable.pipeline import field_value
from app.comunidad.datatable.query import href_for, query_for
from app.comunidad.datatable.state import DataTableState
from app.comunidad.datatable.types import ALL_LABEL, ALL_SENTINEL, SelectFilterField, is_bypass
from app.comunidad.schemas.datatable import (
    ActionLink,
    Cell,
    EmptyStateView,
    FilterOptionView,
    HeaderCell,
    PagerView,
    PageSizeOption,
    SearchBox,
    SelectFilterView,
    SwitchFilterView,
    TableRow,
    TableView,
)

DEFAULT_PAGE_SIZES = (10, 25, 50, 100)
DEFAULT_EMPTY_TITLE = "No hay datos disponibles"
DEFAULT_EMPTY_DESCRIPTION = "No se encontraron elementos que coincidan con los criterios de búsqueda."


@dataclass(frozen=True)
class EmptyState:
    title: str = DEFAULT_EMPTY_TITLE
    description: str = DEFAULT_EMPTY_DESCRIPTION
    action: RowAction | None = None


def _action_link(action: RowAction) -> ActionLink:
    return ActionLink(label=action.label, href=action.href, method=action.method, variant=action.variant)


class DataTable:
    """Render a mounted :class:`DataTableState` through a column list.

    The intent methods (``click_header``, ``type_search`` ...) mutate the
    state the same way the links in the rendered view do.
    """

    def __init__(
        self,
        *,
        title: str,
        columns: Sequence[Column],
        state: DataTableState,
        on_add: Callable[[], Any] | str | None = None,
        add_label: str = "Agregar",
        empty_state: EmptyState | None = None,
        page_sizes: Sequence[int] = DEFAULT_PAGE_SIZES,
        base_path: str | None = None,
        search_placeholder: str = "Buscar...",
    ):
        self.title = title
        self.columns = list(columns)
        self.state = state
        self.on_add = on_add
        self.add_label = add_label
        self.empty_state = empty_state or EmptyState()
        self.page_sizes = list(page_sizes)
        self.base_path = base_path
        self.search_placeholder = search_placeholder

    @property
    def config(self):
        return self.state.config

    def is_sortable(self, column: Column) -> bool:
        return isinstance(column, DataColumn) and column.sortable and column.key in self.config.sortable_columns

    def _href(self, intent: Callable[[DataTableState], None]) -> str | None:
        if self.base_path is None:
            return None
        return href_for(self.base_path, self.state, intent)

    # intents

    def click_header(self, key: str) -> bool:
        for column in self.columns:
            if column.key == key and self.is_sortable(column):
                self.state.set_sort(key)
                return True
        return False

    def type_search(self, text: str) -> None:
        self.state.set_search(text)

    def clear_search(self) -> None:
        self.state.set_search("")

    def select_filter(self, key: str, value: Any) -> None:
        self.state.set_filters({key: value})

    def toggle_switch(self, key: str, checked: bool) -> None:
        self.state.set_filters({key: checked})

    def previous_page(self) -> None:
        if self.state.current_page > 1:
            self.state.set_current_page(self.state.current_page - 1)

    def next_page(self) -> None:
        if self.state.current_page < self.state.total_pages:
            self.state.set_current_page(self.state.current_page + 1)

    def change_page_size(self, size: int) -> None:
        self.state.set_page_size(size)

    def add(self) -> Any:
        if callable(self.on_add):
            return self.on_add()
        return None

    # view

    def _headers(self) -> list[HeaderCell]:
        headers = []
        sort = self.state.sort
        for column in self.columns:
            sortable = self.is_sortable(column)
            headers.append(
                HeaderCell(
                    key=column.key,
                    label=column.label,
                    sortable=sortable,
                    sort_direction=sort.direction if sortable and sort.column == column.key else None,
                    href=self._href(lambda target, key=column.key: target.set_sort(key)) if sortable else None,
                    class_name=column.class_name,
                )
            )
        return headers

    def _cell(self, column: Column, row: Any) -> Cell:
        if isinstance(column, ActionColumn):
            node = column.cell(row)
        else:
            node = column.cell(field_value(row, column.key), row)
        if isinstance(node, list):
            return Cell(key=column.key, actions=[_action_link(action) for action in node], class_name=column.class_name)
        return Cell(key=column.key, text=None if node is None else str(node), class_name=column.class_name)

    def _rows(self) -> list[TableRow]:
        rows = []
        for row in self.state.paginated_data:
            row_id = field_value(row, "id")
            rows.append(
                TableRow(
                    id=str(row_id) if row_id is not None else None,
                    is_deleted=field_value(row, "is_deleted") is True,
                    cells=[self._cell(column, row) for column in self.columns],
                )
            )
        return rows

    def _search(self) -> SearchBox:
        search = self.state.search
        hidden = query_for(self.state, q=None, page=None)
        for filter_field in self.config.filter_fields:
            if isinstance(filter_field, SelectFilterField):
                hidden.pop(f"f_{filter_field.key}", None)
        return SearchBox(
            value=search,
            placeholder=self.search_placeholder,
            clearable=bool(search),
            clear_href=self._href(lambda target: target.set_search("")) if search else None,
            hidden=hidden,
        )

    def _filters(self) -> list[SelectFilterView | SwitchFilterView]:
        controls = []
        for filter_field in self.config.filter_fields:
            current = self.state.filters.get(filter_field.key)
            if isinstance(filter_field, SelectFilterField):
                selected = ALL_SENTINEL if is_bypass(current) else str(current)
                options = [FilterOptionView(value=ALL_SENTINEL, label=ALL_LABEL, selected=selected == ALL_SENTINEL)]
                options.extend(
                    FilterOptionView(value=option.value, label=option.label, selected=option.value == selected)
                    for option in filter_field.options
                )
                controls.append(
                    SelectFilterView(key=filter_field.key, label=filter_field.label, value=selected, options=options)
                )
            else:
                checked = current is True
                controls.append(
                    SwitchFilterView(
                        key=filter_field.key,
                        label=filter_field.label,
                        checked=checked,
                        toggle_href=self._href(
                            lambda target, key=filter_field.key, value=not checked: target.set_filters({key: value})
                        ),
                    )
                )
        return controls

    def _empty_state(self) -> EmptyStateView | None:
        if self.state.paginated_data:
            return None
        action = self.empty_state.action
        return EmptyStateView(
            title=self.empty_state.title,
            description=self.empty_state.description,
            action=_action_link(action) if action else None,
        )

    def _pager(self) -> PagerView:
        state = self.state
        page = state.current_page
        size = state.page_size
        total_items = state.total_items
        total_pages = state.total_pages
        visible = total_pages > 1
        label = None
        if visible:
            first = (page - 1) * size + 1
            last = min(page * size, total_items)
            label = f"Mostrando {first} - {last} de {total_items} resultados"
        has_previous = page > 1
        has_next = page < total_pages
        return PagerView(
            visible=visible,
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            page_size=size,
            label=label,
            has_previous=has_previous,
            has_next=has_next,
            previous_href=self._href(lambda target: target.set_current_page(page - 1)) if has_previous else None,
            next_href=self._href(lambda target: target.set_current_page(page + 1)) if has_next else None,
            page_sizes=[
                PageSizeOption(
                    size=option,
                    selected=option == size,
                    href=self._href(lambda target, option=option: target.set_page_size(option)),
                )
                for option in self.page_sizes
            ],
        )

    def _add_action(self) -> ActionLink | None:
        if self.on_add is None:
            return None
        href = self.on_add if isinstance(self.on_add, str) else None
        return ActionLink(label=self.add_label, href=href, variant="default")

    def render(self) -> TableView:
        return TableView(
            title=self.title,
            add_action=self._add_action(),
            headers=self._headers(),
            rows=self._rows(),
            search=self._search(),
            filters=self._filters(),
            empty_state=self._empty_state(),
            pager=self._pager(),
        )
