from typing import Literal, Union

from pydantic import BaseModel, Field


class ActionLink(BaseModel):
    label: str
    href: str | None = None
    method: Literal["get", "post"] = "get"
    variant: str = "outline"


class HeaderCell(BaseModel):
    key: str
    label: str
    sortable: bool = False
    sort_direction: Literal["asc", "desc"] | None = None
    href: str | None = None
    class_name: str | None = None


class Cell(BaseModel):
    key: str
    text: str | None = None
    actions: list[ActionLink] = Field(default_factory=list)
    class_name: str | None = None


class TableRow(BaseModel):
    id: str | None = None
    is_deleted: bool = False
    cells: list[Cell]


class SearchBox(BaseModel):
    value: str
    placeholder: str = "Buscar..."
    clearable: bool = False
    clear_href: str | None = None
    hidden: dict[str, str] = Field(default_factory=dict)


class FilterOptionView(BaseModel):
    value: str
    label: str
    selected: bool = False


class SelectFilterView(BaseModel):
    type: Literal["select"] = "select"
    key: str
    label: str
    value: str
    options: list[FilterOptionView]


class SwitchFilterView(BaseModel):
    type: Literal["switch"] = "switch"
    key: str
    label: str
    checked: bool
    toggle_href: str | None = None


FilterControl = Union[SelectFilterView, SwitchFilterView]


class EmptyStateView(BaseModel):
    title: str
    description: str
    action: ActionLink | None = None


class PageSizeOption(BaseModel):
    size: int
    selected: bool = False
    href: str | None = None


class PagerView(BaseModel):
    visible: bool
    current_page: int
    total_pages: int
    total_items: int
    page_size: int
    label: str | None = None
    has_previous: bool
    has_next: bool
    previous_href: str | None = None
    next_href: str | None = None
    page_sizes: list[PageSizeOption] = Field(default_factory=list)


class TableView(BaseModel):
    title: str
    add_action: ActionLink | None = None
    headers: list[HeaderCell]
    rows: list[TableRow]
    search: SearchBox
    filters: list[FilterControl] = Field(default_factory=list)
    empty_state: EmptyStateView | None = None
    pager: PagerView
