from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, Union

PLACEHOLDER = "-"

ActionMethod = Literal["get", "post"]
ActionVariant = Literal["default", "outline", "destructive", "ghost"]


@dataclass(frozen=True)
class RowAction:
    label: str
    href: str
    method: ActionMethod = "get"
    variant: ActionVariant = "outline"


CellNode = Union[str, list[RowAction]]


@dataclass(frozen=True)
class DataColumn:
    key: str
    label: str
    sortable: bool = False
    render: Callable[[Any, Any], str] | None = None
    class_name: str | None = None

    def cell(self, value: Any, row: Any) -> CellNode:
        if self.render is not None:
            return self.render(value, row)
        if not value:
            return PLACEHOLDER
        return str(value)


@dataclass(frozen=True)
class ActionColumn:
    key: str
    label: str
    render: Callable[[Any], CellNode]
    class_name: str | None = None

    def cell(self, row: Any) -> CellNode:
        return self.render(row)


Column = Union[DataColumn, ActionColumn]
