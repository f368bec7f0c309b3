from __future__ import annotations

from html import escape

from app.comunidad.schemas.datatable import (
    ActionLink,
    Cell,
    PagerView,
    SearchBox,
    SelectFilterView,
    SwitchFilterView,
    TableView,
)


def h(value: object) -> str:
    if value is None:
        return ""
    return escape(str(value), quote=True)


def _action_html(action: ActionLink) -> str:
    css = f"btn btn-{h(action.variant)}"
    if action.method == "post":
        return (
            f'<form method="post" action="{h(action.href)}" class="inline">'
            f'<button type="submit" class="{css}">{h(action.label)}</button></form>'
        )
    return f'<a class="{css}" href="{h(action.href)}">{h(action.label)}</a>'


def _cell_html(cell: Cell) -> str:
    css = f' class="{h(cell.class_name)}"' if cell.class_name else ""
    if cell.actions:
        inner = '<div class="actions">' + "".join(_action_html(action) for action in cell.actions) + "</div>"
    else:
        inner = h(cell.text)
    return f"<td{css}>{inner}</td>"


def _search_html(search: SearchBox, filters: list) -> str:
    parts = ['<form method="get" class="datatable-toolbar">']
    for name, value in search.hidden.items():
        parts.append(f'<input type="hidden" name="{h(name)}" value="{h(value)}">')
    parts.append(
        f'<input type="search" name="q" value="{h(search.value)}" placeholder="{h(search.placeholder)}">'
    )
    if search.clearable:
        parts.append(f'<a class="clear-search" href="{h(search.clear_href)}">&times;</a>')
    for control in filters:
        if isinstance(control, SelectFilterView):
            parts.append(f'<label>{h(control.label)} <select name="f_{h(control.key)}">')
            for option in control.options:
                selected = " selected" if option.selected else ""
                parts.append(f'<option value="{h(option.value)}"{selected}>{h(option.label)}</option>')
            parts.append("</select></label>")
    parts.append('<button type="submit">Filtrar</button></form>')
    return "".join(parts)


def _switch_html(control: SwitchFilterView) -> str:
    state = "on" if control.checked else "off"
    return (
        f'<a class="switch switch-{state}" role="switch" aria-checked="{str(control.checked).lower()}" '
        f'href="{h(control.toggle_href)}">{h(control.label)}</a>'
    )


def _pager_html(pager: PagerView) -> str:
    if not pager.visible:
        return ""
    previous = (
        f'<a href="{h(pager.previous_href)}">Anterior</a>' if pager.has_previous else '<span class="disabled">Anterior</span>'
    )
    following = f'<a href="{h(pager.next_href)}">Siguiente</a>' if pager.has_next else '<span class="disabled">Siguiente</span>'
    sizes = "".join(
        f'<a class="page-size{" selected" if option.selected else ""}" href="{h(option.href)}">{option.size}</a>'
        for option in pager.page_sizes
    )
    return (
        f'<nav class="pager"><span>{h(pager.label)}</span>'
        f"{previous}<span>Página {pager.current_page} de {pager.total_pages}</span>{following}"
        f'<span class="page-sizes">{sizes}</span></nav>'
    )


def render_table_html(view: TableView) -> str:
    parts = ['<section class="datatable">', f"<header><h1>{h(view.title)}</h1>"]
    if view.add_action is not None:
        parts.append(_action_html(view.add_action))
    parts.append("</header>")
    parts.append(_search_html(view.search, view.filters))
    switches = [control for control in view.filters if isinstance(control, SwitchFilterView)]
    if switches:
        parts.append('<div class="switches">' + "".join(_switch_html(control) for control in switches) + "</div>")

    if view.empty_state is not None:
        empty = view.empty_state
        parts.append(f'<div class="empty-state"><h2>{h(empty.title)}</h2><p>{h(empty.description)}</p>')
        if empty.action is not None:
            parts.append(_action_html(empty.action))
        parts.append("</div>")
    else:
        parts.append("<table><thead><tr>")
        for header in view.headers:
            label = h(header.label)
            if header.sortable:
                indicator = {"asc": " ▲", "desc": " ▼"}.get(header.sort_direction or "", "")
                label = f'<a href="{h(header.href)}">{label}{indicator}</a>'
            parts.append(f"<th>{label}</th>")
        parts.append("</tr></thead><tbody>")
        for row in view.rows:
            css = ' class="deleted"' if row.is_deleted else ""
            parts.append(f'<tr data-id="{h(row.id)}"{css}>' + "".join(_cell_html(cell) for cell in row.cells) + "</tr>")
        parts.append("</tbody></table>")

    parts.append(_pager_html(view.pager))
    parts.append("</section>")
    return "".join(parts)


def render_page(title: str, body: str) -> str:
    return (
        '<!DOCTYPE html><html lang="es"><head><meta charset="utf-8">'
        f"<title>{h(title)}</title></head><body>{body}</body></html>"
    )
