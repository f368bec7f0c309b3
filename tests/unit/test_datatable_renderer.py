from app.comunidad.datatable.columns import ActionColumn, DataColumn, RowAction
from app.comunidad.datatable.renderer import DataTable, EmptyState
from app.comunidad.datatable.state import DataTableState

ROWS = [
    {"id": 1, "n": "Ana", "cat": "x", "d": False, "email": "ana@example.com"},
    {"id": 2, "n": "Beto", "cat": "y", "d": True, "email": None},
    {"id": 3, "n": "Caro", "cat": "x", "d": False, "email": "caro@example.com"},
    {"id": 4, "n": "Dani", "cat": "y", "d": False, "email": None},
    {"id": 5, "n": "Eva", "cat": "x", "d": True, "email": None},
]

COLUMNS = [
    DataColumn(key="n", label="Nombre", sortable=True),
    DataColumn(key="email", label="Email", sortable=True),
    DataColumn(key="d", label="Destacado"),
    DataColumn(key="cat", label="Categoría", render=lambda value, row: value.upper()),
    ActionColumn(key="actions", label="Acciones", render=lambda row: [RowAction(label="Ver", href=f"/x/{row['id']}")]),
]


def _table(rows=ROWS, **kwargs) -> DataTable:
    state = DataTableState(
        {
            "data": rows,
            "searchFields": ["n", "email"],
            "filterFields": [
                {"key": "cat", "label": "Categoría", "type": "select", "options": [{"value": "x", "label": "Equis"}]},
                {"key": "d", "label": "Destacados", "type": "switch"},
            ],
            "sortableColumns": ["n"],
            "initialPageSize": 2,
        }
    )
    return DataTable(title="Personas", columns=COLUMNS, state=state, **kwargs)


def test_headers_are_sortable_only_when_flagged_and_listed():
    view = _table().render()
    sortable = {header.key: header.sortable for header in view.headers}
    assert sortable == {"n": True, "email": False, "d": False, "cat": False, "actions": False}
    assert all(header.sort_direction is None for header in view.headers)


def test_click_header_sorts_only_sortable_columns():
    table = _table()
    assert table.click_header("email") is False
    assert table.state.sort.column is None

    assert table.click_header("n") is True
    view = table.render()
    directions = {header.key: header.sort_direction for header in view.headers}
    assert directions["n"] == "asc"
    assert directions["email"] is None

    table.click_header("n")
    assert table.render().headers[0].sort_direction == "desc"


def test_cells_use_renderers_and_placeholder():
    view = _table().render()
    first, second = view.rows
    texts = {cell.key: cell.text for cell in first.cells}
    assert texts["n"] == "Ana"
    assert texts["d"] == "-"
    assert texts["cat"] == "X"
    assert {cell.key: cell.text for cell in second.cells}["email"] == "-"
    actions = [cell for cell in first.cells if cell.key == "actions"][0].actions
    assert [(action.label, action.href) for action in actions] == [("Ver", "/x/1")]
    assert first.id == "1"


def test_search_box_intents():
    table = _table()
    assert table.render().search.clearable is False
    table.type_search("an")
    search = table.render().search
    assert search.value == "an"
    assert search.clearable is True
    table.clear_search()
    assert table.render().search.value == ""


def test_filter_controls():
    table = _table()
    select, switch = table.render().filters
    assert select.type == "select"
    assert select.value == "all"
    assert [(option.value, option.label) for option in select.options] == [("all", "Todos"), ("x", "Equis")]
    assert switch.type == "switch"
    assert switch.checked is False

    table.select_filter("cat", "x")
    table.toggle_switch("d", True)
    select, switch = table.render().filters
    assert select.value == "x"
    assert [option.value for option in select.options if option.selected] == ["x"]
    assert switch.checked is True
    assert [row.id for row in table.render().rows] == ["5"]


def test_default_empty_state():
    table = _table()
    table.type_search("nadie")
    view = table.render()
    assert view.rows == []
    assert view.empty_state.title == "No hay datos disponibles"
    assert view.empty_state.description == (
        "No se encontraron elementos que coincidan con los criterios de búsqueda."
    )
    assert view.empty_state.action is None


def test_custom_empty_state():
    table = _table(
        rows=[],
        empty_state=EmptyState(
            title="No hay miembros",
            description="Agrega el primero.",
            action=RowAction(label="Crear", href="/nuevo"),
        ),
    )
    empty = table.render().empty_state
    assert empty.title == "No hay miembros"
    assert empty.action.href == "/nuevo"


def test_pager_bounds_and_label():
    table = _table()
    pager = table.render().pager
    assert pager.visible is True
    assert pager.label == "Mostrando 1 - 2 de 5 resultados"
    assert pager.has_previous is False
    assert pager.has_next is True

    table.previous_page()
    assert table.state.current_page == 1

    table.next_page()
    table.next_page()
    pager = table.render().pager
    assert pager.current_page == 3
    assert pager.label == "Mostrando 5 - 5 de 5 resultados"
    assert pager.has_next is False

    table.next_page()
    assert table.state.current_page == 3
    table.previous_page()
    assert table.state.current_page == 2


def test_change_page_size_hides_single_page_pager():
    table = _table()
    table.next_page()
    table.change_page_size(10)
    pager = table.render().pager
    assert table.state.current_page == 1
    assert pager.visible is False
    assert pager.label is None
    assert [option.size for option in pager.page_sizes if option.selected] == [10]


def test_links_are_generated_with_base_path():
    table = _table(base_path="/admin/personas")
    view = table.render()
    assert view.headers[0].href == "/admin/personas?sort=n&dir=asc"
    assert view.pager.next_href == "/admin/personas?page=2"
    assert view.pager.previous_href is None
    switch = view.filters[1]
    assert switch.toggle_href == "/admin/personas?f_d=true"


def test_links_are_absent_without_base_path():
    view = _table().render()
    assert view.headers[0].href is None
    assert view.pager.next_href is None


def test_add_action():
    assert _table().render().add_action is None

    view = _table(on_add="/admin/personas/new", add_label="Nuevo").render()
    assert view.add_action.label == "Nuevo"
    assert view.add_action.href == "/admin/personas/new"

    calls = []
    table = _table(on_add=lambda: calls.append("add") or "ok")
    assert table.render().add_action.label == "Agregar"
    assert table.add() == "ok"
    assert calls == ["add"]
