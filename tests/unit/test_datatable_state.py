import math

import pytest

from app.comunidad.datatable.state import DataTableState
from app.comunidad.datatable.types import DataTableConfig, SortState

PEOPLE = [
    {"id": 1, "n": "Ana", "d": False},
    {"id": 2, "n": "Beto", "d": True},
    {"id": 3, "n": "Caro", "d": False},
]


def _state(rows=None, **overrides) -> DataTableState:
    config = {
        "data": PEOPLE if rows is None else rows,
        "searchFields": ["n"],
        "filterFields": [{"key": "d", "label": "D", "type": "switch"}],
        "sortableColumns": ["n"],
    }
    config.update(overrides)
    return DataTableState(config)


def _names(rows):
    return [row["n"] for row in rows]


def test_search_is_case_insensitive_substring():
    state = _state()
    state.set_search("a")
    assert _names(state.filtered_data) == ["Ana", "Caro"]


def test_switch_filter_matches_by_equality():
    state = _state()
    state.set_filters({"d": True})
    assert _names(state.filtered_data) == ["Beto"]


def test_switch_filter_off_keeps_only_false_rows():
    state = _state()
    state.set_filters({"d": False})
    assert _names(state.filtered_data) == ["Ana", "Caro"]


def test_pagination_windows_sorted_rows():
    rows = [{"n": name} for name in ("a", "b", "c", "d", "e")]
    state = _state(rows)
    state.set_page_size(2)
    assert state.total_pages == 3
    state.set_current_page(3)
    assert _names(state.paginated_data) == ["e"]


def test_set_sort_toggles_direction_on_same_column():
    state = _state()
    state.set_sort("n")
    assert state.sort == SortState(column="n", direction="asc")
    state.set_sort("n")
    assert state.sort == SortState(column="n", direction="desc")
    state.set_sort("n")
    assert state.sort.direction == "asc"


def test_set_sort_on_another_column_starts_ascending():
    state = _state()
    state.set_sort("n")
    state.set_sort("n")
    state.set_sort("id")
    assert state.sort == SortState(column="id", direction="asc")


@pytest.mark.parametrize("term,expected", [("jacob", 1), ("JACOB", 1), ("jacobx", 0), ("", 1)])
def test_search_examples(term, expected):
    state = _state([{"n": "Jacobacci"}])
    state.set_search(term)
    assert state.total_items == expected


def test_falsy_values_never_match_search():
    state = _state([{"n": 0}, {"n": False}, {"n": ""}, {"n": None}, {}])
    state.set_search("0")
    assert state.filtered_data == []
    state.set_search("false")
    assert state.filtered_data == []


def test_nulls_sort_last_in_both_directions():
    state = _state([{"n": "b"}, {"n": None}, {"n": "a"}])
    state.set_sort("n")
    assert _names(state.sorted_data) == ["a", "b", None]
    state.set_sort("n")
    assert _names(state.sorted_data) == ["b", "a", None]


def test_missing_sort_field_is_treated_as_null():
    state = _state([{"id": 1}, {"id": 2, "n": "z"}])
    state.set_sort("n")
    assert [row["id"] for row in state.sorted_data] == [2, 1]


def test_sort_is_accent_and_case_insensitive():
    state = _state([{"n": "Zoe"}, {"n": "Úrsula"}, {"n": "Ana"}, {"n": "ana"}])
    state.set_sort("n")
    assert _names(state.sorted_data) == ["ana", "Ana", "Úrsula", "Zoe"]


def test_sort_compares_strings_without_numeric_awareness():
    state = _state([{"n": 10}, {"n": 9}, {"n": 2}])
    state.set_sort("n")
    assert _names(state.sorted_data) == [10, 2, 9]


def test_sort_is_stable_for_equal_keys():
    rows = [{"id": 1, "n": "x"}, {"id": 2, "n": "x"}, {"id": 3, "n": "a"}]
    state = _state(rows)
    state.set_sort("n")
    assert [row["id"] for row in state.sorted_data] == [3, 1, 2]
    state.set_sort("n")
    assert [row["id"] for row in state.sorted_data] == [1, 2, 3]


def test_sort_accepts_columns_outside_sortable_list():
    state = _state()
    state.set_sort("id")
    state.set_sort("id")
    assert [row["id"] for row in state.sorted_data] == [3, 2, 1]


@pytest.mark.parametrize(
    "mutate",
    [
        lambda state: state.set_search("a"),
        lambda state: state.set_filters({"d": False}),
        lambda state: state.set_sort("n"),
        lambda state: state.set_page_size(1),
    ],
)
def test_mutations_reset_current_page(mutate):
    state = _state()
    state.set_page_size(1)
    state.set_current_page(3)
    mutate(state)
    assert state.current_page == 1


def test_set_current_page_does_not_clamp():
    state = _state()
    state.set_current_page(10)
    assert state.current_page == 10
    assert state.paginated_data == []


def test_set_data_recomputes_without_resetting_page():
    state = _state()
    state.set_page_size(1)
    state.set_current_page(2)
    state.set_data(PEOPLE + [{"id": 4, "n": "Dani", "d": True}])
    assert state.current_page == 2
    assert state.total_items == 4


def test_filter_bypass_values():
    state = _state()
    for value in ("all", None):
        state.set_filters({"d": value})
        assert state.total_items == 3


def test_switch_values_are_coerced_from_strings():
    state = _state()
    state.set_filters({"d": "true"})
    assert state.filters["d"] is True
    assert _names(state.filtered_data) == ["Beto"]
    state.set_filters({"d": "off"})
    assert state.filters["d"] is False


def test_null_or_missing_switch_field_never_matches():
    state = _state([{"n": "nulo", "d": None}, {"n": "sin campo"}, {"n": "falso", "d": False}, {"n": "con", "d": True}])
    state.set_filters({"d": False})
    assert _names(state.filtered_data) == ["falso"]
    state.set_filters({"d": True})
    assert _names(state.filtered_data) == ["con"]


def test_select_filter_compares_string_forms():
    rows = [{"n": "a", "year": 2022}, {"n": "b", "year": 2023}, {"n": "c"}]
    state = _state(rows, filterFields=[{"key": "year", "label": "Año", "type": "select", "options": []}])
    state.set_filters({"year": 2022})
    assert state.filters["year"] == "2022"
    assert _names(state.filtered_data) == ["a"]


def test_undeclared_filter_keys_are_stored_but_ignored():
    state = _state()
    state.set_filters({"extra": 1})
    assert state.filters["extra"] == 1
    assert state.total_items == 3


def test_filter_state_is_seeded():
    state = _state(initialFilters={"d": False})
    assert state.filters == {"search": "", "showDeleted": False, "d": False}
    assert state.total_items == 2


def test_search_and_filters_are_combined():
    state = _state()
    state.set_search("o")
    state.set_filters({"d": False})
    assert _names(state.filtered_data) == ["Caro"]


def test_reset_state_restores_initial_values_and_is_idempotent():
    state = _state(initialFilters={"d": False}, initialPageSize=2, defaultSort={"column": "n", "direction": "desc"})
    state.set_search("x")
    state.set_filters({"d": True, "extra": "1"})
    state.set_sort("id")
    state.set_page_size(25)
    state.set_current_page(4)

    state.reset_state()
    first = (state.snapshot(), list(state.paginated_data))
    state.reset_state()
    assert (state.snapshot(), list(state.paginated_data)) == first
    assert state.snapshot() == {
        "search": "",
        "filters": {"search": "", "showDeleted": False, "d": False},
        "sort": {"column": "n", "direction": "desc"},
        "current_page": 1,
        "page_size": 2,
    }


def test_reset_state_without_default_sort_clears_sort():
    state = _state(initialSort={"column": "n", "direction": "asc"})
    assert state.sort.column == "n"
    state.reset_state()
    assert state.sort == SortState()


@pytest.mark.parametrize("size", [1, 2, 3, 4, 10])
def test_page_count_and_window_size(size):
    rows = [{"n": str(index)} for index in range(7)]
    state = _state(rows)
    state.set_page_size(size)
    assert state.total_pages == math.ceil(state.total_items / size)
    for page in range(1, state.total_pages + 1):
        state.set_current_page(page)
        assert len(state.paginated_data) <= size


def test_empty_collection_has_zero_pages():
    state = _state([])
    assert state.total_items == 0
    assert state.total_pages == 0
    assert state.paginated_data == []


def test_derived_views_are_cached_until_mutation():
    state = _state()
    first = state.filtered_data
    assert state.filtered_data is first
    state.set_search("b")
    assert state.filtered_data is not first


def test_input_rows_are_not_mutated():
    rows = [{"n": "b"}, {"n": "a"}]
    state = _state(rows)
    state.set_sort("n")
    assert _names(state.sorted_data) == ["a", "b"]
    assert _names(rows) == ["b", "a"]


def test_objects_are_read_through_attributes():
    class Row:
        def __init__(self, n):
            self.n = n

    state = DataTableState(DataTableConfig(data=[Row("Beto"), Row("Ana")], search_fields=["n"], sortable_columns=["n"]))
    state.set_sort("n")
    assert [row.n for row in state.sorted_data] == ["Ana", "Beto"]


def test_copy_is_independent():
    state = _state()
    clone = state.copy()
    clone.set_search("beto")
    assert state.search == ""
    assert clone.total_items == 1
