from lotus_browser.core.records import identity_token
from lotus_browser.core.sorting import ASC, DESC
from lotus_browser.core.table_state import TableState
from lotus_browser.ui.ids import IDs
from lotus_browser.ui.layout.build_panes import pane_styles, resizer_style
from lotus_browser.ui.layout.build_study_tables import (
    build_pagination,
    build_saved_view,
    count_label,
    format_saved_at,
    remove_button,
    remove_confirm_message,
    rows_on_page,
    save_button,
    target_page,
)


def _rows(n):
    return [{"year": 2000 + i, "title": f"Study {i}", "authors": "Doe J"} for i in range(n)]


def test_rows_on_page_pairs_rows_with_source_positions():
    rows = _rows(25)
    state = TableState(sort_key="year", direction=DESC, page=2)

    on_page = rows_on_page(rows, state)

    assert [i for i, _ in on_page] == [4, 3, 2, 1, 0]
    assert all(rows[i] is r for i, r in on_page)


def test_target_page():
    state = TableState(page=2, page_size=10)

    assert target_page("first", state, 45) == 1
    assert target_page("prev", state, 45) == 1
    assert target_page("next", state, 45) == 3
    assert target_page("last", state, 45) == 5
    assert target_page("bogus", state, 45) == 2


def test_pagination_hidden_for_single_page():
    assert build_pagination(TableState(), 20, IDs.Pattern.RESULTS_PAGE) is None
    assert build_pagination(TableState(), 21, IDs.Pattern.RESULTS_PAGE) is not None


def test_save_button_reflects_saved_state():
    saved = save_button(3, True)
    unsaved = save_button(4, False)

    assert saved.id == {"type": IDs.Pattern.RESULTS_SAVE, "index": "3"}
    assert saved.disabled is True
    assert saved.children == "★"
    assert unsaved.disabled is False
    assert unsaved.children == "☆"


def test_remove_button_carries_identity():
    record = {"year": 2010, "title": "Fear", "authors": "Smith A", "savedAt": "2024-01-01T00:00:00Z"}

    button = remove_button(7, record)

    assert button.id == {"type": IDs.Pattern.SAVED_REMOVE, "index": identity_token(record)}


def test_format_saved_at():
    assert format_saved_at("2024-03-01T23:30:00+00:00") == "2024-03-01"
    assert format_saved_at(None) == ""
    assert format_saved_at("yesterday-ish") == ""


def test_count_label():
    assert count_label(1, "found") == "1 study found"
    assert count_label(3, "saved") == "3 studies saved"


def test_pane_styles():
    assert pane_styles([20, 35, 45]) == [
        {"flexBasis": "20.0000%"},
        {"flexBasis": "35.0000%"},
        {"flexBasis": "45.0000%"},
    ]

    expanded = pane_styles([20, 35, 45], expanded=True)
    assert expanded[0] == expanded[2] == {"display": "none"}
    assert expanded[1] == {"flexBasis": "100%"}
    assert resizer_style(True) == {"display": "none"}
    assert resizer_style(False) == {}


def test_rows_on_page_sorts_text_columns():
    state = TableState(sort_key="title", direction=ASC, page_size=3)

    assert [r["title"] for _, r in rows_on_page(_rows(5), state)] == ["Study 0", "Study 1", "Study 2"]


def test_format_saved_at_ignores_non_scalar_values():
    for garbled in (["2020-01-01", "2021-01-01"], {"a": 1}, [], {}, True):
        assert format_saved_at(garbled) == ""
    assert format_saved_at(1_700_000_000_000) == "2023-11-14"


def test_saved_view_renders_with_garbled_saved_at():
    items = [
        {"year": 2001, "title": "A", "authors": "X", "savedAt": ["2020-01-01"]},
        {"year": 2002, "title": "B", "authors": "Y", "savedAt": "2024-01-01T00:00:00Z"},
    ]

    view = build_saved_view(items, TableState(sort_key="savedAt", direction=DESC))

    assert view[0] is not None


def test_remove_confirm_message_names_the_study():
    assert remove_confirm_message({"title": "Fear circuits"}) == 'Remove "Fear circuits" from saved studies?'
    assert remove_confirm_message({"title": ""}) == "Remove this study from saved?"
    assert remove_confirm_message(None) == "Remove this study from saved?"
