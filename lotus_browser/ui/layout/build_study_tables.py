from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import dash_bootstrap_components as dbc
import pandas as pd
from dash import html

from lotus_browser.core.pagination import page, page_bounds
from lotus_browser.core.records import Record, SAVED_AT_FIELD, identity_token
from lotus_browser.core.sorting import sort_indicator, sorted_with_index
from lotus_browser.core.table_state import TableState
from lotus_browser.ui.ids import IDs, pattern_id

# (key, label, width)
RESULT_COLUMNS: List[Tuple[str, str, Optional[str]]] = [
    ("year", "Year", "80px"),
    ("journal", "Journal", "200px"),
    ("title", "Title", None),
    ("authors", "Authors", "200px"),
]

SAVED_COLUMNS: List[Tuple[str, str, Optional[str]]] = [
    (SAVED_AT_FIELD, "Saved", "140px"),
] + RESULT_COLUMNS

FONT_FAMILY = 'system-ui, -apple-system, BlinkMacSystemFont, "SF Pro Text", "Segoe UI", sans-serif'

HEADER_STYLE = {
    "fontFamily": FONT_FAMILY,
    "fontSize": "12px",
    "fontWeight": "600",
    "backgroundColor": "#f3f4f6",
    "borderBottom": "1px solid #e5e7eb",
    "color": "#111827",
    "padding": "8px 12px",
    "whiteSpace": "nowrap",
    "cursor": "pointer",
}

CELL_STYLE = {
    "fontFamily": FONT_FAMILY,
    "fontSize": "12px",
    "padding": "6px 12px",
    "borderBottom": "1px solid #e5e7eb",
    "color": "#374151",
    "verticalAlign": "middle",
}

ACTION_BTN_STYLE = {
    "fontSize": "12px",
    "padding": "2px 8px",
    "lineHeight": "1.2",
}


def format_saved_at(value: Any) -> str:
    if not value or not isinstance(value, (str, int, float)) or isinstance(value, bool):
        return ""
    # Bare numbers are epoch milliseconds, as in the sort key
    unit = "ms" if isinstance(value, (int, float)) else None
    ts = pd.to_datetime(value, utc=True, errors="coerce", unit=unit)
    if pd.isna(ts):
        return ""
    return ts.strftime("%Y-%m-%d")


def _cell_text(record: Record, key: str) -> str:
    value = record.get(key)
    if key == SAVED_AT_FIELD:
        return format_saved_at(value)
    return "" if value is None else str(value)


def _header(columns, state: TableState, sort_pattern: str) -> html.Thead:
    cells = [html.Th("", style={**HEADER_STYLE, "width": "40px", "cursor": "default"})]
    for key, label, width in columns:
        style = dict(HEADER_STYLE)
        if width:
            style["width"] = width
        cells.append(
            html.Th(
                html.Span(
                    [
                        label,
                        html.Span(
                            sort_indicator(key, state.sort_key, state.direction),
                            className="lotus-table__sort ms-1",
                        ),
                    ],
                    id=pattern_id(sort_pattern, key),
                    n_clicks=0,
                    role="button",
                ),
                style=style,
            )
        )
    return html.Thead(html.Tr(cells))


def build_study_table(
        rows: Sequence[Tuple[int, Record]],
        columns,
        state: TableState,
        *,
        sort_pattern: str,
        action_cell: Callable[[int, Record], Any],
        empty_text: str = "No studies found matching your query",
) -> dbc.Table:
    """
    Sortable table of studies. Mimics the DataTable look but keeps the
    flexibility of embedding a button in the first column of each row.
    """
    body: List[html.Tr] = []
    if not rows:
        body.append(
            html.Tr(
                html.Td(
                    empty_text,
                    colSpan=len(columns) + 1,
                    className="text-muted text-center",
                    style=CELL_STYLE,
                )
            )
        )

    for i, (index, record) in enumerate(rows):
        cells = [html.Td(action_cell(index, record), style=CELL_STYLE)]
        for key, _label, _width in columns:
            text = _cell_text(record, key)
            if key == "title":
                cells.append(
                    html.Td(
                        html.Div(text, title=text, className="lotus-table__title"),
                        style={**CELL_STYLE, "whiteSpace": "normal"},
                    )
                )
            else:
                cells.append(html.Td(text, style=CELL_STYLE))
        body.append(html.Tr(cells, className="lotus-table__row--alt" if i % 2 else "lotus-table__row"))

    return dbc.Table(
        [_header(columns, state, sort_pattern), html.Tbody(body)],
        bordered=False,
        hover=True,
        responsive=True,
        className="mb-0 lotus-table",
        style={"border": "1px solid #e5e7eb", "borderRadius": "4px"},
    )


def build_pagination(state: TableState, n_records: int, page_pattern: str) -> html.Div | None:
    """First / Previous / Next / Last controls; nothing when one page suffices."""
    n_pages = state.n_pages(n_records)
    if n_pages <= 1:
        return None

    first, last = page_bounds(state.page, state.page_size, n_records)
    at_start = state.page <= 1
    at_end = state.page >= n_pages

    def _btn(label: str, target: str, disabled: bool) -> dbc.Button:
        return dbc.Button(
            label,
            id=pattern_id(page_pattern, target),
            n_clicks=0,
            disabled=disabled,
            color="secondary",
            outline=True,
            size="sm",
            className="me-1",
        )

    return html.Div(
        [
            html.Div(
                [
                    "Page ", html.Strong(str(state.page)), " of ", html.Strong(str(n_pages)),
                    html.Span(f" · rows {first}–{last} of {n_records}", className="text-muted"),
                ],
                className="small",
            ),
            html.Div(
                [
                    _btn("⏮", "first", at_start),
                    _btn("Previous", "prev", at_start),
                    _btn("Next", "next", at_end),
                    _btn("⏭", "last", at_end),
                ],
                className="d-flex",
            ),
        ],
        className="d-flex justify-content-between align-items-center mt-2 lotus-pagination",
    )


def target_page(action: str, state: TableState, n_records: int) -> int:
    """Resolve a pagination button to a page number."""
    n_pages = state.n_pages(n_records)
    return {
        "first": 1,
        "prev": state.page - 1,
        "next": state.page + 1,
        "last": n_pages,
    }.get(action, state.page)


# -------------------------------------------------------------------------
# Row actions
# -------------------------------------------------------------------------

def save_button(index: int, is_saved: bool) -> dbc.Button:
    # Results can repeat a study, so buttons are keyed by position in the
    # fetched list rather than by identity key.
    return dbc.Button(
        "★" if is_saved else "☆",
        id=pattern_id(IDs.Pattern.RESULTS_SAVE, str(index)),
        n_clicks=0,
        disabled=is_saved,
        color="warning",
        outline=not is_saved,
        size="sm",
        title="Already saved" if is_saved else "Save this study",
        style=ACTION_BTN_STYLE,
    )


def remove_button(_index: int, record: Record) -> dbc.Button:
    # Rows carry the identity key, not their display position: the table is
    # a sorted page of the store, so positions do not match store indices.
    return dbc.Button(
        "✕",
        id=pattern_id(IDs.Pattern.SAVED_REMOVE, identity_token(record)),
        n_clicks=0,
        color="danger",
        outline=True,
        size="sm",
        title="Remove from saved",
        style=ACTION_BTN_STYLE,
    )


def remove_confirm_message(record: Record | None) -> str:
    title = record.get("title") if record else None
    if not title:
        return "Remove this study from saved?"
    return f"Remove \"{title}\" from saved studies?"


def count_label(n: int, suffix: str) -> str:
    return f"{n} {'study' if n == 1 else 'studies'} {suffix}"


def empty_placeholder(icon: str, title: str, text: str) -> html.Div:
    return html.Div(
        [
            html.Div(icon, className="lotus-empty__icon"),
            html.Div(title, className="fw-semibold"),
            html.Div(text, className="text-muted small mt-1"),
        ],
        className="lotus-empty text-center mt-3",
    )


def build_results_view(
        query: str,
        rows: Sequence[Record],
        state: TableState,
        saved_flags: Dict[str, bool],
) -> List[Any]:
    n = len(rows)
    return [
        html.Div(
            [
                html.Span(["Showing ", html.Strong(query)]),
                html.Span(count_label(n, "found"), className="text-muted"),
            ],
            className="d-flex justify-content-between small mb-2",
        ),
        build_study_table(
            rows_on_page(rows, state),
            RESULT_COLUMNS,
            state,
            sort_pattern=IDs.Pattern.RESULTS_SORT,
            action_cell=lambda i, r: save_button(i, saved_flags.get(identity_token(r), False)),
        ),
        build_pagination(state, n, IDs.Pattern.RESULTS_PAGE),
    ]


def build_saved_view(items: Sequence[Record], state: TableState) -> List[Any]:
    if not items:
        return [
            empty_placeholder(
                "⭐",
                "No Saved Studies Yet",
                "Click the ☆ icon next to any study in search results to save it here",
            )
        ]
    return [
        build_study_table(
            rows_on_page(items, state),
            SAVED_COLUMNS,
            state,
            sort_pattern=IDs.Pattern.SAVED_SORT,
            action_cell=remove_button,
        ),
        build_pagination(state, len(items), IDs.Pattern.SAVED_PAGE),
    ]


def rows_on_page(rows: Sequence[Record], state: TableState) -> List[Tuple[int, Record]]:
    """Sorted page of (position in `rows`, record) pairs."""
    return page(sorted_with_index(rows, state.sort_key, state.direction), state.page, state.page_size)
