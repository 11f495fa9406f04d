from __future__ import annotations

from typing import Dict, List, Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from lotus_browser.core.query import OPERATOR_TOKENS
from lotus_browser.ui.ids import IDs, pattern_id


def pane_styles(sizes: Sequence[float], expanded: bool = False) -> List[Dict[str, str]]:
    """
    flex-basis styles for Terms | Query | Viewer. In expanded viewer mode the
    side panes are hidden and the query pane takes the full row.
    """
    if expanded:
        hidden = {"display": "none"}
        return [hidden, {"flexBasis": "100%"}, hidden]
    return [{"flexBasis": f"{s:.4f}%"} for s in sizes]


def resizer_style(expanded: bool) -> Dict[str, str]:
    return {"display": "none"} if expanded else {}


def _card_header(icon: str, title: str) -> dbc.CardHeader:
    return dbc.CardHeader(
        html.Div(
            [
                html.Span(icon, className="me-2"),
                html.Strong(title),
            ],
            className="d-flex align-items-center",
        ),
        className="p-2",
    )


def build_terms_pane() -> dbc.Card:
    return dbc.Card(
        [
            _card_header("🏷️", "Terms"),
            dbc.CardBody(
                [
                    html.Div("Add a term or coordinate to the query", className="text-muted small mb-2"),
                    dbc.InputGroup(
                        [
                            dbc.Input(
                                id=IDs.Control.TERM_INPUT,
                                placeholder="e.g., emotion or [-22,-4,18]",
                                type="text",
                                debounce=True,
                            ),
                            dbc.Button("Add", id=IDs.Control.TERM_ADD_BTN, n_clicks=0, color="secondary"),
                        ],
                        size="sm",
                    ),
                ]
            ),
        ],
        className="h-100 lotus-card",
    )


def build_query_builder() -> html.Div:
    operators = [
        dbc.Button(
            token,
            id=pattern_id(IDs.Pattern.QUERY_OPERATOR, token),
            n_clicks=0,
            color="secondary",
            outline=True,
            size="sm",
            className="me-1",
        )
        for token in OPERATOR_TOKENS
    ]

    return html.Div(
        [
            html.Div(
                [
                    dcc.Input(
                        id=IDs.Control.QUERY_INPUT,
                        type="text",
                        value="",
                        debounce=True,
                        placeholder="e.g., emotion AND (memory OR attention) NOT [-22,-4,18]",
                        className="form-control form-control-sm lotus-query__input",
                    ),
                    html.Span(id=IDs.Control.QUERY_STATUS, className="badge bg-success ms-2"),
                ],
                className="d-flex align-items-center",
            ),
            html.Div(
                operators + [
                    dbc.Button(
                        "Reset",
                        id=IDs.Control.QUERY_RESET_BTN,
                        n_clicks=0,
                        color="danger",
                        outline=True,
                        size="sm",
                    ),
                ],
                className="d-flex mt-2",
            ),
        ],
        className="lotus-query",
    )


def build_saved_toolbar() -> html.Div:
    return html.Div(
        [
            html.Div(id=IDs.Control.SAVED_STATUS, className="text-muted small"),
            html.Div(
                [
                    dbc.Button(
                        "📥 Export JSON",
                        id=IDs.Control.SAVED_EXPORT_BTN,
                        n_clicks=0,
                        color="primary",
                        size="sm",
                        className="me-2",
                    ),
                    dbc.Button(
                        "🗑️ Clear All",
                        id=IDs.Control.SAVED_CLEAR_BTN,
                        n_clicks=0,
                        color="danger",
                        outline=True,
                        size="sm",
                    ),
                    dcc.Download(id=IDs.Control.SAVED_DOWNLOAD),
                    dcc.ConfirmDialog(id=IDs.Control.SAVED_CLEAR_CONFIRM, message="Remove all saved studies?"),
                    dcc.ConfirmDialog(id=IDs.Control.SAVED_REMOVE_CONFIRM, message="Remove this study from saved?"),
                ],
                className="d-flex",
            ),
        ],
        className="d-flex justify-content-between align-items-center mb-2",
    )


def build_query_pane() -> dbc.Card:
    return dbc.Card(
        [
            _card_header("🔍", "Query Builder"),
            dbc.CardBody(
                [
                    build_query_builder(),
                    html.Hr(),
                    dcc.Tabs(
                        id=IDs.Control.STUDIES_TABS,
                        value="studies",
                        children=[
                            dcc.Tab(
                                label="📊 Search Results",
                                value="studies",
                                children=[
                                    dcc.Loading(
                                        html.Div(id=IDs.Control.RESULTS_BODY, className="mt-2"),
                                        type="default",
                                    ),
                                ],
                            ),
                            dcc.Tab(
                                label="⭐ Saved Studies",
                                value="saved",
                                children=[
                                    html.Div(
                                        [
                                            build_saved_toolbar(),
                                            html.Div(id=IDs.Control.SAVED_BODY),
                                        ],
                                        className="mt-2",
                                    ),
                                ],
                            ),
                        ],
                    ),
                ]
            ),
        ],
        className="h-100 lotus-card",
    )


def build_viewer_pane() -> dbc.Card:
    return dbc.Card(
        [
            _card_header("🧠", "Brain Viewer"),
            dbc.CardBody(
                [
                    html.Div(id=IDs.Control.VIEWER_CAPTION, className="lotus-viewer__canvas"),
                    dbc.Button(
                        "🔍 Expand Brain Viewer",
                        id=IDs.Control.VIEWER_EXPAND_BTN,
                        n_clicks=0,
                        color="secondary",
                        size="sm",
                        className="mt-2",
                    ),
                ]
            ),
        ],
        className="h-100 lotus-card",
    )


def build_expanded_viewer() -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.Strong("🧠 Brain Viewer - Expanded Mode"),
                    dbc.Button(
                        "✕ Exit Expanded Mode",
                        id=IDs.Control.VIEWER_COLLAPSE_BTN,
                        n_clicks=0,
                        color="secondary",
                        outline=True,
                        size="sm",
                    ),
                ],
                className="d-flex justify-content-between align-items-center mb-2",
            ),
            html.Div(id=IDs.Control.VIEWER_EXPANDED_CAPTION, className="lotus-viewer__canvas lotus-viewer__canvas--expanded"),
        ],
        id=IDs.Control.VIEWER_EXPANDED_PANEL,
        className="lotus-viewer--expanded mt-3",
        style={"display": "none"},
    )


def _resizer(component_id: str, divider: int, label: str) -> html.Div:
    # assets/resizer.js picks these up by class and reads data-divider
    return html.Div(
        html.Div(className="lotus-resizer__handle"),
        id=component_id,
        className="lotus-resizer",
        **{"data-divider": str(divider), "aria-label": label},
    )


def build_pane_grid(sizes: Sequence[float]) -> html.Div:
    styles = pane_styles(sizes)
    return html.Div(
        [
            html.Section(build_terms_pane(), id=IDs.Control.PANE_TERMS, className="lotus-pane", style=styles[0]),
            _resizer(IDs.Control.RESIZER_LEFT, 0, "Resize left/middle"),
            html.Section(build_query_pane(), id=IDs.Control.PANE_QUERY, className="lotus-pane", style=styles[1]),
            _resizer(IDs.Control.RESIZER_RIGHT, 1, "Resize middle/right"),
            html.Section(build_viewer_pane(), id=IDs.Control.PANE_VIEWER, className="lotus-pane", style=styles[2]),
        ],
        id=IDs.Control.PANE_GRID,
        className="lotus-grid mt-3",
    )
