from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, exceptions

from lotus_browser.core.pane_layout import PaneLayoutEngine
from lotus_browser.ui.ids import IDs
from lotus_browser.ui.layout.build_panes import pane_styles, resizer_style

if TYPE_CHECKING:
    from lotus_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_layout_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    cfg = ctx.global_config

    # ---------------------------------------------------------
    # Pointer events from assets/resizer.js -> pane sizes
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.PANE_LAYOUT, "data"),
        Output(IDs.Control.PANE_TERMS, "style"),
        Output(IDs.Control.PANE_QUERY, "style"),
        Output(IDs.Control.PANE_VIEWER, "style"),
        Output(IDs.Control.RESIZER_LEFT, "style"),
        Output(IDs.Control.RESIZER_RIGHT, "style"),
        Output(IDs.Control.VIEWER_EXPANDED_PANEL, "style"),
        Input(IDs.Store.PANE_POINTER, "data"),
        Input(IDs.Store.VIEWER_EXPANDED, "data"),
        State(IDs.Store.PANE_LAYOUT, "data"),
    )
    def apply_pointer_event(event, expanded, layout_data):
        engine = PaneLayoutEngine.from_dict(
            layout_data,
            default_sizes=cfg.default_pane_sizes,
            min_pixels=cfg.min_pane_px,
        )
        expanded = bool(expanded)

        if expanded:
            # Resizers are unmounted in expanded mode; drop any open drag
            engine.close()
        elif dash.ctx.triggered_id == IDs.Store.PANE_POINTER:
            engine.handle_pointer_event(event)

        terms, query, viewer = pane_styles(engine.sizes, expanded)
        resizer = resizer_style(expanded)
        panel = {} if expanded else {"display": "none"}
        return engine.to_dict(), terms, query, viewer, resizer, resizer, panel

    # ---------------------------------------------------------
    # Expanded brain viewer
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.VIEWER_EXPANDED, "data"),
        Input(IDs.Control.VIEWER_EXPAND_BTN, "n_clicks"),
        Input(IDs.Control.VIEWER_COLLAPSE_BTN, "n_clicks"),
        prevent_initial_call=True,
    )
    def toggle_viewer(expand_clicks, collapse_clicks):
        triggered = dash.ctx.triggered_id
        if triggered == IDs.Control.VIEWER_EXPAND_BTN and expand_clicks:
            return True
        if triggered == IDs.Control.VIEWER_COLLAPSE_BTN and collapse_clicks:
            return False
        raise exceptions.PreventUpdate

    @app.callback(
        Output(IDs.Control.VIEWER_CAPTION, "children"),
        Output(IDs.Control.VIEWER_EXPANDED_CAPTION, "children"),
        Input(IDs.Store.QUERY, "data"),
    )
    def update_viewer_caption(query):
        # The volume renderer is an external widget; this pane only names
        # the map it would show.
        caption = f"Activation map for: {query}" if query else "Build a query to load an activation map"
        return caption, caption
