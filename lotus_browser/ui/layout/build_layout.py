from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from lotus_browser.core.pane_layout import PaneLayoutEngine
from lotus_browser.core.sorting import DESC
from lotus_browser.core.records import SAVED_AT_FIELD
from lotus_browser.core.table_state import TableState
from lotus_browser.ui.ids import IDs
from lotus_browser.ui.layout.build_navbar import build_auth_modal, build_navbar
from lotus_browser.ui.layout.build_panes import build_expanded_viewer, build_pane_grid

if TYPE_CHECKING:
    from lotus_browser.ui.config import AppConfig


def initial_results_state(ctx: AppConfig) -> TableState:
    return TableState(sort_key="year", direction=DESC, page_size=ctx.global_config.page_size)


def initial_saved_state(ctx: AppConfig) -> TableState:
    return TableState(sort_key=SAVED_AT_FIELD, direction=DESC, page_size=ctx.global_config.page_size)


def initial_pane_layout(ctx: AppConfig) -> PaneLayoutEngine:
    cfg = ctx.global_config
    return PaneLayoutEngine(cfg.default_pane_sizes, min_pixels=cfg.min_pane_px)


def build_layout(ctx: AppConfig):
    engine = initial_pane_layout(ctx)

    return dbc.Container(
        fluid=True,
        className="lotus-root",
        children=[
            dcc.Location(id=IDs.Control.URL, refresh=False),
            build_navbar(ctx.global_config),

            # Browser-side state
            dcc.Store(id=IDs.Store.LOCAL_SLOTS, storage_type="local"),
            dcc.Store(id=IDs.Store.CLIENT_ID, storage_type="session"),
            dcc.Store(id=IDs.Store.QUERY, data=""),
            dcc.Store(id=IDs.Store.STUDY_RESULTS),
            dcc.Store(id=IDs.Store.RESULTS_TABLE, data=initial_results_state(ctx).to_dict()),
            dcc.Store(id=IDs.Store.SAVED_TABLE, data=initial_saved_state(ctx).to_dict()),
            dcc.Store(id=IDs.Store.SAVED_REVISION, data=0),
            dcc.Store(id=IDs.Store.SAVED_REMOVE_PENDING),
            dcc.Store(id=IDs.Store.PANE_LAYOUT, data=engine.to_dict()),
            dcc.Store(id=IDs.Store.PANE_POINTER),
            dcc.Store(id=IDs.Store.VIEWER_EXPANDED, data=False),

            build_pane_grid(engine.sizes),
            build_expanded_viewer(),
            build_auth_modal(),

            html.Footer(
                html.Small(ctx.global_config.footer, className="text-muted"),
                className="text-center my-3",
            ),
        ],
    )
