from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

import dash
import dash_bootstrap_components as dbc
from dash import ALL, Input, Output, State, exceptions, html

from lotus_browser.core.records import identity_token
from lotus_browser.core.table_state import TableState
from lotus_browser.services.study_service import StudyResult
from lotus_browser.ui.callbacks.callbacks_utils import next_revision, triggered_pattern
from lotus_browser.ui.ids import IDs
from lotus_browser.ui.layout.build_layout import initial_results_state
from lotus_browser.ui.layout.build_study_tables import (
    build_results_view,
    empty_placeholder,
    target_page,
)

if TYPE_CHECKING:
    from lotus_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_results_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    defaults = initial_results_state(ctx).to_dict()

    # ---------------------------------------------------------
    # 1. Per-tab client id (keys superseded-query tracking)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.CLIENT_ID, "data"),
        Input(IDs.Control.URL, "pathname"),
        State(IDs.Store.CLIENT_ID, "data"),
    )
    def ensure_client_id(_pathname, client_id):
        if client_id:
            raise exceptions.PreventUpdate
        return uuid.uuid4().hex

    # ---------------------------------------------------------
    # 2. Fetch studies for the current query
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.STUDY_RESULTS, "data"),
        Input(IDs.Store.QUERY, "data"),
        State(IDs.Store.CLIENT_ID, "data"),
    )
    def fetch_studies(query, client_id):
        if not query:
            return None

        result = ctx.study_service.fetch(client_id or "anonymous", query)
        if result is None:
            # A newer query from this tab is in flight; its result wins
            raise exceptions.PreventUpdate
        return result.to_dict()

    # ---------------------------------------------------------
    # 3. Sort / page state
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.RESULTS_TABLE, "data"),
        Input(IDs.Store.STUDY_RESULTS, "data"),
        Input({"type": IDs.Pattern.RESULTS_SORT, "index": ALL}, "n_clicks"),
        Input({"type": IDs.Pattern.RESULTS_PAGE, "index": ALL}, "n_clicks"),
        State(IDs.Store.RESULTS_TABLE, "data"),
    )
    def update_results_table(results_data, _sort_clicks, _page_clicks, table_data):
        state = TableState.from_dict(table_data, **defaults)
        result = StudyResult.from_dict(results_data)
        source = result.query if result is not None else None
        n = len(result.rows) if result is not None else 0

        sort_key = triggered_pattern(IDs.Pattern.RESULTS_SORT)
        page_action = triggered_pattern(IDs.Pattern.RESULTS_PAGE)
        if sort_key is not None:
            state = state.with_sort(sort_key)
        elif page_action is not None:
            state = state.go_to(target_page(page_action, state, n), n)

        # New query -> page 1; same query refreshed -> keep page, clamp
        state = state.sync(source, n)
        return state.to_dict()

    # ---------------------------------------------------------
    # 4. Render
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.RESULTS_BODY, "children"),
        Input(IDs.Store.QUERY, "data"),
        Input(IDs.Store.STUDY_RESULTS, "data"),
        Input(IDs.Store.RESULTS_TABLE, "data"),
        Input(IDs.Store.LOCAL_SLOTS, "data"),
        Input(IDs.Store.SAVED_REVISION, "data"),
    )
    def render_results(query, results_data, table_data, slots_data, _revision):
        if not query:
            return empty_placeholder("📚", "No Query Active", "Build a query above to see related studies")

        result = StudyResult.from_dict(results_data)
        if result is None or result.query != query:
            # Never show rows that belong to a different query
            return html.Div("Loading studies…", className="text-muted small mt-2")

        if result.error:
            return dbc.Alert(result.error, color="danger", className="mt-2")

        state = TableState.from_dict(table_data, **defaults).sync(result.query, len(result.rows))

        store, _ = ctx.open_item_store(slots_data)
        saved_tokens = {identity_token(s) for s in store.items}
        saved_flags = {identity_token(r): identity_token(r) in saved_tokens for r in result.rows}

        return build_results_view(query, result.rows, state, saved_flags)

    # ---------------------------------------------------------
    # 5. Save a study
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.LOCAL_SLOTS, "data", allow_duplicate=True),
        Output(IDs.Store.SAVED_REVISION, "data", allow_duplicate=True),
        Input({"type": IDs.Pattern.RESULTS_SAVE, "index": ALL}, "n_clicks"),
        State(IDs.Store.STUDY_RESULTS, "data"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        State(IDs.Store.SAVED_REVISION, "data"),
        prevent_initial_call=True,
    )
    def save_study(_clicks, results_data, slots_data, revision):
        index = triggered_pattern(IDs.Pattern.RESULTS_SAVE)
        result = StudyResult.from_dict(results_data)
        if index is None or result is None:
            raise exceptions.PreventUpdate

        try:
            record = result.rows[int(index)]
        except (IndexError, ValueError):
            logger.warning("Save clicked for unknown row", extra={"row": index})
            raise exceptions.PreventUpdate

        store, browser = ctx.open_item_store(slots_data)
        if not store.save(record):
            raise exceptions.PreventUpdate

        return browser.data, next_revision(revision)
