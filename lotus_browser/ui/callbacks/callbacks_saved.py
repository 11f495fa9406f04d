from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State, dcc, exceptions

from lotus_browser.core.records import identity_from_token
from lotus_browser.core.table_state import TableState
from lotus_browser.services.item_store import SAVED_STUDIES_SLOT
from lotus_browser.ui.callbacks.callbacks_utils import next_revision, triggered_pattern
from lotus_browser.ui.ids import IDs
from lotus_browser.ui.layout.build_layout import initial_saved_state
from lotus_browser.ui.layout.build_study_tables import (
    build_saved_view,
    count_label,
    remove_confirm_message,
    target_page,
)

if TYPE_CHECKING:
    from lotus_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_saved_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    defaults = initial_saved_state(ctx).to_dict()

    # ---------------------------------------------------------
    # 1. Sort / page state (re-clamped whenever the store changes)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SAVED_TABLE, "data"),
        Input({"type": IDs.Pattern.SAVED_SORT, "index": ALL}, "n_clicks"),
        Input({"type": IDs.Pattern.SAVED_PAGE, "index": ALL}, "n_clicks"),
        Input(IDs.Store.LOCAL_SLOTS, "data"),
        Input(IDs.Store.SAVED_REVISION, "data"),
        State(IDs.Store.SAVED_TABLE, "data"),
    )
    def update_saved_table(_sort_clicks, _page_clicks, slots_data, _revision, table_data):
        state = TableState.from_dict(table_data, **defaults)
        store, _ = ctx.open_item_store(slots_data)
        n = len(store)

        sort_key = triggered_pattern(IDs.Pattern.SAVED_SORT)
        page_action = triggered_pattern(IDs.Pattern.SAVED_PAGE)
        if sort_key is not None:
            state = state.with_sort(sort_key)
        elif page_action is not None:
            state = state.go_to(target_page(page_action, state, n), n)

        return state.sync(SAVED_STUDIES_SLOT, n).to_dict()

    # ---------------------------------------------------------
    # 2. Render
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.SAVED_BODY, "children"),
        Output(IDs.Control.SAVED_STATUS, "children"),
        Output(IDs.Control.SAVED_EXPORT_BTN, "disabled"),
        Output(IDs.Control.SAVED_CLEAR_BTN, "disabled"),
        Output(IDs.Control.SAVED_CLEAR_CONFIRM, "message"),
        Input(IDs.Store.SAVED_TABLE, "data"),
        Input(IDs.Store.LOCAL_SLOTS, "data"),
        Input(IDs.Store.SAVED_REVISION, "data"),
    )
    def render_saved(table_data, slots_data, _revision):
        store, _ = ctx.open_item_store(slots_data)
        items = store.items
        state = TableState.from_dict(table_data, **defaults).sync(SAVED_STUDIES_SLOT, len(items))

        n = len(items)
        status = count_label(n, "saved") if n else None
        confirm = f"Remove all {n} saved {'study' if n == 1 else 'studies'}?"
        return build_saved_view(items, state), status, n == 0, n == 0, confirm

    # ---------------------------------------------------------
    # 3. Remove one study (confirmed)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SAVED_REMOVE_PENDING, "data"),
        Output(IDs.Control.SAVED_REMOVE_CONFIRM, "message"),
        Output(IDs.Control.SAVED_REMOVE_CONFIRM, "displayed"),
        Input({"type": IDs.Pattern.SAVED_REMOVE, "index": ALL}, "n_clicks"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        prevent_initial_call=True,
    )
    def ask_remove(_clicks, slots_data):
        token = triggered_pattern(IDs.Pattern.SAVED_REMOVE)
        if token is None:
            raise exceptions.PreventUpdate

        store, _ = ctx.open_item_store(slots_data)
        try:
            index = store.index_of(identity_from_token(token))
        except (TypeError, ValueError):
            logger.warning("Malformed remove token", extra={"token": token})
            raise exceptions.PreventUpdate
        if index is None:
            raise exceptions.PreventUpdate

        return token, remove_confirm_message(store.items[index]), True

    @app.callback(
        Output(IDs.Store.LOCAL_SLOTS, "data", allow_duplicate=True),
        Output(IDs.Store.SAVED_REVISION, "data", allow_duplicate=True),
        Output(IDs.Store.SAVED_REMOVE_PENDING, "data", allow_duplicate=True),
        Input(IDs.Control.SAVED_REMOVE_CONFIRM, "submit_n_clicks"),
        State(IDs.Store.SAVED_REMOVE_PENDING, "data"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        State(IDs.Store.SAVED_REVISION, "data"),
        prevent_initial_call=True,
    )
    def remove_study(submit_n_clicks, token, slots_data, revision):
        if not submit_n_clicks or not token:
            raise exceptions.PreventUpdate

        store, browser = ctx.open_item_store(slots_data)

        # The row shows a sorted page; the key finds the study's real index
        try:
            key = identity_from_token(token)
        except (TypeError, ValueError):
            logger.warning("Malformed remove token", extra={"token": token})
            raise exceptions.PreventUpdate

        if not store.remove_key(key):
            raise exceptions.PreventUpdate

        return browser.data, next_revision(revision), None

    # ---------------------------------------------------------
    # 4. Clear all (confirmed)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.SAVED_CLEAR_CONFIRM, "displayed"),
        Input(IDs.Control.SAVED_CLEAR_BTN, "n_clicks"),
        prevent_initial_call=True,
    )
    def ask_clear_all(n_clicks):
        if not n_clicks:
            raise exceptions.PreventUpdate
        return True

    @app.callback(
        Output(IDs.Store.LOCAL_SLOTS, "data", allow_duplicate=True),
        Output(IDs.Store.SAVED_REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.SAVED_CLEAR_CONFIRM, "submit_n_clicks"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        State(IDs.Store.SAVED_REVISION, "data"),
        prevent_initial_call=True,
    )
    def clear_all(submit_n_clicks, slots_data, revision):
        if not submit_n_clicks:
            raise exceptions.PreventUpdate

        store, browser = ctx.open_item_store(slots_data)
        if not store.clear_all():
            raise exceptions.PreventUpdate
        return browser.data, next_revision(revision)

    # ---------------------------------------------------------
    # 5. Export
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.SAVED_DOWNLOAD, "data"),
        Input(IDs.Control.SAVED_EXPORT_BTN, "n_clicks"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        prevent_initial_call=True,
    )
    def export_saved(n_clicks, slots_data):
        if not n_clicks:
            raise exceptions.PreventUpdate

        store, _ = ctx.open_item_store(slots_data)
        artifact = store.export_all()
        return dcc.send_string(artifact.content, artifact.filename, type=artifact.mime_type)
