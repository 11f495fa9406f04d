from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State, exceptions, no_update

from lotus_browser.core.query import append_token, query_from_search, search_from_query
from lotus_browser.ui.callbacks.callbacks_utils import triggered_pattern
from lotus_browser.ui.ids import IDs

if TYPE_CHECKING:
    from lotus_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_query_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Query text: URL <-> input box <-> query store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.QUERY, "data"),
        Output(IDs.Control.QUERY_INPUT, "value"),
        Output(IDs.Control.URL, "search"),
        Output(IDs.Control.QUERY_STATUS, "children"),
        Output(IDs.Control.TERM_INPUT, "value"),
        Input(IDs.Control.URL, "search"),
        Input(IDs.Control.QUERY_INPUT, "value"),
        Input({"type": IDs.Pattern.QUERY_OPERATOR, "index": ALL}, "n_clicks"),
        Input(IDs.Control.QUERY_RESET_BTN, "n_clicks"),
        Input(IDs.Control.TERM_ADD_BTN, "n_clicks"),
        Input(IDs.Control.TERM_INPUT, "n_submit"),
        State(IDs.Control.TERM_INPUT, "value"),
        State(IDs.Store.QUERY, "data"),
    )
    def sync_query(search, input_value, _ops, _reset, _add, _submit, term, current):
        """
        Single owner of the query string. The URL is the source on page load;
        afterwards edits, operator buttons, term picks and Reset all land here.
        """
        triggered = dash.ctx.triggered_id
        current = current or ""
        term_out = no_update

        if triggered is None or triggered == IDs.Control.URL:
            query = query_from_search(search)
        elif triggered == IDs.Control.QUERY_INPUT:
            query = (input_value or "").strip()
        elif triggered == IDs.Control.QUERY_RESET_BTN:
            if not _reset:
                raise exceptions.PreventUpdate
            query = ""
        elif triggered in (IDs.Control.TERM_ADD_BTN, IDs.Control.TERM_INPUT):
            term = (term or "").strip()
            if not term:
                raise exceptions.PreventUpdate
            query = append_token(current, term)
            term_out = ""
        else:
            token = triggered_pattern(IDs.Pattern.QUERY_OPERATOR)
            if token is None:
                raise exceptions.PreventUpdate
            query = append_token(current, token)

        logger.debug("Query updated", extra={"query": query})
        status = "Active" if query else None
        return query, query, search_from_query(query), status, term_out
