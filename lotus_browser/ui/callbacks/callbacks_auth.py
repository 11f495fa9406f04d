from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, exceptions, no_update

from lotus_browser.ui.ids import IDs
from lotus_browser.ui.layout.build_navbar import build_user_area

if TYPE_CHECKING:
    from lotus_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

SAVED_TAB = "saved"
STUDIES_TAB = "studies"


def register_auth_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Navbar user area
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.NAV_USER_AREA, "children"),
        Input(IDs.Store.LOCAL_SLOTS, "data"),
    )
    def render_user_area(slots_data):
        auth, _ = ctx.open_auth(slots_data)
        return build_user_area(auth.current_user())

    # ---------------------------------------------------------
    # Saved tab requires a user; otherwise open the sign-in modal
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STUDIES_TABS, "value"),
        Output(IDs.Control.AUTH_MODAL, "is_open"),
        Input(IDs.Control.STUDIES_TABS, "value"),
        Input(IDs.Control.NAV_SIGNIN_BTN, "n_clicks"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        prevent_initial_call=True,
    )
    def gate_saved_tab(tab, signin_clicks, slots_data):
        if dash.ctx.triggered_id == IDs.Control.NAV_SIGNIN_BTN:
            if not signin_clicks:
                raise exceptions.PreventUpdate
            return no_update, True

        if tab != SAVED_TAB:
            raise exceptions.PreventUpdate

        auth, _ = ctx.open_auth(slots_data)
        if auth.is_authenticated():
            raise exceptions.PreventUpdate
        return STUDIES_TAB, True

    # ---------------------------------------------------------
    # Sign in / sign up
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.LOCAL_SLOTS, "data", allow_duplicate=True),
        Output(IDs.Control.AUTH_MODAL, "is_open", allow_duplicate=True),
        Output(IDs.Control.AUTH_ERROR, "children"),
        Input(IDs.Control.AUTH_LOGIN_BTN, "n_clicks"),
        Input(IDs.Control.AUTH_REGISTER_BTN, "n_clicks"),
        State(IDs.Control.AUTH_EMAIL, "value"),
        State(IDs.Control.AUTH_PASSWORD, "value"),
        State(IDs.Control.AUTH_NAME, "value"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        prevent_initial_call=True,
    )
    def sign_in(login_clicks, register_clicks, email, password, name, slots_data):
        triggered = dash.ctx.triggered_id
        if not (login_clicks or register_clicks):
            raise exceptions.PreventUpdate

        auth, browser = ctx.open_auth(slots_data)
        if triggered == IDs.Control.AUTH_REGISTER_BTN:
            result = auth.register(email, password, name)
        else:
            result = auth.login(email, password)

        if not result.success:
            return no_update, True, result.error
        return browser.data, False, None

    @app.callback(
        Output(IDs.Store.LOCAL_SLOTS, "data", allow_duplicate=True),
        Output(IDs.Control.STUDIES_TABS, "value", allow_duplicate=True),
        Input(IDs.Control.NAV_LOGOUT_BTN, "n_clicks"),
        State(IDs.Store.LOCAL_SLOTS, "data"),
        prevent_initial_call=True,
    )
    def sign_out(n_clicks, slots_data):
        if not n_clicks:
            raise exceptions.PreventUpdate

        auth, browser = ctx.open_auth(slots_data)
        auth.logout()
        return browser.data, STUDIES_TAB
