from __future__ import annotations

from typing import Any, Dict, Optional

import dash_bootstrap_components as dbc
from dash import html

from lotus_browser.config.model import GlobalConfig
from lotus_browser.services.auth_service import display_name
from lotus_browser.ui.ids import IDs


def build_user_area(user: Optional[Dict[str, Any]]) -> html.Div:
    """Avatar + name + Logout when signed in, Sign In / Sign Up otherwise."""
    if user:
        name = display_name(user)
        return html.Div(
            [
                html.Div((name[:1] or "U").upper(), className="lotus-avatar me-2"),
                html.Span(name, className="me-3"),
                dbc.Button("Logout", id=IDs.Control.NAV_LOGOUT_BTN, n_clicks=0, size="sm", color="secondary"),
                # Keeps the sign-in id in the layout for its callback
                html.Span(id=IDs.Control.NAV_SIGNIN_BTN, n_clicks=0, style={"display": "none"}),
            ],
            className="d-flex align-items-center",
        )

    return html.Div(
        [
            dbc.Button("Sign In / Sign Up", id=IDs.Control.NAV_SIGNIN_BTN, n_clicks=0, size="sm", color="primary"),
            html.Span(id=IDs.Control.NAV_LOGOUT_BTN, n_clicks=0, style={"display": "none"}),
        ],
        className="d-flex align-items-center",
    )


def build_navbar(global_config: GlobalConfig) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.Div(
                            [
                                html.H2(global_config.ui_title, className="mb-0 me-2"),
                                html.Small(global_config.version, className="text-muted"),
                            ],
                            className="d-flex align-items-baseline",
                        ),
                        html.Small(global_config.subtitle, className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                html.Div(
                    build_user_area(None),
                    id=IDs.Control.NAV_USER_AREA,
                    className="ms-auto",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm lotus-navbar",
    )


def build_auth_modal() -> dbc.Modal:
    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle("Sign in to save studies")),
            dbc.ModalBody(
                [
                    dbc.Input(id=IDs.Control.AUTH_EMAIL, type="email", placeholder="Email", className="mb-2"),
                    dbc.Input(id=IDs.Control.AUTH_PASSWORD, type="password", placeholder="Password", className="mb-2"),
                    dbc.Input(id=IDs.Control.AUTH_NAME, type="text", placeholder="Name (sign up only)", className="mb-2"),
                    html.Div(id=IDs.Control.AUTH_ERROR, className="text-danger small"),
                ]
            ),
            dbc.ModalFooter(
                [
                    dbc.Button("Sign In", id=IDs.Control.AUTH_LOGIN_BTN, n_clicks=0, color="primary"),
                    dbc.Button("Sign Up", id=IDs.Control.AUTH_REGISTER_BTN, n_clicks=0, color="secondary", outline=True),
                ]
            ),
        ],
        id=IDs.Control.AUTH_MODAL,
        is_open=False,
    )
