from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from lotus_browser.config.loader import load_global_config
from lotus_browser.config.model import STORAGE_FILE
from lotus_browser.services.storage import LocalFileSlotStorage
from lotus_browser.services.study_service import StudyClient, StudyService
from lotus_browser.ui.layout.build_layout import build_layout
from lotus_browser.ui.callbacks.callbacks_auth import register_auth_callbacks
from lotus_browser.ui.callbacks.callbacks_layout import register_layout_callbacks
from lotus_browser.ui.callbacks.callbacks_query import register_query_callbacks
from lotus_browser.ui.callbacks.callbacks_results import register_results_callbacks
from lotus_browser.ui.callbacks.callbacks_saved import register_saved_callbacks

logger = logging.getLogger(__name__)


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config = load_global_config(config_root)

    # 2) Services
    client = StudyClient(global_config.api_base, timeout=global_config.request_timeout)
    study_service = StudyService(client)

    file_storage = None
    if global_config.storage_backend == STORAGE_FILE:
        # LocalFileSlotStorage creates the directory if needed
        file_storage = LocalFileSlotStorage(global_config.storage_root)

    # 3) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        study_service=study_service,
        file_storage=file_storage,
    )
    ctx.validate()

    logger.info(
        "Starting study browser",
        extra={
            "api_base": global_config.api_base,
            "storage_backend": global_config.storage_backend,
        },
    )

    # Explicit assets path so styles.css / resizer.js are found regardless
    # of the working directory.
    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = global_config.ui_title

    app.layout = build_layout(ctx)

    # Register callbacks
    register_query_callbacks(app, ctx)
    register_results_callbacks(app, ctx)
    register_saved_callbacks(app, ctx)
    register_auth_callbacks(app, ctx)
    register_layout_callbacks(app, ctx)

    return app
