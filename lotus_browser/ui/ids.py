from __future__ import annotations

__all__ = ["IDs", "pattern_id"]


class IDs:
    class Store:
        LOCAL_SLOTS = "local-slots"
        CLIENT_ID = "client-id"
        QUERY = "query-state"
        STUDY_RESULTS = "study-results"
        RESULTS_TABLE = "results-table-state"
        SAVED_TABLE = "saved-table-state"
        SAVED_REVISION = "saved-revision"
        SAVED_REMOVE_PENDING = "saved-remove-pending"
        PANE_LAYOUT = "pane-layout"
        PANE_POINTER = "pane-pointer"
        VIEWER_EXPANDED = "viewer-expanded"

    class Control:
        URL = "url"

        # Panes
        PANE_GRID = "pane-grid"
        PANE_TERMS = "pane-terms"
        PANE_QUERY = "pane-query"
        PANE_VIEWER = "pane-viewer"
        RESIZER_LEFT = "resizer-left"
        RESIZER_RIGHT = "resizer-right"

        # Terms + query builder
        TERM_INPUT = "term-input"
        TERM_ADD_BTN = "term-add-btn"
        QUERY_INPUT = "query-input"
        QUERY_STATUS = "query-status"
        QUERY_RESET_BTN = "query-reset-btn"

        # Tabs
        STUDIES_TABS = "studies-tabs"

        # Search results
        RESULTS_BODY = "results-body"

        # Saved studies
        SAVED_BODY = "saved-body"
        SAVED_EXPORT_BTN = "saved-export-btn"
        SAVED_CLEAR_BTN = "saved-clear-btn"
        SAVED_CLEAR_CONFIRM = "saved-clear-confirm"
        SAVED_REMOVE_CONFIRM = "saved-remove-confirm"
        SAVED_DOWNLOAD = "saved-download"
        SAVED_STATUS = "saved-status"

        # Brain viewer
        VIEWER_CAPTION = "viewer-caption"
        VIEWER_EXPAND_BTN = "viewer-expand-btn"
        VIEWER_COLLAPSE_BTN = "viewer-collapse-btn"
        VIEWER_EXPANDED_PANEL = "viewer-expanded-panel"
        VIEWER_EXPANDED_CAPTION = "viewer-expanded-caption"

        # Auth
        NAV_USER_AREA = "nav-user-area"
        NAV_SIGNIN_BTN = "nav-signin-btn"
        NAV_LOGOUT_BTN = "nav-logout-btn"
        AUTH_MODAL = "auth-modal"
        AUTH_EMAIL = "auth-email"
        AUTH_PASSWORD = "auth-password"
        AUTH_NAME = "auth-name"
        AUTH_LOGIN_BTN = "auth-login-btn"
        AUTH_REGISTER_BTN = "auth-register-btn"
        AUTH_ERROR = "auth-error"

    class Pattern:
        # pattern-matching "type" strings
        QUERY_OPERATOR = "query-operator"
        RESULTS_SORT = "results-sort"
        RESULTS_PAGE = "results-page"
        RESULTS_SAVE = "results-save"
        SAVED_SORT = "saved-sort"
        SAVED_PAGE = "saved-page"
        SAVED_REMOVE = "saved-remove"


def pattern_id(kind: str, index: str) -> dict:
    return {"type": kind, "index": index}
