"""
Top-level package for the LoTUS-BF study browser.

Most code should import from submodules such as:
    lotus_browser.core      (layout engine, sorting, pagination)
    lotus_browser.services  (saved-study store, study fetch, mock auth)
    lotus_browser.ui        (Dash layout + callbacks)
"""

__all__: list[str] = []
