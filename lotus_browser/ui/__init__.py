"""
Dash adapter: layout builders and callback registration. Callbacks stay
thin and delegate to lotus_browser.core and lotus_browser.services.
"""
