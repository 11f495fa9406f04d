from typing import Optional

class LotusBrowserError(Exception):
    """Base exception for all lotus_browser errors"""
    pass

class ConfigError(LotusBrowserError):
    """Invalid or inconsistent global.json"""
    pass

class FetchError(LotusBrowserError):
    """
    Study query could not be answered: network failure, non-2xx status
    or a payload that is not JSON
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

class QueryCancelled(LotusBrowserError):
    """A newer query from the same client replaced this one mid-flight"""
    pass
