"""
Domain errors raised by the stores, the engine and the website stage.
"""


class ICPScorerError(Exception):
    """Base class for ICP Lead Scorer errors"""


class NotFoundError(ICPScorerError):
    """A business or ICP configuration does not exist"""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class DuplicateConfigError(ICPScorerError):
    """An ICP configuration with the same name already exists"""


class WebsiteFetchError(ICPScorerError):
    """The business homepage could not be downloaded"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")
