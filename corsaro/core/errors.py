"""
Provider Errors
Failure taxonomy shared by the fetcher, the table parser and on-demand resolution
"""


class ProviderError(Exception):
    pass


class TransportFailure(ProviderError):
    """Non-success HTTP status or network-level error."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Request to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class ParseFailure(ProviderError):
    """Expected HTML structure was not found."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ResolutionFailure(ProviderError):
    """A magnet link could not be resolved for a torrent."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Could not resolve magnet link from {url}: {reason}")
        self.url = url
        self.reason = reason
