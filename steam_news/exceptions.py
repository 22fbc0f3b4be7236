"""Fatal errors raised while retrieving the news feed."""


class FetchError(RuntimeError):
    """Raised when the RSS feed cannot be downloaded."""


class ParseError(RuntimeError):
    """Raised when the feed body is not a well-formed RSS document."""
