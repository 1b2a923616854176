class RSSFetchError(Exception):
    """Raised when an RSS/Atom feed cannot be fetched or parsed."""


class ConfigError(ValueError):
    """Raised when the caller supplies an invalid configuration."""
