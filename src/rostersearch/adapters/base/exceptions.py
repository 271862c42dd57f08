"""Index service exceptions.

Every failure of a round trip to the index surfaces as exactly one
``SearchServiceError`` subclass.
"""


class SearchServiceError(Exception):
    """Base exception for index service errors."""


class ConnectionError(SearchServiceError):
    """Raised when the adapter cannot reach the index backend."""


class QueryError(SearchServiceError):
    """Raised when the index rejects a query or returns an unreadable response."""


class IndexingError(SearchServiceError):
    """Raised when the index rejects a document write or delete."""


class DocumentNotFoundError(SearchServiceError):
    """Raised when a requested document does not exist."""


class ConfigurationError(SearchServiceError):
    """Raised when adapter or manager configuration is invalid."""
