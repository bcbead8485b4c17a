"""
Domain-specific exceptions.

Custom exceptions for catalog validation and resolution failures.
"""
from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize domain error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class DomainValidationError(DomainError):
    """Exception raised when domain validation fails."""
    pass


class CatalogUnavailableError(DomainError):
    """Exception raised when the catalog trees cannot be fetched or indexed."""

    def __init__(self, resource: str, reason: str) -> None:
        """
        Initialize catalog unavailable error.

        Args:
            resource: Catalog resource that failed (categories, locations).
            reason: The reason for the failure.
        """
        super().__init__(f"Catalog resource '{resource}' unavailable: {reason}")
        self.resource = resource
        self.reason = reason


class LocationSearchError(DomainError):
    """Exception raised when the remote fuzzy location search fails."""

    def __init__(self, query: str, reason: str) -> None:
        super().__init__(f"Location search for '{query}' failed: {reason}")
        self.query = query
        self.reason = reason


class ListingServiceError(DomainError):
    """Exception raised when the listing query service fails."""

    def __init__(self, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Listing service error: {reason}")
        self.reason = reason
        self.status_code = status_code
