"""
HTTP clients for catalog and listing collaborators.
"""
from .catalog_client import CatalogClient, parse_categories, parse_locations
from .listing_client import ListingClient

__all__ = [
    "CatalogClient",
    "ListingClient",
    "parse_categories",
    "parse_locations",
]
