"""Client for the property classifieds REST API."""

from listings.schemas.property import Property, PropertyWrite
from listings.schemas.search import PaginationInfo, PropertyListResponse, SearchFilters
from listings.services.favorites import FavoritesController, JsonFileStore, MemoryStore
from listings.services.featured import CancellationToken, fetch_featured_properties
from listings.services.listing_controller import ListingController
from listings.services.property_service import PropertyService
from listings.services.query import build_listing_params, build_listing_query

__all__ = [
    "CancellationToken",
    "FavoritesController",
    "JsonFileStore",
    "ListingController",
    "MemoryStore",
    "PaginationInfo",
    "Property",
    "PropertyListResponse",
    "PropertyService",
    "PropertyWrite",
    "SearchFilters",
    "build_listing_params",
    "build_listing_query",
    "fetch_featured_properties",
]
