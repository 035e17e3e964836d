"""Tests for property, filter and pagination schemas."""

from typing import Any

import pytest
from pydantic import ValidationError

from listings.core.config import settings
from listings.models.enums import AddressVisibility, Availability, PropertyCategory, UserType
from listings.schemas.property import Property, PropertyWrite, ResolvedOwner, UnresolvedOwner
from listings.schemas.search import PaginationInfo, PropertyListResponse, SearchFilters
from tests.fake_backend import make_property


class TestProperty:
    """Tests for the property read model."""

    def test_parses_backend_document(self) -> None:
        """Test camelCase wire fields land on snake_case attributes."""
        prop = Property.model_validate(make_property(7))
        assert prop.living_rooms == 1
        assert prop.useful_area == 90.5
        assert prop.category == PropertyCategory.HOUSE
        assert prop.availability == Availability.FOR_SALE
        assert prop.address.city == "Campinas"
        assert prop.address_visibility == AddressVisibility.STREET_NEIGHBORHOOD

    def test_id_falls_back_to_db_id(self) -> None:
        """Test a record with only _id gets it aliased to id."""
        prop = Property.model_validate(make_property(1))
        assert prop.id == "db0001"
        assert prop.db_id == "db0001"

    def test_explicit_id_wins(self) -> None:
        """Test an explicit id is kept when both are present."""
        prop = Property.model_validate(make_property(1, id="abc"))
        assert prop.id == "abc"
        assert prop.db_id == "db0001"

    def test_route_key_prefers_reference(self) -> None:
        """Test routing prefers reference, then id, then _id."""
        assert Property.model_validate(make_property(1, id="abc")).route_key == "REF0001"
        assert Property.model_validate(make_property(1, id="abc", reference=None)).route_key == "abc"
        assert Property.model_validate(make_property(1, reference="")).route_key == "db0001"

    @pytest.mark.parametrize("photos", [None, []])
    def test_missing_photos_get_fallback(self, photos: list[str] | None) -> None:
        """Test empty or null photos become the fallback image."""
        prop = Property.model_validate(make_property(1, photos=photos))
        assert prop.photos == [settings.FALLBACK_PHOTO_URL]
        assert prop.cover_photo == settings.FALLBACK_PHOTO_URL

    def test_absent_photos_get_fallback(self) -> None:
        """Test a record without a photos key still has a cover image."""
        data = make_property(1)
        del data["photos"]
        assert Property.model_validate(data).photos == [settings.FALLBACK_PHOTO_URL]

    def test_owner_as_bare_id(self) -> None:
        """Test a string owner becomes an unresolved owner."""
        prop = Property.model_validate(make_property(1, ownerId="user42"))
        assert isinstance(prop.owner, UnresolvedOwner)
        assert prop.owner.kind == "unresolved"
        assert prop.owner_id == "user42"

    def test_owner_as_embedded_summary(self) -> None:
        """Test an embedded owner object becomes a resolved owner."""
        owner = {
            "_id": "user42",
            "name": "Ana Souza",
            "email": "ana@example.com",
            "phone": "19999990000",
            "userType": "corretoria",
            "creci": "12345-F",
        }
        prop = Property.model_validate(make_property(1, ownerId=owner))
        assert isinstance(prop.owner, ResolvedOwner)
        assert prop.owner.name == "Ana Souza"
        assert prop.owner.user_type == UserType.AGENCY
        assert prop.owner_id == "user42"

    def test_owner_serializes_as_id(self) -> None:
        """Test the owner goes back on the wire as an identifier."""
        prop = Property.model_validate(make_property(1, ownerId={"_id": "user42", "name": "Ana"}))
        assert prop.model_dump(by_alias=True)["ownerId"] == "user42"

    def test_missing_owner(self) -> None:
        """Test an empty owner is None."""
        prop = Property.model_validate(make_property(1, ownerId=""))
        assert prop.owner is None
        assert prop.owner_id is None

    def test_legacy_no_address_visibility(self) -> None:
        """Test the legacy no_address value reads as hidden."""
        prop = Property.model_validate(make_property(1, addressVisibility="no_address"))
        assert prop.address_visibility == AddressVisibility.HIDDEN

    def test_numeric_strings_are_coerced(self) -> None:
        """Test numeric address numbers are accepted as strings."""
        data = make_property(1)
        data["address"]["number"] = 250
        assert Property.model_validate(data).address.number == "250"

    def test_negative_price_rejected(self) -> None:
        """Test prices must be non-negative."""
        with pytest.raises(ValidationError):
            Property.model_validate(make_property(1, price=-1))

    def test_unknown_category_rejected(self) -> None:
        """Test categories are enumerated."""
        with pytest.raises(ValidationError):
            Property.model_validate(make_property(1, category="castle"))

    def test_unknown_fields_are_kept(self) -> None:
        """Test extra wire fields survive validation."""
        prop = Property.model_validate(make_property(1, iptu=1200))
        assert prop.model_extra == {"iptu": 1200}


class TestPropertyWrite:
    """Tests for the edit write model."""

    def _server_fields_removed(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in data.items() if k not in {"_id", "id", "createdAt", "updatedAt"}}

    def test_round_trip_preserves_every_field(self) -> None:
        """Test read -> write -> payload keeps every non-server field."""
        data = make_property(
            3,
            condominiumPrice=450,
            solarPosition="morning",
            videoLink="https://youtu.be/x",
            generalFeatures=["pool", "garden"],
            telefoneContato="1933334444",
            internalNotes="keys with the doorman",
            iptu=1200,
            updatedAt="2025-02-01T00:00:00Z",
        )
        payload = PropertyWrite.from_property(Property.model_validate(data)).to_payload()
        assert payload == self._server_fields_removed(data)

    def test_apply_changes_only_given_fields(self) -> None:
        """Test applying changes leaves every other field untouched."""
        data = make_property(3, iptu=1200)
        staged = PropertyWrite.from_property(Property.model_validate(data))

        payload = staged.apply({"price": 310000, "isFeatured": True}).to_payload()

        expected = self._server_fields_removed(data)
        expected["price"] = 310000
        expected["isFeatured"] = True
        assert payload == expected

    def test_apply_accepts_attribute_names(self) -> None:
        """Test changes can use snake_case attribute names."""
        staged = PropertyWrite.from_property(Property.model_validate(make_property(3)))
        payload = staged.apply({"living_rooms": 2}).to_payload()
        assert payload["livingRooms"] == 2
        assert "living_rooms" not in payload

    def test_resolved_owner_is_sent_as_id(self) -> None:
        """Test an embedded owner is written back as its identifier."""
        data = make_property(3, ownerId={"_id": "user42", "name": "Ana"})
        payload = PropertyWrite.from_property(Property.model_validate(data)).to_payload()
        assert payload["ownerId"] == "user42"


class TestSearchFilters:
    """Tests for SearchFilters."""

    def test_items_in_input_order(self) -> None:
        """Test items follow keyword order, using wire names."""
        filters = SearchFilters(max_price=1, location="x", category="house")
        assert [k for k, _ in filters.items()] == ["maxPrice", "location", "category"]

    def test_numeric_location_is_accepted(self) -> None:
        """Test filter values are not narrowed to a single type."""
        filters = SearchFilters(location=123)
        assert list(filters.items()) == [("location", 123)]

    def test_field_order_not_serialized(self) -> None:
        """Test the recorded order is not part of the dump."""
        filters = SearchFilters(location="x")
        assert "field_order" not in filters.model_dump()


class TestPaginationInfo:
    """Tests for PaginationInfo."""

    def test_flags_derived_when_missing(self) -> None:
        """Test next/prev flags are derived from the page counters."""
        info = PaginationInfo.model_validate({"currentPage": 2, "totalPages": 3, "totalItems": 30})
        assert info.has_next_page is True
        assert info.has_prev_page is True

    @pytest.mark.parametrize(
        ("current", "total", "has_next", "has_prev"),
        [
            (1, 3, True, False),
            (3, 3, False, True),
            (1, 1, False, False),
            (1, 0, False, False),
        ],
    )
    def test_boundaries(self, current: int, total: int, has_next: bool, has_prev: bool) -> None:
        """Test flags at the first and last page."""
        info = PaginationInfo.model_validate(
            {"currentPage": current, "totalPages": total, "totalItems": total * 10}
        )
        assert info.has_next_page is has_next
        assert info.has_prev_page is has_prev

    def test_backend_flags_are_kept(self) -> None:
        """Test explicit flags from the backend are not recomputed."""
        info = PaginationInfo.model_validate(
            {
                "currentPage": 1,
                "totalPages": 0,
                "totalItems": 0,
                "hasNextPage": False,
                "hasPrevPage": False,
            }
        )
        assert info.total_pages == 0
        assert info.has_next_page is False

    def test_compute(self) -> None:
        """Test computing metadata from a collection size."""
        info = PaginationInfo.compute(current_page=2, total_items=25, page_size=12)
        assert info.total_pages == 3
        assert info.has_next_page is True
        assert info.has_prev_page is True

    def test_compute_empty(self) -> None:
        """Test an empty collection has zero pages."""
        info = PaginationInfo.compute(current_page=1, total_items=0, page_size=12)
        assert info.total_pages == 0
        assert info.has_next_page is False
        assert info.has_prev_page is False


class TestPropertyListResponse:
    """Tests for the listing page body."""

    def test_parses_page(self) -> None:
        """Test a listing page validates end to end."""
        body = {
            "properties": [make_property(1), make_property(2)],
            "pagination": {"currentPage": 1, "totalPages": 1, "totalItems": 2},
        }
        page = PropertyListResponse.model_validate(body)
        assert [p.id for p in page.properties] == ["db0001", "db0002"]
        assert page.pagination.has_next_page is False
