"""Enum definitions for listing classification.

Member values are the identifiers used on the wire by the backend.
"""

from enum import Enum


class PropertyCategory(str, Enum):
    """Kind of property being advertised."""

    APARTMENT = "apartment"
    HOUSE = "house"
    SMALL_FARM = "chacara"
    LAND = "terrain"
    COMMERCIAL_HALL = "salon"
    TWO_STORY_HOUSE = "sobrado"


class Availability(str, Enum):
    """Commercial availability of a listing."""

    FOR_SALE = "sale"
    FOR_RENT = "rent"
    SEASONAL = "temporada"
    BOTH = "both"


class SolarPosition(str, Enum):
    """Which side of the day the property gets sun."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    BOTH = "both"


class AddressVisibility(str, Enum):
    """How much of the address is shown publicly."""

    FULL = "full_address"
    STREET_NEIGHBORHOOD = "street_neighborhood"
    NEIGHBORHOOD_ONLY = "neighborhood_only"
    HIDDEN = "hidden"

    @classmethod
    def _missing_(cls, value: object) -> "AddressVisibility | None":
        # Older records were saved with "no_address"
        if value == "no_address":
            return cls.HIDDEN
        return None


class UserType(str, Enum):
    """Account type of a listing owner."""

    ADMIN = "admin"
    AGENCY = "corretoria"
    INDIVIDUAL = "particular"
