"""Formatting helpers for presenting listings (pt-BR)."""

from decimal import ROUND_HALF_UP, Decimal

from listings.models.enums import AddressVisibility, Availability, PropertyCategory, SolarPosition
from listings.schemas.property import Property

AVAILABILITY_LABELS = {
    Availability.FOR_SALE: "Venda",
    Availability.FOR_RENT: "Locação",
    Availability.SEASONAL: "Temporada",
    Availability.BOTH: "Venda/Locação",
}

CATEGORY_LABELS = {
    PropertyCategory.APARTMENT: "Apartamento",
    PropertyCategory.HOUSE: "Casa",
    PropertyCategory.SMALL_FARM: "Chácara",
    PropertyCategory.LAND: "Terreno",
    PropertyCategory.COMMERCIAL_HALL: "Salão",
    PropertyCategory.TWO_STORY_HOUSE: "Sobrado",
}

SOLAR_POSITION_LABELS = {
    SolarPosition.MORNING: "Nascente",
    SolarPosition.AFTERNOON: "Poente",
    SolarPosition.BOTH: "Nascente e Poente",
}


def format_price(value: float | int | Decimal, availability: Availability | None = None) -> str:
    """Format a price as whole Brazilian reais, e.g. ``R$ 1.250.000``.

    Rentals get a ``/mês`` suffix.
    """
    whole = int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    formatted = "R$ " + f"{whole:,}".replace(",", ".")
    if availability == Availability.FOR_RENT:
        return f"{formatted}/mês"
    return formatted


def availability_label(availability: Availability) -> str:
    return AVAILABILITY_LABELS.get(availability, availability.value)


def category_label(category: PropertyCategory) -> str:
    return CATEGORY_LABELS.get(category, category.value)


def solar_position_label(position: SolarPosition) -> str:
    return SOLAR_POSITION_LABELS.get(position, position.value)


def public_location(prop: Property) -> str:
    """Location text allowed by the listing's address visibility."""
    address = prop.address
    city = f"{address.city}/{address.state}" if address.state else address.city
    visibility = prop.address_visibility

    if visibility == AddressVisibility.FULL:
        street = f"{address.street}, {address.number}" if address.number else address.street
        parts = [street, address.complement, address.neighborhood, city]
    elif visibility == AddressVisibility.STREET_NEIGHBORHOOD:
        parts = [address.street, address.neighborhood, city]
    elif visibility == AddressVisibility.NEIGHBORHOOD_ONLY:
        parts = [address.neighborhood, city]
    else:
        parts = [city]
    return " - ".join(p for p in parts if p)
