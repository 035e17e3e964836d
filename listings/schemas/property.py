"""Property Pydantic schemas for the listing read model and the edit write model.

The backend speaks camelCase JSON and, being document-store backed, may
identify a record by ``id``, by ``_id`` or by both. Attributes here are
snake_case with camelCase aliases, and unknown wire fields are kept so a
record can travel to an edit form and back without losing data.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from listings.core.config import settings
from listings.models.enums import (
    AddressVisibility,
    Availability,
    PropertyCategory,
    SolarPosition,
    UserType,
)

# Fields owned by the backend; never sent back on create/update.
SERVER_FIELDS = frozenset({"id", "db_id", "created_at", "updated_at"})


def fallback_photos() -> list[str]:
    """Photo list used when a record carries none."""
    return [settings.FALLBACK_PHOTO_URL]


class WireModel(BaseModel):
    """Base for models exchanged with the backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )


class Address(WireModel):
    """Postal address of a listing."""

    cep: str = ""
    street: str = ""
    number: str = ""
    complement: str | None = None
    neighborhood: str = ""
    city: str = ""
    state: str = ""


class UnresolvedOwner(BaseModel):
    """Owner known only by identifier."""

    kind: Literal["unresolved"] = "unresolved"
    id: str


class ResolvedOwner(BaseModel):
    """Owner summary embedded by the backend."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    kind: Literal["resolved"] = "resolved"
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    email: str = ""
    phone: str = ""
    user_type: UserType | None = Field(
        default=None, validation_alias=AliasChoices("userType", "user_type")
    )
    creci: str | None = None  # broker license number


Owner = Annotated[UnresolvedOwner | ResolvedOwner, Field(discriminator="kind")]


def _owner_from_wire(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return {"kind": "unresolved", "id": value}
    if isinstance(value, dict) and "kind" not in value:
        return {**value, "kind": "resolved"}
    return value


class PropertyBase(WireModel):
    """Fields shared by the read model and the write model."""

    reference: str | None = None
    title: str = ""
    description: str = ""
    category: PropertyCategory
    availability: Availability

    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    living_rooms: int = Field(default=0, ge=0)
    total_area: float = Field(default=0, ge=0)
    useful_area: float = Field(default=0, ge=0)
    solar_position: SolarPosition | None = None

    price: float = Field(default=0, ge=0)
    condominium_price: float | None = Field(default=None, ge=0)

    address: Address = Field(default_factory=Address)
    address_visibility: AddressVisibility = AddressVisibility.STREET_NEIGHBORHOOD

    photos: list[str] = Field(default_factory=fallback_photos)
    video_link: str | None = None

    condominium_features: list[str] = Field(default_factory=list)
    general_features: list[str] = Field(default_factory=list)
    proximity_features: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    internal_notes: str | None = None
    contact_phone: str | None = Field(default=None, alias="telefoneContato")

    is_active: bool = True
    is_featured: bool = False

    @field_validator("photos", mode="before")
    @classmethod
    def default_photos(cls, v: Any) -> Any:
        """Never let a listing reach the UI without a cover image."""
        if not v:
            return fallback_photos()
        return v


class Property(PropertyBase):
    """Listing as returned by the backend."""

    id: str | None = None
    db_id: str | None = Field(default=None, alias="_id")
    owner: Owner | None = Field(default=None, alias="ownerId")
    created_at: datetime
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def resolve_id(cls, data: Any) -> Any:
        """Alias the database identifier to ``id`` when ``id`` is missing."""
        if isinstance(data, dict) and not data.get("id") and data.get("_id"):
            data = {**data, "id": data["_id"]}
        return data

    @field_validator("owner", mode="before")
    @classmethod
    def tag_owner(cls, v: Any) -> Any:
        """Map a bare id or an embedded summary onto the owner variant."""
        return _owner_from_wire(v)

    @field_serializer("owner")
    def serialize_owner(self, owner: UnresolvedOwner | ResolvedOwner | None) -> str | None:
        """Send the owner back as a bare identifier."""
        return owner.id if owner is not None else None

    @property
    def route_key(self) -> str | None:
        """Identifier used for routing: reference, then id, then _id."""
        return self.reference or self.id or self.db_id

    @property
    def owner_id(self) -> str | None:
        """Owner identifier regardless of how the backend populated it."""
        return self.owner.id if self.owner is not None else None

    @property
    def cover_photo(self) -> str:
        """First photo of the listing."""
        return self.photos[0]


class PropertyWrite(PropertyBase):
    """Property staged by an edit form before submission."""

    owner_id: str | None = Field(default=None, alias="ownerId")

    @classmethod
    def from_property(cls, prop: Property) -> "PropertyWrite":
        """Stage an existing listing for editing, keeping every wire field."""
        data = prop.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=True,
            exclude=set(SERVER_FIELDS),
        )
        return cls.model_validate(data)

    def apply(self, changes: dict[str, Any]) -> "PropertyWrite":
        """Return a copy with the given fields changed.

        Keys may be attribute names or wire names.
        """
        data = self.to_payload()
        for key, value in changes.items():
            field = type(self).model_fields.get(key)
            wire_key = field.alias if field is not None and field.alias else key
            data[wire_key] = value
        return type(self).model_validate(data)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body the backend expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
