"""Pydantic models describing the Mapwize API payloads.

Resource records are deliberately loose: the API owns their schema and the
sync engine only relies on ``_id`` and ``name``. Everything else is carried
through untouched as extra fields.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from mapwize_api.domain.errors import UnexpectedPayloadError


class MapwizeBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ResourcePayload(MapwizeBaseModel):
    """Any venue object as returned by the API."""

    id: str = Field(alias="_id")
    name: str | None = None

    def to_record(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class UserPayload(MapwizeBaseModel):
    id: str = Field(alias="_id")
    email: str | None = None


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class ImportCorner(BaseModel):
    lat: float
    lng: float

    @classmethod
    def from_point(cls, point: GeoPoint) -> ImportCorner:
        return cls(lat=point.latitude, lng=point.longitude)


class ImportJob(BaseModel):
    """Georeferencing of an uploaded layer image, corners in TL, TR, BL, BR order."""

    corners: list[ImportCorner]


_RESOURCE_LIST = TypeAdapter(list[ResourcePayload])


def parse_record(payload: object) -> dict[str, object]:
    try:
        return ResourcePayload.model_validate(payload).to_record()
    except ValidationError as exc:
        raise UnexpectedPayloadError(f"Unexpected Mapwize object payload: {exc}") from exc


def parse_records(payload: object) -> list[dict[str, object]]:
    try:
        return [item.to_record() for item in _RESOURCE_LIST.validate_python(payload)]
    except ValidationError as exc:
        raise UnexpectedPayloadError(f"Unexpected Mapwize list payload: {exc}") from exc


def parse_user(payload: object) -> UserPayload:
    try:
        return UserPayload.model_validate(payload)
    except ValidationError as exc:
        raise UnexpectedPayloadError(f"Unexpected Mapwize user payload: {exc}") from exc
