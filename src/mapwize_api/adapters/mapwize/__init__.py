"""Mapwize REST API adapter."""

from __future__ import annotations

from .client import MapwizeClient
from .schema import GeoPoint, ResourcePayload, UserPayload, parse_record, parse_records
from .stores import RESOURCE_ENDPOINTS, ResourceEndpoint, ResourceStore, endpoint_for

__all__ = [
    "RESOURCE_ENDPOINTS",
    "GeoPoint",
    "MapwizeClient",
    "ResourceEndpoint",
    "ResourcePayload",
    "ResourceStore",
    "UserPayload",
    "endpoint_for",
    "parse_record",
    "parse_records",
]
