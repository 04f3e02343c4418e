from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

UNNAMED = "Unnamed"

OsmType = Literal["node", "way"]


class POIRecord(BaseModel):
    id: int
    name: str = UNNAMED
    category: str = Field(min_length=1)
    subcategory: str = ""
    latitude: float
    longitude: float
    housenumber: str = ""
    street: str = ""
    city: str = ""
    osm_type: OsmType

    @property
    def has_address(self) -> bool:
        return bool(self.street or self.housenumber)


class AddressRecord(BaseModel):
    id: int
    housenumber: str = ""
    street: str = ""
    city: str = ""
    postcode: str = ""
    suburb: str = ""
    place: str = ""
    latitude: float
    longitude: float
    full_address: str = ""


@dataclass(frozen=True)
class AddressPoint:
    """Enrichment source stored in the spatial index, located at (lon, lat)."""

    housenumber: str
    street: str
    city: str
    point: tuple[float, float]


class POICollection(BaseModel):
    pois: list[POIRecord] = Field(default_factory=list)


class AddressCollection(BaseModel):
    addresses: list[AddressRecord] = Field(default_factory=list)


class ExtractionSummary(BaseModel):
    coordinate_count: int = 0
    poi_count: int = 0
    node_poi_count: int = 0
    way_poi_count: int = 0
    address_count: int = 0
    pois_with_address: int = 0
    enriched_count: int = 0
    pass1_seconds: float = 0.0
    pass2_seconds: float = 0.0
    enrich_seconds: float = 0.0
    total_seconds: float = 0.0
