from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

ADDR_HOUSENUMBER = "addr:housenumber"
ADDR_STREET = "addr:street"
ADDR_CITY = "addr:city"
ADDR_POSTCODE = "addr:postcode"
ADDR_SUBURB = "addr:suburb"
ADDR_PLACE = "addr:place"


@dataclass
class AddressTags:
    housenumber: str = ""
    street: str = ""
    city: str = ""
    postcode: str = ""
    suburb: str = ""
    place: str = ""

    @classmethod
    def from_tags(cls, tags: Mapping[str, str]) -> "AddressTags":
        return cls(
            housenumber=tags.get(ADDR_HOUSENUMBER, ""),
            street=tags.get(ADDR_STREET, ""),
            city=tags.get(ADDR_CITY, ""),
            postcode=tags.get(ADDR_POSTCODE, ""),
            suburb=tags.get(ADDR_SUBURB, ""),
            place=tags.get(ADDR_PLACE, ""),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.housenumber and self.street)


def has_address_tags(tags: Mapping[str, str]) -> bool:
    return ADDR_HOUSENUMBER in tags or ADDR_STREET in tags


def format_full_address(
    housenumber: str = "",
    street: str = "",
    city: str = "",
    postcode: str = "",
    suburb: str = "",
    place: str = "",
) -> str:
    """Join the non-empty parts as ``"<no> <street>, <place>, <suburb>, <city> <postcode>"``."""
    result = ""
    if housenumber:
        result += f"{housenumber} "
    if street:
        result += f"{street}, "
    if place:
        result += f"{place}, "
    if suburb:
        result += f"{suburb}, "
    if city:
        result += f"{city} "
    if postcode:
        result += postcode
    return result.strip().rstrip(",").strip()


def format_poi_address(housenumber: str = "", street: str = "", city: str = "") -> str:
    # Mirrors the generated pois.full_address column.
    city_suffix = f", {city}" if city else ""
    if housenumber and street:
        return f"{housenumber} {street}{city_suffix}"
    if street:
        return f"{street}{city_suffix}"
    return city
