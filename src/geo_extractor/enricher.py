from __future__ import annotations

from typing import Iterable

from .indexers import SpatialIndex
from .models import POIRecord


class AddressEnricher:
    def __init__(self, index: SpatialIndex) -> None:
        self.index = index

    def enrich(self, pois: Iterable[POIRecord]) -> int:
        """Fill missing street/house number from the nearest address point.

        House number and street are replaced together from the same neighbour,
        city only when it was empty. Returns the number of POIs touched.
        """
        enriched = 0
        for poi in pois:
            if poi.street and poi.housenumber:
                continue
            if self.enrich_one(poi):
                enriched += 1
        return enriched

    def enrich_one(self, poi: POIRecord) -> bool:
        nearest = self.index.nearest(poi.longitude, poi.latitude)
        if nearest is None:
            return False
        poi.housenumber = nearest.housenumber
        poi.street = nearest.street
        if not poi.city:
            poi.city = nearest.city
        return True
