from __future__ import annotations

from typing import Iterable, List, Optional

from rtree import index

from .models import AddressPoint


class SpatialIndex:
    """R-tree over address points, queried with planar distance on raw (lon, lat) degrees.

    The metric ignores the earth's curvature and the shrinking of longitude
    degrees towards the poles: it is adequate at city or regional scale and
    becomes inaccurate at high latitudes or over very large spans.
    """

    def __init__(self) -> None:
        self._tree = index.Index()
        self._points: List[AddressPoint] = []

    def insert(self, point: AddressPoint) -> None:
        lon, lat = point.point
        self._tree.insert(len(self._points), (lon, lat, lon, lat))
        self._points.append(point)

    def build(self, points: Iterable[AddressPoint]) -> None:
        if self._points:
            for point in points:
                self.insert(point)
            return
        self._points = list(points)
        if not self._points:
            return
        # stream loading packs the tree in one go
        self._tree = index.Index(
            (i, (p.point[0], p.point[1], p.point[0], p.point[1]), None) for i, p in enumerate(self._points)
        )

    def nearest(self, lon: float, lat: float) -> Optional[AddressPoint]:
        if not self._points:
            return None
        hits = self._tree.nearest((lon, lat, lon, lat), 1)
        # Equidistant points may all be reported, the lowest id is the earliest insert.
        best = min(hits, default=None)
        if best is None:
            return None
        return self._points[best]

    def __len__(self) -> int:
        return len(self._points)
