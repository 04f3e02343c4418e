from __future__ import annotations

from typing import Iterable, Optional, Tuple

import osmium.index
import osmium.osm
from loguru import logger

from .reader import ElementSource, NodeElement

DEFAULT_NODE_INDEX = "flex_mem"


class CoordinateIndex:
    """node id -> (lat, lon), filled once by the first pass and read-only afterwards.

    Backed by a native osmium location store. ``map_type`` is any name from
    ``osmium.index.map_types()``, e.g. ``flex_mem`` in memory or
    ``sparse_file_array,/tmp/nodes.idx`` on disk. Coordinates are kept at
    osmium's fixed 1e-7 degree precision.
    """

    def __init__(self, map_type: str = DEFAULT_NODE_INDEX) -> None:
        self.map_type = map_type
        self._locations = osmium.index.create_map(map_type)
        self._count = 0

    def add(self, node_id: int, lat: float, lon: float) -> None:
        if node_id not in self:
            self._count += 1
        self._locations.set(node_id, osmium.osm.Location(lon, lat))

    def get(self, node_id: int) -> Optional[Tuple[float, float]]:
        try:
            location = self._locations.get(node_id)
        except KeyError:
            return None
        return location.lat, location.lon

    def __contains__(self, node_id: object) -> bool:
        return self.get(node_id) is not None

    def __len__(self) -> int:
        return self._count

    def used_memory(self) -> int:
        return self._locations.used_memory()

    def centroid(self, refs: Iterable[int]) -> Optional[Tuple[float, float]]:
        """Mean (lat, lon) of the refs present in the index; dangling refs are skipped."""
        lat_sum = 0.0
        lon_sum = 0.0
        valid = 0
        for ref in refs:
            coord = self.get(ref)
            if coord is None:
                continue
            lat_sum += coord[0]
            lon_sum += coord[1]
            valid += 1
        if valid == 0:
            return None
        return lat_sum / valid, lon_sum / valid


def build_coordinate_index(
    elements: ElementSource,
    progress_interval: int = 10_000_000,
    map_type: str = DEFAULT_NODE_INDEX,
) -> CoordinateIndex:
    index = CoordinateIndex(map_type)
    count = 0
    for element in elements:
        if isinstance(element, NodeElement):
            index.add(element.id, element.lat, element.lon)
        count += 1
        if progress_interval > 0 and count % progress_interval == 0:
            logger.info("  已读取 {count} 个要素，存储节点坐标 {nodes} 个", count=count, nodes=len(index))
    logger.debug("节点坐标索引 {map_type} 占用内存 {mb:.1f} MB", map_type=map_type, mb=index.used_memory() / 2**20)
    return index
