from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, Tuple, Union

import osmium
from loguru import logger

from .errors import InputDecodeError


@dataclass
class NodeElement:
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class WayElement:
    id: int
    refs: Tuple[int, ...] = ()
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class RelationElement:
    id: int
    tags: Dict[str, str] = field(default_factory=dict)


OsmElement = Union[NodeElement, WayElement, RelationElement]

# Anything that can be traversed more than once, e.g. a reader or a list.
ElementSource = Iterable[OsmElement]


class OsmElementReader:
    """Decodes an OSM file (PBF, XML, O5M) into plain element records.

    Every call to ``iter()`` opens the file again and performs an independent
    full traversal, so the same reader can serve both extraction passes.
    Plain and dense nodes are decoded to the same ``NodeElement``.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __iter__(self) -> Iterator[OsmElement]:
        logger.debug("打开输入文件 {path}", path=self.path)
        try:
            processor = osmium.FileProcessor(str(self.path))
            for obj in processor:
                yield self._convert(obj)
        except InputDecodeError:
            raise
        except (OSError, RuntimeError, ValueError) as exc:
            raise InputDecodeError(f"输入文件解析失败：{self.path}（{exc}）") from exc

    def _convert(self, obj) -> OsmElement:
        tags = {tag.k: tag.v for tag in obj.tags}
        if obj.is_node():
            location = obj.location
            if not location.valid():
                raise InputDecodeError(f"节点 {obj.id} 坐标无效")
            return NodeElement(id=obj.id, lat=location.lat, lon=location.lon, tags=tags)
        if obj.is_way():
            return WayElement(id=obj.id, refs=tuple(ref.ref for ref in obj.nodes), tags=tags)
        return RelationElement(id=obj.id, tags=tags)
