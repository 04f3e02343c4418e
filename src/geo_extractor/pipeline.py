from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from loguru import logger

from .categories import CategoryClassifier
from .config import PipelineConfig
from .coordinates import CoordinateIndex, build_coordinate_index
from .enricher import AddressEnricher
from .exporters import Exporter, build_exporters
from .indexers import SpatialIndex
from .models import UNNAMED, AddressPoint, AddressRecord, ExtractionSummary, POIRecord
from .normalizer import AddressTags, format_full_address, has_address_tags
from .reader import ElementSource, NodeElement, RelationElement, WayElement


@dataclass
class ExtractionContext:
    """Everything the second pass reads from and appends to."""

    coordinates: Optional[CoordinateIndex]
    pois: List[POIRecord] = field(default_factory=list)
    addresses: List[AddressRecord] = field(default_factory=list)
    address_index: SpatialIndex = field(default_factory=SpatialIndex)
    processed: int = 0
    enricher: AddressEnricher = field(init=False)

    def __post_init__(self) -> None:
        self.enricher = AddressEnricher(self.address_index)

    def release_coordinates(self) -> None:
        self.coordinates = None


class ExtractionPipeline:
    def __init__(self, classifier: Optional[CategoryClassifier] = None, progress_interval: int = 10_000_000) -> None:
        self.classifier = classifier or CategoryClassifier()
        self.progress_interval = progress_interval

    def extract(self, elements: ElementSource, coordinates: CoordinateIndex) -> ExtractionContext:
        ctx = ExtractionContext(coordinates=coordinates)
        for element in elements:
            if isinstance(element, NodeElement):
                self.process_node(ctx, element)
            elif isinstance(element, WayElement):
                self.process_way(ctx, element)
            elif isinstance(element, RelationElement):
                # relations are not supported
                pass
            ctx.processed += 1
            if self.progress_interval > 0 and ctx.processed % self.progress_interval == 0:
                logger.info(
                    "  已处理 {count} 个要素，POI {pois} 条，地址 {addrs} 条",
                    count=ctx.processed,
                    pois=len(ctx.pois),
                    addrs=len(ctx.addresses),
                )
        return ctx

    def process_node(self, ctx: ExtractionContext, node: NodeElement) -> None:
        tags = node.tags
        addr = AddressTags.from_tags(tags)
        match = self.classifier.classify(tags)
        if match is not None:
            ctx.pois.append(
                POIRecord(
                    id=node.id,
                    name=tags.get("name", UNNAMED),
                    category=match.category,
                    subcategory=match.subcategory,
                    latitude=node.lat,
                    longitude=node.lon,
                    housenumber=addr.housenumber,
                    street=addr.street,
                    city=addr.city,
                    osm_type="node",
                )
            )

        if not has_address_tags(tags):
            return
        ctx.addresses.append(
            AddressRecord(
                id=node.id,
                housenumber=addr.housenumber,
                street=addr.street,
                city=addr.city,
                postcode=addr.postcode,
                suburb=addr.suburb,
                place=addr.place,
                latitude=node.lat,
                longitude=node.lon,
                full_address=format_full_address(
                    housenumber=addr.housenumber,
                    street=addr.street,
                    city=addr.city,
                    postcode=addr.postcode,
                    suburb=addr.suburb,
                    place=addr.place,
                ),
            )
        )
        if addr.is_complete:
            ctx.address_index.insert(
                AddressPoint(
                    housenumber=addr.housenumber,
                    street=addr.street,
                    city=addr.city,
                    point=(node.lon, node.lat),
                )
            )

    def process_way(self, ctx: ExtractionContext, way: WayElement) -> None:
        tags = way.tags
        match = self.classifier.classify(tags)
        if match is None and "name" not in tags:
            return
        centroid = ctx.coordinates.centroid(way.refs)
        if centroid is None:
            return
        # Named but unclassified ways are inspected, never emitted.
        if match is None:
            return
        lat, lon = centroid
        addr = AddressTags.from_tags(tags)
        poi = POIRecord(
            id=way.id,
            name=tags.get("name", UNNAMED),
            category=match.category,
            subcategory=match.subcategory,
            latitude=lat,
            longitude=lon,
            housenumber=addr.housenumber,
            street=addr.street,
            city=addr.city,
            osm_type="way",
        )
        if not poi.street and not poi.housenumber:
            ctx.enricher.enrich_one(poi)
        ctx.pois.append(poi)


class GeoExtractionPipeline:
    def __init__(self, config: PipelineConfig, source: ElementSource) -> None:
        self.config = config
        self.source = source
        self.extractor = ExtractionPipeline(progress_interval=config.runtime.progress_interval)
        self.exporters: List[Exporter] = build_exporters(config.output)
        self.coordinates: Optional[CoordinateIndex] = None
        self.context: Optional[ExtractionContext] = None
        self.summary = ExtractionSummary()

    def index_coordinates(self) -> CoordinateIndex:
        logger.info("第一遍：读取节点坐标")
        start = time.perf_counter()
        self.coordinates = build_coordinate_index(
            self.source,
            progress_interval=self.config.runtime.progress_interval,
            map_type=self.config.runtime.node_index,
        )
        self.summary.pass1_seconds = time.perf_counter() - start
        self.summary.coordinate_count = len(self.coordinates)
        logger.info(
            "第一遍完成，耗时 {secs:.2f}s，存储节点坐标 {count} 个",
            secs=self.summary.pass1_seconds,
            count=len(self.coordinates),
        )
        return self.coordinates

    def extract(self) -> ExtractionContext:
        if self.coordinates is None:
            raise RuntimeError("请先调用 index_coordinates() 构建坐标索引")
        logger.info("第二遍：提取POI与地址")
        start = time.perf_counter()
        self.context = self.extractor.extract(self.source, self.coordinates)
        self.summary.pass2_seconds = time.perf_counter() - start
        logger.info("第二遍完成，耗时 {secs:.2f}s", secs=self.summary.pass2_seconds)
        # Only the spatial index and the collections outlive the second pass.
        self.coordinates = None
        self.context.release_coordinates()
        return self.context

    def enrich(self) -> int:
        if self.context is None:
            raise RuntimeError("请先调用 extract() 提取POI")
        if not self.config.enrichment.enabled:
            logger.info("配置中未启用地址补全（enrichment.enabled=false），跳过")
            return 0
        logger.info("开始为POI补全最近地址")
        start = time.perf_counter()
        enriched = self.context.enricher.enrich(self.context.pois)
        self.summary.enrich_seconds = time.perf_counter() - start
        self.summary.enriched_count = enriched
        logger.info("补全地址 {count} 条，耗时 {secs:.2f}s", count=enriched, secs=self.summary.enrich_seconds)
        return enriched

    def export(self) -> None:
        if self.context is None:
            raise RuntimeError("请先调用 extract() 提取POI")
        for exporter in self.exporters:
            exporter.export(self.context.pois, self.context.addresses)

    def run(self) -> ExtractionSummary:
        start = time.perf_counter()
        self.index_coordinates()
        self.extract()
        self.enrich()
        self._summarize(self.context.pois, self.context.addresses)
        self.export()
        self.summary.total_seconds = time.perf_counter() - start
        return self.summary

    def _summarize(self, pois: Sequence[POIRecord], addresses: Sequence[AddressRecord]) -> None:
        self.summary.poi_count = len(pois)
        self.summary.node_poi_count = sum(1 for poi in pois if poi.osm_type == "node")
        self.summary.way_poi_count = sum(1 for poi in pois if poi.osm_type == "way")
        self.summary.address_count = len(addresses)
        self.summary.pois_with_address = sum(1 for poi in pois if poi.has_address)
        logger.info(
            "POI {total} 条（节点 {nodes} 条，路径 {ways} 条），地址 {addrs} 条，带地址信息的POI {with_addr} 条",
            total=self.summary.poi_count,
            nodes=self.summary.node_poi_count,
            ways=self.summary.way_poi_count,
            addrs=self.summary.address_count,
            with_addr=self.summary.pois_with_address,
        )
