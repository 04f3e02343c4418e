from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

import pandas as pd
from loguru import logger

from .config import OutputConfig
from .errors import ExportError
from .models import AddressCollection, AddressRecord, POICollection, POIRecord
from .normalizer import format_poi_address

POI_SCHEMA = """
CREATE TABLE IF NOT EXISTS pois (
    id INTEGER NOT NULL,
    name TEXT NOT NULL,
    category TEXT NOT NULL,
    subcategory TEXT,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    housenumber TEXT,
    street TEXT,
    city TEXT,
    osm_type TEXT NOT NULL,
    full_address TEXT GENERATED ALWAYS AS (
        CASE
            WHEN housenumber IS NOT NULL AND housenumber != '' AND street IS NOT NULL AND street != ''
            THEN housenumber || ' ' || street || CASE WHEN city != '' THEN ', ' || city ELSE '' END
            WHEN street IS NOT NULL AND street != ''
            THEN street || CASE WHEN city != '' THEN ', ' || city ELSE '' END
            WHEN city IS NOT NULL AND city != ''
            THEN city
            ELSE ''
        END
    ) STORED,
    PRIMARY KEY (osm_type, id)
);
CREATE INDEX IF NOT EXISTS idx_poi_name ON pois(name COLLATE NOCASE);
CREATE INDEX IF NOT EXISTS idx_poi_full_address ON pois(full_address COLLATE NOCASE);
CREATE INDEX IF NOT EXISTS idx_poi_category ON pois(category);
CREATE INDEX IF NOT EXISTS idx_poi_city ON pois(city COLLATE NOCASE);
"""

ADDRESS_SCHEMA = """
CREATE TABLE IF NOT EXISTS addresses (
    id INTEGER PRIMARY KEY,
    housenumber TEXT,
    street TEXT,
    city TEXT,
    postcode TEXT,
    suburb TEXT,
    place TEXT,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    full_address TEXT
);
CREATE INDEX IF NOT EXISTS idx_addr_full ON addresses(full_address COLLATE NOCASE);
CREATE INDEX IF NOT EXISTS idx_addr_street ON addresses(street COLLATE NOCASE);
"""

INSERT_POI = (
    "INSERT INTO pois (id, name, category, subcategory, latitude, longitude, housenumber, street, city, osm_type) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
)

INSERT_ADDRESS = (
    "INSERT INTO addresses (id, housenumber, street, city, postcode, suburb, place, latitude, longitude, full_address) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
)


class Exporter(ABC):
    @abstractmethod
    def export(self, pois: Sequence[POIRecord], addresses: Sequence[AddressRecord]) -> None:
        ...


class SqliteExporter(Exporter):
    def __init__(self, path: Path, overwrite: bool = True) -> None:
        self.path = Path(path)
        self.overwrite = overwrite

    def export(self, pois: Sequence[POIRecord], addresses: Sequence[AddressRecord]) -> None:
        logger.info("创建 SQLite 数据库 {path}", path=self.path)
        try:
            if self.overwrite and self.path.exists():
                self.path.unlink()
            conn = sqlite3.connect(self.path)
        except (OSError, sqlite3.Error) as exc:
            raise ExportError(f"无法打开数据库 {self.path}：{exc}") from exc
        try:
            self._create_schema(conn)
            self._insert_pois(conn, pois)
            self._insert_addresses(conn, addresses)
            self._optimize(conn)
        except sqlite3.Error as exc:
            raise ExportError(f"写入数据库 {self.path} 失败：{exc}") from exc
        finally:
            conn.close()
        logger.info("SQLite 数据库创建完成")

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(POI_SCHEMA)
        conn.executescript(ADDRESS_SCHEMA)

    def _insert_pois(self, conn: sqlite3.Connection, pois: Sequence[POIRecord]) -> None:
        logger.info("  写入POI {count} 条", count=len(pois))
        with conn:
            conn.executemany(
                INSERT_POI,
                (
                    (
                        poi.id,
                        poi.name,
                        poi.category,
                        poi.subcategory,
                        poi.latitude,
                        poi.longitude,
                        poi.housenumber,
                        poi.street,
                        poi.city,
                        poi.osm_type,
                    )
                    for poi in pois
                ),
            )

    def _insert_addresses(self, conn: sqlite3.Connection, addresses: Sequence[AddressRecord]) -> None:
        logger.info("  写入地址 {count} 条", count=len(addresses))
        with conn:
            conn.executemany(
                INSERT_ADDRESS,
                (
                    (
                        addr.id,
                        addr.housenumber,
                        addr.street,
                        addr.city,
                        addr.postcode,
                        addr.suburb,
                        addr.place,
                        addr.latitude,
                        addr.longitude,
                        addr.full_address,
                    )
                    for addr in addresses
                ),
            )

    def _optimize(self, conn: sqlite3.Connection) -> None:
        conn.execute("ANALYZE")
        conn.execute("VACUUM")


class JsonExporter(Exporter):
    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def export(self, pois: Sequence[POIRecord], addresses: Sequence[AddressRecord]) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            poi_path = self.output_dir / "pois.json"
            poi_path.write_text(POICollection(pois=list(pois)).model_dump_json(indent=2), encoding="utf-8")
            addr_path = self.output_dir / "addresses.json"
            addr_path.write_text(
                AddressCollection(addresses=list(addresses)).model_dump_json(indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise ExportError(f"写入 JSON 失败：{exc}") from exc
        logger.info("JSON 写入 {poi} 与 {addr}", poi=poi_path, addr=addr_path)


class CsvExporter(Exporter):
    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def export(self, pois: Sequence[POIRecord], addresses: Sequence[AddressRecord]) -> None:
        poi_rows = []
        for poi in pois:
            row = poi.model_dump()
            row["full_address"] = format_poi_address(poi.housenumber, poi.street, poi.city)
            poi_rows.append(row)
        poi_df = pd.DataFrame(poi_rows, columns=list(POIRecord.model_fields) + ["full_address"])
        addr_df = pd.DataFrame(
            [addr.model_dump() for addr in addresses], columns=list(AddressRecord.model_fields)
        )
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            poi_df.to_csv(self.output_dir / "pois.csv", index=False)
            addr_df.to_csv(self.output_dir / "addresses.csv", index=False)
        except OSError as exc:
            raise ExportError(f"写入 CSV 失败：{exc}") from exc
        logger.info("CSV 写入 {path}", path=self.output_dir)


def build_exporters(config: OutputConfig) -> List[Exporter]:
    exporters: List[Exporter] = [SqliteExporter(config.sqlite_path, overwrite=config.overwrite)]
    if config.json_dir is not None:
        exporters.append(JsonExporter(config.json_dir))
    if config.csv_dir is not None:
        exporters.append(CsvExporter(config.csv_dir))
    return exporters
