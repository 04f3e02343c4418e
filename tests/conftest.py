import pytest

from geo_extractor.reader import NodeElement, RelationElement, WayElement


@pytest.fixture
def scenario_elements():
    # Joe's cafe without address, one complete address node, one bare node, a bakery way over A and B.
    return [
        NodeElement(id=1, lat=43.0, lon=-79.0, tags={"amenity": "cafe", "name": "Joe's"}),
        NodeElement(id=2, lat=43.002, lon=-79.002, tags={"addr:housenumber": "5", "addr:street": "Oak Ave"}),
        NodeElement(id=3, lat=44.0, lon=-80.0),
        WayElement(id=1, refs=(1, 2), tags={"shop": "bakery", "name": "Best Bakery"}),
        RelationElement(id=9, tags={"type": "multipolygon", "amenity": "school"}),
    ]
