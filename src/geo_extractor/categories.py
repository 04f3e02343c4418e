from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

FOOD = "food"
ENTERTAINMENT = "entertainment"
HEALTHCARE = "healthcare"
FINANCIAL = "financial"
TRANSPORTATION = "transportation"
EDUCATION = "education"
SHOPPING = "shopping"
ACCOMMODATION = "accommodation"

AMENITY = {
    "restaurant": FOOD,
    "cafe": FOOD,
    "fast_food": FOOD,
    "bar": FOOD,
    "pub": FOOD,
    "food_court": FOOD,
    "ice_cream": FOOD,
    "biergarten": FOOD,
    "cinema": ENTERTAINMENT,
    "theatre": ENTERTAINMENT,
    "nightclub": ENTERTAINMENT,
    "casino": ENTERTAINMENT,
    "arts_centre": ENTERTAINMENT,
    "community_centre": ENTERTAINMENT,
    "hospital": HEALTHCARE,
    "clinic": HEALTHCARE,
    "doctors": HEALTHCARE,
    "dentist": HEALTHCARE,
    "pharmacy": HEALTHCARE,
    "veterinary": HEALTHCARE,
    "bank": FINANCIAL,
    "atm": FINANCIAL,
    "bureau_de_change": FINANCIAL,
    "fuel": TRANSPORTATION,
    "parking": TRANSPORTATION,
    "car_rental": TRANSPORTATION,
    "bicycle_rental": TRANSPORTATION,
    "bus_station": TRANSPORTATION,
    "taxi": TRANSPORTATION,
    "school": EDUCATION,
    "university": EDUCATION,
    "college": EDUCATION,
    "library": EDUCATION,
    "kindergarten": EDUCATION,
}

SHOP = {
    "supermarket": SHOPPING,
    "convenience": SHOPPING,
    "clothes": SHOPPING,
    "mall": SHOPPING,
    "department_store": SHOPPING,
    "electronics": SHOPPING,
    "furniture": SHOPPING,
    "books": SHOPPING,
    "bakery": SHOPPING,
    "butcher": SHOPPING,
    "florist": SHOPPING,
    "hardware": SHOPPING,
}

TOURISM = {
    "hotel": ACCOMMODATION,
    "motel": ACCOMMODATION,
    "hostel": ACCOMMODATION,
    "guest_house": ACCOMMODATION,
    "attraction": ENTERTAINMENT,
    "museum": ENTERTAINMENT,
    "gallery": ENTERTAINMENT,
    "viewpoint": ENTERTAINMENT,
}

LEISURE = {
    "park": ENTERTAINMENT,
    "sports_centre": ENTERTAINMENT,
    "playground": ENTERTAINMENT,
    "stadium": ENTERTAINMENT,
    "swimming_pool": ENTERTAINMENT,
    "fitness_centre": ENTERTAINMENT,
    "golf_course": ENTERTAINMENT,
}

OFFICE = {
    "educational_institution": EDUCATION,
    "university": EDUCATION,
}

EDUCATION_KEY = {
    "school": EDUCATION,
    "university": EDUCATION,
    "college": EDUCATION,
}

BUILDING = {
    "college": EDUCATION,
    "university": EDUCATION,
    "school": EDUCATION,
}

# Evaluated top to bottom, first match wins.
CATEGORY_RULES: tuple[tuple[str, Mapping[str, str]], ...] = (
    ("amenity", AMENITY),
    ("shop", SHOP),
    ("tourism", TOURISM),
    ("leisure", LEISURE),
    ("office", OFFICE),
    ("education", EDUCATION_KEY),
    ("building", BUILDING),
)


@dataclass(frozen=True)
class Classification:
    category: str
    subcategory: str


class CategoryClassifier:
    def __init__(self, rules: tuple[tuple[str, Mapping[str, str]], ...] = CATEGORY_RULES) -> None:
        self.rules = rules

    def classify(self, tags: Mapping[str, str]) -> Optional[Classification]:
        for tag_key, value_map in self.rules:
            tag_value = tags.get(tag_key)
            if tag_value is None:
                continue
            category = value_map.get(tag_value)
            if category:
                return Classification(category=category, subcategory=tag_value)
        return None
