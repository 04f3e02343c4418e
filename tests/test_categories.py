from geo_extractor.categories import CATEGORY_RULES, CategoryClassifier, Classification


def test_classify_amenity_cafe():
    result = CategoryClassifier().classify({"amenity": "cafe", "name": "Joe's"})
    assert result == Classification(category="food", subcategory="cafe")


def test_unknown_value_is_not_classified():
    assert CategoryClassifier().classify({"amenity": "bench"}) is None
    assert CategoryClassifier().classify({"highway": "residential"}) is None


def test_priority_order_is_explicit():
    assert [key for key, _ in CATEGORY_RULES] == [
        "amenity",
        "shop",
        "tourism",
        "leisure",
        "office",
        "education",
        "building",
    ]


def test_first_matching_rule_wins_regardless_of_tag_order():
    classifier = CategoryClassifier()
    tags_a = {"shop": "bakery", "amenity": "bank"}
    tags_b = {"amenity": "bank", "shop": "bakery"}
    for _ in range(3):
        assert classifier.classify(tags_a) == Classification("financial", "bank")
        assert classifier.classify(tags_b) == Classification("financial", "bank")


def test_falls_through_to_later_rule_when_earlier_value_unmapped():
    result = CategoryClassifier().classify({"amenity": "bench", "building": "university"})
    assert result == Classification("education", "university")


def test_tourism_maps_to_accommodation():
    assert CategoryClassifier().classify({"tourism": "hostel"}).category == "accommodation"
