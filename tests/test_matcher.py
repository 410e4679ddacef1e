from geotype.classify.matcher import MatchRules, TypeMatcher
from geotype.classify.params import FeatureParams
from geotype.tags.tagset import TagSet


def _match(taxonomy, pairs, rules=None):
    tags = TagSet(pairs)
    params = FeatureParams()
    outcome = TypeMatcher(taxonomy, rules).match(tags, params)
    return params, outcome, tags


def test_root_key_and_value(taxonomy, code):
    params, _, tags = _match(taxonomy, [("highway", "primary")])
    assert params.types == [code("highway-primary")]
    assert tags.consumed == frozenset({0})


def test_earlier_root_tag_is_matched_first(taxonomy, code):
    params, _, _ = _match(taxonomy, [("tourism", "hotel"), ("amenity", "cafe")])
    assert params.types == [code("tourism-hotel"), code("amenity-cafe")]
    params, _, _ = _match(taxonomy, [("amenity", "cafe"), ("tourism", "hotel")])
    assert params.types == [code("amenity-cafe"), code("tourism-hotel")]


def test_extension_by_key(taxonomy, code):
    params, _, _ = _match(taxonomy, [("highway", "primary"), ("bridge", "yes")])
    assert params.types == [code("highway-primary-bridge")]
    params, _, _ = _match(taxonomy, [("highway", "service"), ("area", "yes")])
    assert params.types == [code("highway-service-area")]


def test_extension_by_value_before_key(taxonomy, code):
    params, _, _ = _match(taxonomy, [("boundary", "administrative"), ("admin_level", "4")])
    assert params.types == [code("boundary-administrative-4")]


def test_numeric_values_only_from_admin_level(taxonomy):
    params, outcome, _ = _match(taxonomy, [("boundary", "administrative"), ("population", "4")])
    assert params.types == []
    assert outcome.not_drawable == [taxonomy.lookup_path(["boundary", "administrative"])]


def test_undrawable_path_is_dropped_without_fallback(taxonomy):
    params, outcome, _ = _match(taxonomy, [("tourism", "castle")])
    assert params.types == []
    assert outcome.not_drawable == [taxonomy.lookup_path(["tourism"])]


def test_capital_needs_affirmative_value(taxonomy, code):
    params, _, _ = _match(taxonomy, [("place", "city"), ("capital", "yes")])
    assert params.types == [code("place-city-capital")]
    params, _, _ = _match(taxonomy, [("place", "city"), ("capital", "4")])
    assert params.types == [code("place-city")]


def test_name_tags_never_classify(taxonomy, code):
    params, _, _ = _match(taxonomy, [("amenity", "yes"), ("name", "school")])
    assert params.types == [code("amenity")]
    params, _, _ = _match(taxonomy, [("amenity", "yes"), ("note", "school")])
    assert params.types == [code("amenity-school")]


def test_deny_listed_keys_do_not_extend(taxonomy, code):
    params, _, _ = _match(taxonomy, [("highway", "road"), ("cycleway", "lane")])
    assert params.types == [code("highway")]


def test_several_roots_and_duplicates(taxonomy, code):
    params, outcome, tags = _match(
        taxonomy,
        [("amenity", "cafe"), ("highway", "residential"), ("amenity", "school"), ("amenity", "cafe")],
    )
    assert params.types == [code("amenity-cafe"), code("highway-residential"), code("amenity-school")]
    assert outcome.assigned == params.types
    assert tags.consumed == frozenset({0, 1, 2, 3})


def test_path_depth_limit(taxonomy, code):
    params, _, _ = _match(taxonomy, [("highway", "primary"), ("bridge", "yes")], MatchRules(max_path_depth=1))
    assert params.types == [code("highway")]
    params, _, _ = _match(taxonomy, [("highway", "primary"), ("bridge", "yes")], MatchRules(max_path_depth=2))
    assert params.types == [code("highway-primary")]


def test_configurable_filter_keys(taxonomy, code):
    rules = MatchRules.from_iterables(affirmative_keys=[], numeric_keys=["admin_level", "population"])
    params, _, _ = _match(taxonomy, [("boundary", "administrative"), ("population", "4")], rules)
    assert params.types == [code("boundary-administrative-4")]
    params, _, _ = _match(taxonomy, [("place", "city"), ("capital", "town")], rules)
    assert params.types == [code("place-city-capital")]


def test_no_root_match(taxonomy):
    params, outcome, tags = _match(taxonomy, [("surface", "asphalt"), ("name", "Foo")])
    assert params.types == []
    assert outcome.assigned == []
    assert tags.consumed == frozenset()


def test_numeric_value_still_anchors_root_key(taxonomy, code):
    params, _, tags = _match(taxonomy, [("amenity", "1")])
    assert params.types == [code("amenity")]
    assert tags.consumed == frozenset({0})


def test_numeric_value_still_extends_by_key(taxonomy, code):
    params, _, _ = _match(taxonomy, [("highway", "service"), ("area", "1")])
    assert params.types == [code("highway-service-area")]


def test_good_tag_rules_by_level():
    rules = MatchRules()
    for by_key in (True, False):
        assert not rules.is_good_tag("name:en", "school", by_key=by_key)
        assert not rules.is_good_tag("old_name", "x", by_key=by_key)
    assert rules.is_good_tag("capital", "yes", by_key=True)
    assert not rules.is_good_tag("capital", "2", by_key=True)
    assert rules.is_good_tag("capital", "no", by_key=False)
    assert rules.is_good_tag("admin_level", "4", by_key=False)
    assert not rules.is_good_tag("lanes", "2", by_key=False)
    assert rules.is_good_tag("lanes", "2", by_key=True)
    assert rules.is_good_tag("lanes", "-2", by_key=False)
