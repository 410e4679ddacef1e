from geotype.classify.params import FeatureParams
from geotype.classify.postcorrect import PostCorrector
from geotype.tags.tagset import TagSet
from geotype.taxonomy.classificator import Taxonomy
from geotype.taxonomy.well_known import WellKnownTypes


def _corrector(taxonomy):
    return PostCorrector(taxonomy, WellKnownTypes.resolve(taxonomy))


def test_entrance_with_house_number_becomes_address(taxonomy, code):
    params = FeatureParams(types=[code("entrance")], names={"default": "Door"}, house_number="5")
    report = _corrector(taxonomy).apply(TagSet(), params)
    assert report.entrance_replaced
    assert params.types == [code("building-address")]
    assert params.names == {}


def test_entrance_with_house_name_becomes_address(taxonomy, code):
    params = FeatureParams(types=[code("amenity-cafe"), code("entrance")], house_name="Rose Cottage")
    _corrector(taxonomy).apply(TagSet(), params)
    assert params.types == [code("amenity-cafe"), code("building-address")]


def test_entrance_without_house_is_kept(taxonomy, code):
    params = FeatureParams(types=[code("entrance")], names={"default": "Door"}, street="Main Street")
    report = _corrector(taxonomy).apply(TagSet(), params)
    assert not report.entrance_replaced
    assert params.types == [code("entrance")]
    assert params.names == {"default": "Door"}


def test_house_number_without_entrance_changes_nothing(taxonomy, code):
    params = FeatureParams(types=[code("amenity-cafe")], names={"default": "Joe's"}, house_number="5")
    _corrector(taxonomy).apply(TagSet(), params)
    assert params.types == [code("amenity-cafe")]
    assert params.names == {"default": "Joe's"}


def test_highway_auxiliary_types(taxonomy, code):
    tags = TagSet([("highway", "primary"), ("lit", "yes"), ("oneway", "yes"), ("access", "private")])
    params = FeatureParams(types=[code("highway-primary")])
    report = _corrector(taxonomy).apply(tags, params)
    assert params.types == [code("highway-primary"), code("hwtag-private"), code("hwtag-lit"), code("hwtag-oneway")]
    assert report.highway_aux == params.types[1:]
    assert not params.reverse_geometry


def test_reversed_oneway(taxonomy, code):
    tags = TagSet([("highway", "residential"), ("oneway", "-1")])
    params = FeatureParams(types=[code("highway-residential")])
    _corrector(taxonomy).apply(tags, params)
    assert params.types == [code("highway-residential"), code("hwtag-oneway")]
    assert params.reverse_geometry


def test_oneway_numeric_one(taxonomy, code):
    tags = TagSet([("oneway", "1")])
    params = FeatureParams(types=[code("highway")])
    _corrector(taxonomy).apply(tags, params)
    assert params.types == [code("highway"), code("hwtag-oneway")]


def test_auxiliary_scan_ignores_consumption(taxonomy, code):
    tags = TagSet([("highway", "primary"), ("oneway", "-1")])
    tags.consume(0)
    tags.consume(1)
    params = FeatureParams(types=[code("highway-primary")])
    _corrector(taxonomy).apply(tags, params)
    assert code("hwtag-oneway") in params.types
    assert params.reverse_geometry


def test_non_highway_gets_no_auxiliary_types(taxonomy, code):
    tags = TagSet([("amenity", "cafe"), ("oneway", "-1"), ("lit", "yes")])
    params = FeatureParams(types=[code("amenity-cafe")])
    report = _corrector(taxonomy).apply(tags, params)
    assert params.types == [code("amenity-cafe")]
    assert report.highway_aux == []
    assert not params.reverse_geometry


def test_auxiliary_types_added_once_for_several_highways(taxonomy, code):
    tags = TagSet([("lit", "yes")])
    params = FeatureParams(types=[code("highway-primary"), code("highway-residential")])
    _corrector(taxonomy).apply(tags, params)
    assert params.types.count(code("hwtag-lit")) == 1


def test_other_access_values_are_not_private(taxonomy, code):
    tags = TagSet([("access", "destination"), ("lit", "no")])
    params = FeatureParams(types=[code("highway-primary")])
    _corrector(taxonomy).apply(tags, params)
    assert params.types == [code("highway-primary")]


def test_rules_skip_missing_well_known_types():
    small = Taxonomy({"entrance": None, "highway": {"primary": None}})
    primary = small.lookup_path(["highway", "primary"])
    entrance = small.lookup_path(["entrance"])
    params = FeatureParams(types=[entrance, primary], house_number="5", names={"default": "Door"})
    _corrector(small).apply(TagSet([("oneway", "-1")]), params)
    assert params.types == [entrance, primary]
    assert params.names == {"default": "Door"}
    assert params.reverse_geometry
