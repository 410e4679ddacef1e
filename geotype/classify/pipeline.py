"""Classification run for one feature: synonyms, attributes, types, corrections."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple, Union

import structlog

from geotype.classify.attributes import AttributeExtractor, Normalizer, nfkc
from geotype.classify.matcher import MatchRules, TypeMatcher
from geotype.classify.params import MAX_TYPES_COUNT, FeatureParams
from geotype.classify.postcorrect import PostCorrector
from geotype.observability.metrics import MetricsRegistry
from geotype.tags.synonyms import add_layers, replace_synonyms
from geotype.tags.tagset import Tag, TagSet
from geotype.taxonomy.classificator import TaxonomyCapability
from geotype.taxonomy.well_known import WellKnownTypes

LOGGER = structlog.get_logger(__name__)

TagsLike = Union[TagSet, Iterable[Union[Tag, Tuple[str, str]]]]


def is_valid_types(params: FeatureParams) -> bool:
    """Final acceptance gate: invalid features are omitted from the output."""
    return params.is_valid()


@dataclass
class ClassifiedFeature:
    feature_id: object
    tags: TagSet
    params: FeatureParams


class FeatureClassifier:
    """Runs the ordered classification passes against a shared taxonomy.

    The taxonomy and the well-known codes are resolved once and only read
    afterwards; each call works on its own tag set and result object.
    """

    def __init__(
        self,
        taxonomy: TaxonomyCapability,
        *,
        normalize: Normalizer = nfkc,
        rules: Optional[MatchRules] = None,
        max_types_count: int = MAX_TYPES_COUNT,
        well_known: Optional[WellKnownTypes] = None,
        metrics: Optional[MetricsRegistry] = None,
    ) -> None:
        self.taxonomy = taxonomy
        self.well_known = well_known or WellKnownTypes.resolve(taxonomy)
        self.max_types_count = max_types_count
        self.metrics = metrics or MetricsRegistry()
        self._extractor = AttributeExtractor(normalize)
        self._matcher = TypeMatcher(taxonomy, rules)
        self._corrector = PostCorrector(taxonomy, self.well_known)

    def get_name_and_type(self, tags: TagsLike, params: Optional[FeatureParams] = None) -> FeatureParams:
        """Classify one feature.

        A plain sequence of pairs is wrapped in a new :class:`TagSet`; a
        :class:`TagSet` is rewritten in place (synonyms, inferred layer) and
        keeps its consumed indices afterwards.
        """
        tagset = tags if isinstance(tags, TagSet) else TagSet(tags)
        if params is None:
            params = FeatureParams(max_types_count=self.max_types_count)
        self.metrics.incr("features_seen")

        replace_synonyms(tagset)
        add_layers(tagset)

        if self._extractor.process(tagset, params) == 0:
            self.metrics.incr("features_empty")
            return params

        outcome = self._matcher.match(tagset, params)
        report = self._corrector.apply(tagset, params)

        self.metrics.incr("types_assigned", len(outcome.assigned))
        self.metrics.incr("types_not_drawable", len(outcome.not_drawable))
        self.metrics.incr("types_dropped", len(params.dropped_types))
        self.metrics.incr("highway_aux_types", len(report.highway_aux))
        if report.entrance_replaced:
            self.metrics.incr("entrance_corrections")
        return params

    def classify_many(self, features: Iterable[Tuple[object, TagsLike]]) -> Iterator[ClassifiedFeature]:
        """Classify features in input order, yielding only the valid ones."""
        for feature_id, tags in features:
            tagset = tags if isinstance(tags, TagSet) else TagSet(tags)
            params = self.get_name_and_type(tagset)
            if not is_valid_types(params):
                self.metrics.incr("features_omitted")
                LOGGER.debug("feature_omitted", feature_id=feature_id)
                continue
            self.metrics.incr("features_valid")
            yield ClassifiedFeature(feature_id=feature_id, tags=tagset, params=params)
