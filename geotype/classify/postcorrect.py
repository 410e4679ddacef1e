"""Domain corrections applied to the matched types of a feature."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from geotype.classify.params import FeatureParams
from geotype.tags.tagset import Tag, TagSet
from geotype.taxonomy.classificator import TaxonomyCapability
from geotype.taxonomy.codes import TypeCode
from geotype.taxonomy.well_known import WellKnownTypes

ONEWAY_VALUES = frozenset({"yes", "1", "-1"})
REVERSED_ONEWAY = "-1"


@dataclass
class CorrectionReport:
    entrance_replaced: bool = False
    highway_aux: List[TypeCode] = field(default_factory=list)


class PostCorrector:
    """Rules that rewrite the type list once matching is finished."""

    def __init__(self, taxonomy: TaxonomyCapability, well_known: WellKnownTypes) -> None:
        self._taxonomy = taxonomy
        self._types = well_known

    def apply(self, tags: TagSet, params: FeatureParams) -> CorrectionReport:
        report = CorrectionReport()
        report.entrance_replaced = self.fix_entrance(params)
        report.highway_aux = self.add_highway_tags(tags, params)
        return report

    def fix_entrance(self, params: FeatureParams) -> bool:
        """Turn an entrance with a house number or name into an address point.

        Entrances display their ref, so the collected names are dropped.
        """
        if self._types.entrance is None or self._types.address is None:
            return False
        if not (params.house_number or params.house_name):
            return False
        if not params.pop_exact_type(self._types.entrance):
            return False
        params.clear_names()
        params.add_type(self._types.address)
        return True

    def add_highway_tags(self, tags: TagSet, params: FeatureParams) -> List[TypeCode]:
        """Add oneway/private/lit auxiliary types to the first highway type.

        Reads every tag regardless of consumption.
        """
        if not any(self._types.is_highway(code, self._taxonomy) for code in params.types):
            return []

        found = {"oneway": False, "reversed": False, "private": False, "lit": False}

        def scan(_index: int, tag: Tag) -> None:
            if tag.key == "oneway" and tag.value in ONEWAY_VALUES:
                found["oneway"] = True
                if tag.value == REVERSED_ONEWAY:
                    found["reversed"] = True
            elif tag.key == "access" and tag.value == "private":
                found["private"] = True
            elif tag.key == "lit" and tag.value == "yes":
                found["lit"] = True

        tags.for_each(scan)

        added: List[TypeCode] = []
        if found["private"] and self._types.private is not None and params.add_type(self._types.private):
            added.append(self._types.private)
        if found["lit"] and self._types.lit is not None and params.add_type(self._types.lit):
            added.append(self._types.lit)
        if found["oneway"]:
            if self._types.oneway is not None and params.add_type(self._types.oneway):
                added.append(self._types.oneway)
            if found["reversed"]:
                params.reverse_geometry = True
        return added
