"""Type codes with a fixed meaning, resolved once per taxonomy load."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import structlog

from geotype.taxonomy.classificator import TaxonomyCapability, UnknownTypePath
from geotype.taxonomy.codes import TypeCode

LOGGER = structlog.get_logger(__name__)

WELL_KNOWN_PATHS: Dict[str, Tuple[str, ...]] = {
    "entrance": ("entrance",),
    "highway": ("highway",),
    "address": ("building", "address"),
    "oneway": ("hwtag", "oneway"),
    "private": ("hwtag", "private"),
    "lit": ("hwtag", "lit"),
    "boundary_administrative": ("boundary", "administrative"),
}


@dataclass(frozen=True)
class WellKnownTypes:
    """Codes used by the post-correction rules.

    A field is None when the taxonomy has no such path; rules depending on
    it are then skipped. ``boundary_administrative`` is resolved for
    inspection only; no classification rule reads it.
    """

    entrance: Optional[TypeCode] = None
    highway: Optional[TypeCode] = None
    address: Optional[TypeCode] = None
    oneway: Optional[TypeCode] = None
    private: Optional[TypeCode] = None
    lit: Optional[TypeCode] = None
    boundary_administrative: Optional[TypeCode] = None

    @classmethod
    def resolve(cls, taxonomy: TaxonomyCapability) -> "WellKnownTypes":
        resolved: Dict[str, Optional[TypeCode]] = {}
        for name, tokens in WELL_KNOWN_PATHS.items():
            try:
                resolved[name] = taxonomy.lookup_path(tokens)
            except UnknownTypePath:
                LOGGER.warning("well_known_type_missing", type=name, path="-".join(tokens))
                resolved[name] = None
        return cls(**resolved)

    def is_highway(self, code: TypeCode, taxonomy: TaxonomyCapability) -> bool:
        """Return True when the code is the highway root or one of its subtypes."""
        if self.highway is None:
            return False
        return taxonomy.truncate(code, 1) == self.highway
