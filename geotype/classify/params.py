"""Accumulator for the result of classifying one feature."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog

from geotype.taxonomy.codes import TypeCode

LOGGER = structlog.get_logger(__name__)

MAX_TYPES_COUNT = 7
LAYER_BOUND = 10
MAX_RANK = 255


@dataclass
class FeatureParams:
    """Types and attributes collected for one feature.

    Owned by a single classification run and handed to the caller when the
    run completes.
    """

    types: List[TypeCode] = field(default_factory=list)
    names: Dict[str, str] = field(default_factory=dict)
    house_number: Optional[str] = None
    house_name: Optional[str] = None
    street: Optional[str] = None
    flats: Optional[str] = None
    layer: int = 0
    layer_set: bool = False
    ref: Optional[str] = None
    rank: int = 0
    reverse_geometry: bool = False
    max_types_count: int = MAX_TYPES_COUNT
    dropped_types: List[TypeCode] = field(default_factory=list)

    def add_type(self, code: TypeCode) -> bool:
        """Append a type code unless it is already present or the list is full."""
        if code in self.types:
            return False
        if len(self.types) >= self.max_types_count:
            self.dropped_types.append(code)
            LOGGER.warning("type_overflow", type=code, limit=self.max_types_count)
            return False
        self.types.append(code)
        return True

    def pop_exact_type(self, code: TypeCode) -> bool:
        """Remove the code if present and report whether it was."""
        if code in self.types:
            self.types.remove(code)
            return True
        return False

    def add_name(self, lang: str, value: str) -> bool:
        """Record a name for the language; the first write per language wins."""
        if not lang or not value or lang in self.names:
            return False
        self.names[lang] = value
        return True

    def clear_names(self) -> None:
        self.names.clear()

    def set_layer(self, layer: int) -> bool:
        if self.layer_set:
            return False
        self.layer = max(-LAYER_BOUND, min(LAYER_BOUND, layer))
        self.layer_set = True
        return True

    def add_house_number(self, value: str) -> bool:
        """Store the value as a house number when it is a plain number."""
        if not is_house_number(value):
            return False
        self.house_number = value
        return True

    def add_house_name(self, value: str) -> None:
        self.house_name = value

    def add_street(self, value: str) -> None:
        self.street = value

    def set_rank(self, rank: int) -> None:
        self.rank = max(0, min(MAX_RANK, rank))

    @property
    def has_address(self) -> bool:
        return bool(self.house_number or self.house_name or self.street)

    def is_valid(self) -> bool:
        """A feature is kept when it has a type, a name or an address part."""
        return bool(self.types) or bool(self.names) or self.has_address

    def is_empty(self) -> bool:
        return self == FeatureParams(max_types_count=self.max_types_count)

    def to_dict(self) -> Dict[str, object]:
        return {
            "types": list(self.types),
            "names": dict(self.names),
            "house_number": self.house_number,
            "house_name": self.house_name,
            "street": self.street,
            "flats": self.flats,
            "layer": self.layer,
            "ref": self.ref,
            "rank": self.rank,
            "reverse_geometry": self.reverse_geometry,
        }


def is_house_number(value: str) -> bool:
    return bool(value) and value.isascii() and value.isdigit()
