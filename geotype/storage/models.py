"""Pydantic models for classified output records."""
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from geotype.classify.params import FeatureParams
from geotype.taxonomy.classificator import TaxonomyCapability


class ClassifiedFeature(BaseModel):
    """One accepted feature as handed to rendering and indexing stages."""

    id: Union[str, int]
    types: List[int] = Field(default_factory=list, description="Packed taxonomy type codes")
    type_names: List[str] = Field(default_factory=list, description="Readable names, e.g. highway-primary")
    names: Dict[str, str] = Field(default_factory=dict)
    house_number: Optional[str] = None
    house_name: Optional[str] = None
    street: Optional[str] = None
    flats: Optional[str] = None
    layer: int = Field(default=0, ge=-10, le=10)
    ref: Optional[str] = None
    rank: int = Field(default=0, ge=0, le=255)
    reverse_geometry: bool = False

    @classmethod
    def from_params(
        cls,
        feature_id: Union[str, int],
        params: FeatureParams,
        taxonomy: TaxonomyCapability,
    ) -> "ClassifiedFeature":
        payload = params.to_dict()
        return cls(
            id=feature_id,
            type_names=[taxonomy.readable_name(code) for code in params.types],
            **payload,
        )
