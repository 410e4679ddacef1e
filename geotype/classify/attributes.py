"""Extraction of names, address parts, layer, ref and population rank."""
from __future__ import annotations

import math
import re
import unicodedata
from typing import Callable, Optional

from geotype.classify.params import FeatureParams
from geotype.tags.tagset import Tag, TagSet

Normalizer = Callable[[str], str]

_LANG_SPLIT_RE = re.compile(r"[\t :]")
_ATOI_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_RANK_BASE = math.log(1.1)

# Historical mislabelings of language suffixes.
LANGUAGE_FIXUPS = {"ar1": "ar"}


def nfkc(text: str) -> str:
    """Compatibility decomposition followed by canonical composition."""
    return unicodedata.normalize("NFKC", text)


def language_for_key(key: str) -> Optional[str]:
    """Return the name language encoded in the key, or None for non-name keys."""
    tokens = [token for token in _LANG_SPLIT_RE.split(key) if token]
    if not tokens:
        return None
    if tokens[0] == "int_name":
        return "int_name"
    if tokens[0] != "name":
        return None
    lang = tokens[1] if len(tokens) > 1 else "default"
    return LANGUAGE_FIXUPS.get(lang, lang)


def parse_layer(value: str) -> int:
    """Parse a leading integer the way C ``atoi`` does; garbage yields 0."""
    match = _ATOI_RE.match(value)
    return int(match.group(1)) if match else 0


def parse_population(value: str) -> Optional[int]:
    if not value.isascii() or not value.isdigit():
        return None
    return int(value)


def population_rank(population: int) -> int:
    if population <= 0:
        return 0
    return int(math.log(population) / _RANK_BASE)


class AttributeExtractor:
    """Collects non-type attributes of a feature in a single traversal."""

    def __init__(self, normalize: Normalizer = nfkc) -> None:
        self._normalize = normalize

    def process(self, tags: TagSet, params: FeatureParams) -> int:
        """Fill ``params`` from the tags and return how many tags were inspected."""
        count = 0

        def visit(_index: int, tag: Tag) -> None:
            nonlocal count
            count += 1
            if tag.value:
                self._apply(tag.key, tag.value, params)

        tags.for_each_unconsumed(visit)
        return count

    def _apply(self, key: str, value: str, params: FeatureParams) -> None:
        lang = language_for_key(key)
        if lang is not None and lang not in params.names:
            params.add_name(lang, self._normalize(value))

        if key == "layer" and not params.layer_set:
            params.set_layer(parse_layer(value))

        # Only road numbers are of interest.
        if key == "ref" and value != "route":
            params.ref = value

        if key == "addr:housenumber":
            if not params.add_house_number(value):
                params.add_house_name(value)
        elif key == "addr:housename":
            params.add_house_name(value)
        elif key == "addr:street":
            params.add_street(value)
        elif key == "addr:flats":
            params.flats = value

        if key == "population":
            population = parse_population(value)
            if population:
                params.set_rank(population_rank(population))


def process_common_params(tags: TagSet, params: FeatureParams, normalize: Normalizer = nfkc) -> int:
    return AttributeExtractor(normalize).process(tags, params)
