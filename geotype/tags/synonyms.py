"""Rewriting of synonym tags and layer inference, run before any matching."""
from __future__ import annotations

from typing import Dict, Optional

from geotype.tags.tagset import Tag, TagSet

# [atm=yes] is the same thing as [amenity=atm].
SYNONYMS: Dict[str, str] = {
    "atm": "amenity",
    "restaurant": "amenity",
    "hotel": "tourism",
}


def replace_synonyms(tags: TagSet, synonyms: Optional[Dict[str, str]] = None) -> int:
    """Rewrite ``<key>=yes`` into ``<canonical>=<key>`` in place.

    Returns the number of rewritten tags.
    """
    table = SYNONYMS if synonyms is None else synonyms
    rewritten = 0

    def rewrite(index: int, tag: Tag) -> None:
        nonlocal rewritten
        if tag.value == "yes" and tag.key in table:
            tags.rewrite(index, Tag(table[tag.key], tag.key))
            rewritten += 1

    tags.for_each(rewrite)
    return rewritten


def add_layers(tags: TagSet) -> Optional[str]:
    """Append a layer tag for bridges and tunnels without an explicit layer.

    Returns the synthesized layer value, if any.
    """
    found = {"bridge": False, "tunnel": False, "layer": False}

    def scan(_index: int, tag: Tag) -> None:
        if tag.key == "layer":
            found["layer"] = True
        elif tag.key in ("bridge", "tunnel") and tag.value == "yes":
            found[tag.key] = True

    tags.for_each(scan)
    if found["layer"]:
        return None
    if found["bridge"]:
        tags.append("layer", "1")
        return "1"
    if found["tunnel"]:
        tags.append("layer", "-1")
        return "-1"
    return None
