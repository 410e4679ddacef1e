"""Discovery of taxonomy paths over the unconsumed tags of a feature."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

import structlog

from geotype.classify.params import FeatureParams
from geotype.tags.tagset import Mark, Tag, TagSet, mark_value
from geotype.taxonomy.classificator import NodePtr, TaxonomyCapability, TypePath
from geotype.taxonomy.codes import TypeCode

LOGGER = structlog.get_logger(__name__)

DEFAULT_MAX_PATH_DEPTH = 3


def is_name_tag(key: str) -> bool:
    return "name" in key


def is_plain_number(value: str) -> bool:
    return value.isascii() and value.isdigit()


@dataclass(frozen=True)
class MatchRules:
    """Which tags may act as classification tokens.

    When matching by key, ``affirmative_keys`` only match when their value
    reads as "yes" (so ``capital=yes`` is taken and ``capital=4`` is not).
    When matching by value, plain numbers only match for ``numeric_keys``;
    numbers are used by boundary-administrative-N types and anything else
    numeric is noise. Name keys match at neither level.
    """

    affirmative_keys: FrozenSet[str] = field(default_factory=lambda: frozenset({"capital"}))
    numeric_keys: FrozenSet[str] = field(default_factory=lambda: frozenset({"admin_level"}))
    max_path_depth: int = DEFAULT_MAX_PATH_DEPTH

    @classmethod
    def from_iterables(
        cls,
        *,
        affirmative_keys: Iterable[str],
        numeric_keys: Iterable[str],
        max_path_depth: int = DEFAULT_MAX_PATH_DEPTH,
    ) -> "MatchRules":
        return cls(
            affirmative_keys=frozenset(affirmative_keys),
            numeric_keys=frozenset(numeric_keys),
            max_path_depth=max_path_depth,
        )

    def is_good_tag(self, key: str, value: str, *, by_key: bool) -> bool:
        """Return True when the tag may name a child when matching by key or by value."""
        if is_name_tag(key):
            return False
        if by_key:
            if key in self.affirmative_keys:
                return mark_value(key, value) == Mark.AFFIRMATIVE
            return True
        if is_plain_number(value):
            return key in self.numeric_keys
        return True


@dataclass
class MatchOutcome:
    assigned: List[TypeCode] = field(default_factory=list)
    not_drawable: List[TypeCode] = field(default_factory=list)


class TypeMatcher:
    """Repeatedly anchors a path at the taxonomy root and extends it.

    Every iteration consumes the tag whose key matched at the root, so a tag
    anchors at most one path and the loop is bounded by the tag count.
    """

    def __init__(self, taxonomy: TaxonomyCapability, rules: Optional[MatchRules] = None) -> None:
        self._taxonomy = taxonomy
        self._rules = rules or MatchRules()

    def find_object(self, parent: int, tags: TagSet, by_key: bool) -> Optional[NodePtr]:
        """Return the first child of ``parent`` named by an unconsumed tag's key or value."""

        def visit(_index: int, tag: Tag) -> Optional[NodePtr]:
            if not self._rules.is_good_tag(tag.key, tag.value, by_key=by_key):
                return None
            if by_key:
                return self._taxonomy.find_child_by_key(parent, tag.key)
            return self._taxonomy.find_child_by_value(parent, tag.value)

        return tags.for_each_unconsumed(visit)

    def find_root(self, tags: TagSet) -> TypePath:
        """Anchor a new path on the first unconsumed tag whose key is a root token."""
        root = self._taxonomy.get_root()
        path: TypePath = []

        def visit(index: int, tag: Tag) -> Optional[bool]:
            if not self._rules.is_good_tag(tag.key, tag.value, by_key=True):
                return None
            ptr = self._taxonomy.find_child_by_key(root, tag.key)
            if ptr is None:
                return None
            path.append(ptr)
            # The same tag's value usually names the second level: highway=primary.
            value_ok = self._rules.is_good_tag(tag.key, tag.value, by_key=False)
            if len(path) < self._rules.max_path_depth and value_ok:
                child = self._taxonomy.find_child_by_value(ptr.node, tag.value)
                if child is not None:
                    path.append(child)
            tags.consume(index)
            return True

        tags.for_each_unconsumed(visit)
        return path

    def extend(self, path: TypePath, tags: TagSet) -> TypePath:
        while len(path) < self._rules.max_path_depth:
            parent = path[-1].node
            # Leaves are more often named by values; keys cover [area=yes] style tags.
            ptr = self.find_object(parent, tags, by_key=False)
            if ptr is None:
                ptr = self.find_object(parent, tags, by_key=True)
            if ptr is None:
                break
            path.append(ptr)
        return path

    def match(self, tags: TagSet, params: FeatureParams) -> MatchOutcome:
        """Add every drawable type found in the tags to ``params``."""
        outcome = MatchOutcome()
        while True:
            path = self.find_root(tags)
            if not path:
                break
            self.extend(path, tags)
            code = self._taxonomy.encode_path(path)
            if not self._taxonomy.is_drawable(code):
                # No partial credit: a shorter prefix is not tried instead.
                outcome.not_drawable.append(code)
                LOGGER.debug("type_not_drawable", type=self._taxonomy.readable_name(code))
                continue
            if params.add_type(code):
                outcome.assigned.append(code)
        return outcome
