"""Ordered tag container shared by every classification pass."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple, TypeVar, Union

T = TypeVar("T")

AFFIRMATIVE_VALUES = frozenset({"yes", "true", "1", "*"})
NEGATIVE_VALUES = frozenset({"no", "false", "-1"})
# Keys where "no" and "-1" are meaningful data rather than a negation.
NEGATION_EXEMPT_KEYS = frozenset({"layer", "oneway"})

# Keys that lead to wrong compound types when matched next to a sibling tag:
# [highway=primary][cycleway=lane] would read as highway=cycleway,
# [highway=proposed][proposed=primary] as highway=primary.
SKIP_KEYS = frozenset({"created_by", "description", "cycleway", "proposed", "construction"})


class Mark(enum.IntEnum):
    """Interpretation of a tag value as a yes/no flag."""

    NEGATIVE = -1
    NEUTRAL = 0
    AFFIRMATIVE = 1


def mark_value(key: str, value: str) -> Mark:
    """Classify a tag value as affirmative, negative or neutral."""
    for token in value.split("|"):
        if token in AFFIRMATIVE_VALUES:
            return Mark.AFFIRMATIVE
        if key not in NEGATION_EXEMPT_KEYS and token in NEGATIVE_VALUES:
            return Mark.NEGATIVE
    # "~" marks an intentionally absent tag.
    if value == "~":
        return Mark.AFFIRMATIVE if key == "access" else Mark.NEGATIVE
    return Mark.NEUTRAL


def is_skip_tag(key: str) -> bool:
    return key in SKIP_KEYS


@dataclass(frozen=True)
class Tag:
    """A single raw key/value pair."""

    key: str
    value: str


Visitor = Callable[[int, Tag], Optional[T]]


class TagSet:
    """Tags of one feature in source order plus the indices already consumed.

    The consumed set only grows during a classification run. Traversals skip
    empty keys, deny-listed keys and negated tags, so every pass sees the same
    filtered view.
    """

    def __init__(self, tags: Iterable[Union[Tag, Tuple[str, str]]] = ()) -> None:
        self._tags: List[Tag] = [tag if isinstance(tag, Tag) else Tag(str(tag[0]), str(tag[1])) for tag in tags]
        self._consumed: Set[int] = set()

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags)

    def __getitem__(self, index: int) -> Tag:
        return self._tags[index]

    def __repr__(self) -> str:
        return f"TagSet({self.as_pairs()!r})"

    def as_pairs(self) -> List[Tuple[str, str]]:
        return [(tag.key, tag.value) for tag in self._tags]

    def append(self, key: str, value: str) -> int:
        """Add a synthesized tag at the end and return its index."""
        self._tags.append(Tag(key, value))
        return len(self._tags) - 1

    def rewrite(self, index: int, tag: Tag) -> None:
        """Replace the tag at ``index`` in place, keeping its position."""
        self._tags[index] = tag

    def consume(self, index: int) -> None:
        self._consumed.add(index)

    def is_consumed(self, index: int) -> bool:
        return index in self._consumed

    @property
    def consumed(self) -> frozenset:
        return frozenset(self._consumed)

    def fresh_copy(self) -> "TagSet":
        """Return the same tags with an empty consumed set."""
        return TagSet(self._tags)

    def _walk(self, visitor: Visitor, skip_consumed: bool) -> Optional[T]:
        for index, tag in enumerate(self._tags):
            if skip_consumed and index in self._consumed:
                continue
            if not tag.key or is_skip_tag(tag.key):
                continue
            if mark_value(tag.key, tag.value) == Mark.NEGATIVE:
                continue
            result = visitor(index, tag)
            if result is not None:
                return result
        return None

    def for_each_unconsumed(self, visitor: Visitor) -> Optional[T]:
        """Visit filtered, unconsumed tags in order until the visitor returns a value."""
        return self._walk(visitor, skip_consumed=True)

    def for_each(self, visitor: Visitor) -> Optional[T]:
        """Like :meth:`for_each_unconsumed` but ignoring consumption."""
        return self._walk(visitor, skip_consumed=False)

    def describe(self) -> List[str]:
        """List the tags a traversal would visit, as ``key <---> value`` lines."""
        lines: List[str] = []

        def collect(_index: int, tag: Tag) -> None:
            lines.append(f"{tag.key} <---> {tag.value}")

        self.for_each(collect)
        return lines
