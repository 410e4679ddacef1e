"""Read-only taxonomy (classificator) stored as an arena of indexed nodes."""
from __future__ import annotations

import bisect
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Protocol, Sequence, Tuple

import yaml

from geotype.taxonomy import codes
from geotype.taxonomy.codes import TypeCode

PATH_SEPARATOR = "-"


class TaxonomyError(Exception):
    """The taxonomy broke its contract or its definition is inconsistent."""


class UnknownTypePath(TaxonomyError, KeyError):
    """A token path does not exist in the taxonomy."""


class NodePtr(NamedTuple):
    """A matched node together with its position among its siblings."""

    node: int
    index: int


TypePath = List[NodePtr]


class TaxonomyCapability(Protocol):
    """Operations the classification run needs from a taxonomy."""

    def get_root(self) -> int: ...

    def find_child_by_key(self, node: int, token: str) -> Optional[NodePtr]: ...

    def find_child_by_value(self, node: int, token: str) -> Optional[NodePtr]: ...

    def encode_path(self, path: Sequence[NodePtr]) -> TypeCode: ...

    def truncate(self, code: TypeCode, levels: int) -> TypeCode: ...

    def is_drawable(self, code: TypeCode) -> bool: ...

    def lookup_path(self, tokens: Sequence[str]) -> TypeCode: ...

    def readable_name(self, code: TypeCode) -> str: ...


class Taxonomy:
    """Immutable n-ary tree whose nodes are addressed by integer index.

    Node 0 is the root. Children of each node are sorted by token, so a
    child's sibling index is its rank in that order and lookups are binary
    searches. Instances are never mutated after construction and can be
    shared by any number of classification runs.
    """

    ROOT = 0

    def __init__(self, tree: Dict[str, object], nodraw: Sequence[str] = ()) -> None:
        self._tokens: List[str] = [""]
        self._children: List[List[int]] = [[]]
        self._child_tokens: List[List[str]] = [[]]
        self._drawable: List[bool] = [False]
        self._build(self.ROOT, tree, 0)
        for path in nodraw:
            node = self._node_for_tokens(str(path).split(PATH_SEPARATOR))
            self._drawable[node] = False

    def _build(self, parent: int, subtree: Optional[Dict[str, object]], level: int) -> None:
        if subtree is None:
            return
        if level >= codes.MAX_LEVELS:
            raise TaxonomyError(f"Taxonomy is deeper than {codes.MAX_LEVELS} levels below {self._tokens[parent]!r}")
        if not isinstance(subtree, dict):
            raise TaxonomyError(f"Children of {self._tokens[parent]!r} must be a mapping")
        entries: List[Tuple[str, object]] = sorted(
            ((str(token), child) for token, child in subtree.items()), key=lambda entry: entry[0]
        )
        for position, (token, _) in enumerate(entries):
            if position and entries[position - 1][0] == token:
                raise TaxonomyError(f"Duplicate token {token!r} under {self._tokens[parent]!r}")
        if len(entries) > codes.MAX_SIBLING_INDEX + 1:
            raise TaxonomyError(f"Too many children under {self._tokens[parent]!r}: {len(entries)}")
        for token, child in entries:
            node = len(self._tokens)
            self._tokens.append(token)
            self._children.append([])
            self._child_tokens.append([])
            self._drawable.append(True)
            self._children[parent].append(node)
            self._child_tokens[parent].append(token)
            self._build(node, child, level + 1)

    def __len__(self) -> int:
        return len(self._tokens) - 1

    def get_root(self) -> int:
        return self.ROOT

    def token(self, node: int) -> str:
        return self._tokens[node]

    def find_child(self, node: int, token: str) -> Optional[NodePtr]:
        """Binary search for the child with exactly this token."""
        tokens = self._child_tokens[node]
        position = bisect.bisect_left(tokens, token)
        if position < len(tokens) and tokens[position] == token:
            return NodePtr(self._children[node][position], position)
        return None

    def find_child_by_key(self, node: int, token: str) -> Optional[NodePtr]:
        return self.find_child(node, token)

    def find_child_by_value(self, node: int, token: str) -> Optional[NodePtr]:
        return self.find_child(node, token)

    def encode_path(self, path: Sequence[NodePtr]) -> TypeCode:
        """Pack the sibling indices of a matched path into a type code."""
        parent = self.ROOT
        for ptr in path:
            children = self._children[parent]
            if not 0 <= ptr.index < len(children) or children[ptr.index] != ptr.node:
                raise TaxonomyError(f"Node {ptr.node} is not child #{ptr.index} of node {parent}")
            parent = ptr.node
        try:
            return codes.pack(ptr.index for ptr in path)
        except codes.CodeError as exc:
            raise TaxonomyError(str(exc)) from exc

    def truncate(self, code: TypeCode, levels: int) -> TypeCode:
        return codes.truncate(code, levels)

    def node_for_code(self, code: TypeCode) -> int:
        node = self.ROOT
        for index in codes.split_code(code):
            children = self._children[node]
            if index >= len(children):
                raise TaxonomyError(f"Type code {code} does not address a taxonomy node")
            node = children[index]
        return node

    def is_drawable(self, code: TypeCode) -> bool:
        """Return True when the type addressed by the code has drawing rules."""
        return self._drawable[self.node_for_code(code)]

    def _node_for_tokens(self, tokens: Sequence[str]) -> int:
        node = self.ROOT
        for token in tokens:
            ptr = self.find_child(node, token)
            if ptr is None:
                raise UnknownTypePath(PATH_SEPARATOR.join(tokens))
            node = ptr.node
        return node

    def lookup_path(self, tokens: Sequence[str]) -> TypeCode:
        """Resolve a token path such as ``["hwtag", "oneway"]`` to its code."""
        path: TypePath = []
        node = self.ROOT
        for token in tokens:
            ptr = self.find_child(node, token)
            if ptr is None:
                raise UnknownTypePath(PATH_SEPARATOR.join(tokens))
            path.append(ptr)
            node = ptr.node
        return self.encode_path(path)

    def readable_name(self, code: TypeCode) -> str:
        """Return the dash-joined token path of the code, e.g. ``highway-primary``."""
        node = self.ROOT
        tokens: List[str] = []
        for index in codes.split_code(code):
            children = self._children[node]
            if index >= len(children):
                raise TaxonomyError(f"Type code {code} does not address a taxonomy node")
            node = children[index]
            tokens.append(self._tokens[node])
        return PATH_SEPARATOR.join(tokens)

    def iter_codes(self) -> Iterator[Tuple[str, TypeCode, bool]]:
        """Yield ``(name, code, drawable)`` for every node in depth-first order."""
        stack: List[Tuple[int, TypeCode, str]] = [(self.ROOT, codes.EMPTY_CODE, "")]
        while stack:
            node, code, name = stack.pop()
            if node != self.ROOT:
                yield name, code, self._drawable[node]
            for index in reversed(range(len(self._children[node]))):
                child = self._children[node][index]
                child_name = f"{name}{PATH_SEPARATOR}{self._tokens[child]}" if name else self._tokens[child]
                stack.append((child, codes.push_value(code, index), child_name))


def load_taxonomy(path: Path) -> Taxonomy:
    """Build a taxonomy from its YAML definition."""
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict) or not isinstance(data.get("classificator"), dict):
        raise TaxonomyError(f"Taxonomy file {path} has no 'classificator' mapping")
    return Taxonomy(data["classificator"], nodraw=data.get("nodraw") or ())
