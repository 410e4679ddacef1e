"""JSONL input and output for feature records."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

import orjson

from geotype.quality.quarantine import Quarantine
from geotype.quality.validate import FEATURE_SCHEMA, SchemaRegistry
from geotype.storage.models import ClassifiedFeature


@dataclass
class FeatureRecord:
    """A validated input line: feature id and its tags in source order."""

    feature_id: Union[str, int]
    tags: List[Tuple[str, str]]
    line: int


def tag_pairs(tags: object) -> List[Tuple[str, str]]:
    """Convert the ``tags`` member of a record to ordered pairs."""
    if isinstance(tags, dict):
        return [(str(key), str(value)) for key, value in tags.items()]
    return [(str(pair[0]), str(pair[1])) for pair in tags]


def read_features(
    path: Path,
    *,
    schemas: SchemaRegistry,
    quarantine: Optional[Quarantine] = None,
) -> Iterator[FeatureRecord]:
    """Yield valid records from a JSONL file; malformed lines go to quarantine."""
    with path.open("rb") as handle:
        for line_no, raw in enumerate(handle, start=1):
            if not raw.strip():
                continue
            try:
                record = orjson.loads(raw)
            except orjson.JSONDecodeError as exc:
                if quarantine is not None:
                    quarantine.reject(record=raw.decode("utf-8", "replace"), reason=[str(exc)], line=line_no)
                continue
            result = schemas.validate(FEATURE_SCHEMA, record)
            if not result.ok:
                if quarantine is not None:
                    quarantine.reject(record=record, reason=result.errors, line=line_no)
                continue
            yield FeatureRecord(feature_id=record["id"], tags=tag_pairs(record["tags"]), line=line_no)


class FeatureWriter:
    """Appends classified features to a JSONL file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._written = 0

    @property
    def written(self) -> int:
        return self._written

    def write_all(self, features: Iterable[ClassifiedFeature]) -> int:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("wb") as handle:
            for feature in features:
                handle.write(orjson.dumps(feature.model_dump()))
                handle.write(b"\n")
                self._written += 1
        return self._written
