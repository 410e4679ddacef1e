"""Command-line entrypoints for the feature typing stage."""
from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from geotype.classify.matcher import MatchRules
from geotype.classify.pipeline import FeatureClassifier, is_valid_types
from geotype.observability.log import configure_logging
from geotype.observability.metrics import MetricsRegistry, record_duration
from geotype.quality.quarantine import Quarantine
from geotype.quality.validate import SchemaRegistry
from geotype.settings import Settings, load_settings, settings_path
from geotype.storage.models import ClassifiedFeature
from geotype.storage.writers import FeatureWriter, read_features
from geotype.tags.tagset import TagSet
from geotype.taxonomy.classificator import PATH_SEPARATOR, Taxonomy, TaxonomyError, load_taxonomy
from geotype.taxonomy.well_known import WELL_KNOWN_PATHS


def build_arg_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(prog="geotype", description="Classify map feature tags against a taxonomy")
    parser.add_argument("--settings", help="Path to settings TOML (default: $GEOTYPE_SETTINGS or config/settings.toml)")
    parser.add_argument("--taxonomy", help="Override the taxonomy YAML path")
    sub = parser.add_subparsers(dest="command", required=True)

    classify = sub.add_parser("classify", help="Classify a JSONL file of tagged features")
    classify.add_argument("--input", required=True, help="JSONL file with {id, tags} records")
    classify.add_argument("--output", required=True, help="JSONL file for classified features")
    classify.add_argument("--run-id", help="Identifier used for the metrics file")

    explain = sub.add_parser("explain", help="Classify one tag set and show how it was read")
    explain.add_argument("--tag", action="append", default=[], metavar="KEY=VALUE", help="Tag, repeatable and ordered")

    inspect = sub.add_parser("inspect-taxonomy", help="Show type codes of the taxonomy")
    inspect.add_argument("--path", help="Dash-joined token path, e.g. highway-primary")
    inspect.add_argument("--all", action="store_true", help="List every node")

    return parser


def _load_taxonomy(settings: Settings, override: Optional[str]) -> Taxonomy:
    path = Path(override) if override else settings.app.taxonomy_path
    try:
        return load_taxonomy(path)
    except (OSError, TaxonomyError) as exc:
        raise SystemExit(f"Failed to load taxonomy {path}: {exc}")


def build_classifier(settings: Settings, taxonomy: Taxonomy, metrics: Optional[MetricsRegistry] = None) -> FeatureClassifier:
    rules = MatchRules.from_iterables(
        affirmative_keys=settings.classifier.affirmative_keys,
        numeric_keys=settings.classifier.numeric_keys,
        max_path_depth=settings.classifier.max_path_depth,
    )
    return FeatureClassifier(
        taxonomy,
        rules=rules,
        max_types_count=settings.classifier.max_types_count,
        metrics=metrics,
    )


def _parse_tag(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep:
        raise SystemExit(f"Tag must look like KEY=VALUE: {text!r}")
    return key, value


def run_classify(args: argparse.Namespace, settings: Settings) -> Dict[str, object]:
    """Execute the classify command end-to-end and return the run summary."""
    taxonomy = _load_taxonomy(settings, args.taxonomy)
    metrics = MetricsRegistry()
    classifier = build_classifier(settings, taxonomy, metrics)
    schemas = SchemaRegistry(settings.app.schema_dir)
    quarantine = Quarantine(settings.app.quarantine_dir)
    writer = FeatureWriter(Path(args.output))
    run_id = args.run_id or datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")

    with record_duration(metrics, "run_duration_ms"):
        records = read_features(Path(args.input), schemas=schemas, quarantine=quarantine)
        accepted = classifier.classify_many((record.feature_id, record.tags) for record in records)
        writer.write_all(
            ClassifiedFeature.from_params(item.feature_id, item.params, taxonomy) for item in accepted
        )
    metrics.incr("records_rejected", quarantine.count)
    metrics_path = metrics.export(path=settings.app.metrics_dir / f"run_{run_id}.json", run_id=run_id)

    return {
        "run_id": run_id,
        "written": writer.written,
        "omitted": metrics.get("features_omitted"),
        "rejected": quarantine.count,
        "metrics": str(metrics_path),
    }


def run_explain(args: argparse.Namespace, settings: Settings) -> Dict[str, object]:
    taxonomy = _load_taxonomy(settings, args.taxonomy)
    classifier = build_classifier(settings, taxonomy)
    tags = TagSet(_parse_tag(text) for text in args.tag)
    params = classifier.get_name_and_type(tags)
    return {
        "tags": tags.describe(),
        "valid": is_valid_types(params),
        "feature": ClassifiedFeature.from_params("explain", params, taxonomy).model_dump(),
    }


def run_inspect(args: argparse.Namespace, settings: Settings) -> List[Dict[str, object]]:
    taxonomy = _load_taxonomy(settings, args.taxonomy)
    if args.all:
        return [{"path": name, "code": code, "drawable": drawable} for name, code, drawable in taxonomy.iter_codes()]
    if args.path:
        paths = {args.path: tuple(args.path.split(PATH_SEPARATOR))}
    else:
        paths = dict(WELL_KNOWN_PATHS)
    rows: List[Dict[str, object]] = []
    for label, tokens in paths.items():
        try:
            code = taxonomy.lookup_path(tokens)
        except TaxonomyError:
            rows.append({"path": label, "code": None, "drawable": False})
            continue
        rows.append({"path": label, "code": code, "drawable": taxonomy.is_drawable(code)})
    return rows


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    load_dotenv()
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings(settings_path(args.settings))
    except ValidationError as exc:
        raise SystemExit(f"Invalid settings: {exc}")
    configure_logging(settings.app.logging_config)

    if args.command == "classify":
        print(json.dumps(run_classify(args, settings), indent=2))
        return

    if args.command == "explain":
        print(json.dumps(run_explain(args, settings), indent=2, ensure_ascii=False))
        return

    if args.command == "inspect-taxonomy":
        print(json.dumps(run_inspect(args, settings), indent=2))
        return


if __name__ == "__main__":
    main()
