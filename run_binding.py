"""
Command-line runner that binds a CSV table to an SVG map without the API.

Usage:
  PYTHONPATH=. python run_binding.py \
    --table data/population.csv \
    --geometry maps/us-states.svg \
    --scheme viridis --method quantile --buckets 5 \
    --output-prefix results/population
"""

import argparse
import json
from pathlib import Path

import yaml

from choropleth.binding.session import BindingSession


def load_aliases(path: Path) -> dict:
    """Read an alias table (YAML mapping of alias -> region id)."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Alias file must contain a mapping: {path}")
    return {str(k): str(v) for k, v in data.items()}


def run_binding(args: argparse.Namespace) -> None:
    session = BindingSession(title=args.title or "")
    validation = session.load_table(args.table.read_bytes(), filename=args.table.name)
    for warning in validation.warnings:
        print(f"Warning: {warning}")
    if not validation.is_valid:
        raise SystemExit(f"Table is invalid: {'; '.join(validation.errors)}")

    candidates = session.load_geometry(args.geometry.read_bytes(), filename=args.geometry.name)
    print(f"Found {len(candidates)} regions in {args.geometry}")

    changes = {
        "method": args.method,
        "buckets": args.buckets,
        "classify_values": not args.no_classify,
    }
    if args.region_column:
        changes["region_column"] = args.region_column
    if args.value_column:
        changes["value_column"] = args.value_column
    if args.colors:
        changes["custom_colors"] = [c.strip() for c in args.colors.split(",") if c.strip()]
    elif args.scheme:
        changes["scheme_id"] = args.scheme
    if args.breaks:
        changes["manual_breaks"] = [float(b) for b in args.breaks.split(",")]
    if args.aliases:
        changes["aliases"] = load_aliases(args.aliases)
    session.update_settings(**changes)

    result = session.recompute()
    matched = sum(1 for m in result.matches if m.is_matched)
    print(f"Matched {matched}/{len(result.matches)} region names")
    for name in result.unmatched:
        suggestions = ", ".join(f"{s.match} ({s.confidence:.2f})" for s in result.matches_by_name[name].suggestions)
        print(f"  unmatched: {name}" + (f" -> suggestions: {suggestions}" if suggestions else ""))
    if result.classification:
        for label, color in zip(result.classification.labels, result.scale):
            print(f"  {color}  {label}")

    output_prefix = Path(args.output_prefix)
    output_prefix.parent.mkdir(exist_ok=True, parents=True)
    csv_file = output_prefix.parent / f"{output_prefix.name}_matched.csv"
    colors_file = output_prefix.parent / f"{output_prefix.name}_colors.json"

    csv_file.write_text(session.export_csv(), encoding="utf-8")
    with open(colors_file, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)

    print("Output files:")
    print(f" - {csv_file}")
    print(f" - {colors_file}")


def main():
    parser = argparse.ArgumentParser(description="Bind a CSV table to an SVG map and compute region colors.")
    parser.add_argument("--table", required=True, type=Path, help="Path to CSV table")
    parser.add_argument("--geometry", required=True, type=Path, help="Path to SVG map")
    parser.add_argument("--region-column", help="Column with region names (default: guessed)")
    parser.add_argument("--value-column", help="Column with values (default: guessed)")
    parser.add_argument("--scheme", help="Color scheme id")
    parser.add_argument("--colors", help="Comma-separated custom gradient colors (overrides --scheme)")
    parser.add_argument("--method", default="equalInterval", help="Classification method id")
    parser.add_argument("--buckets", type=int, default=5, help="Number of buckets")
    parser.add_argument("--breaks", help="Comma-separated manual break points")
    parser.add_argument("--aliases", type=Path, help="YAML file mapping alias names to region ids")
    parser.add_argument("--no-classify", action="store_true", help="Color directly from the gradient")
    parser.add_argument("--title", help="Map title")
    parser.add_argument("--output-prefix", default="results/binding", help="Output prefix (no extension)")
    args = parser.parse_args()

    if not args.table.exists():
        raise FileNotFoundError(f"Table file not found: {args.table}")
    if not args.geometry.exists():
        raise FileNotFoundError(f"Geometry file not found: {args.geometry}")

    run_binding(args)


if __name__ == "__main__":
    main()
