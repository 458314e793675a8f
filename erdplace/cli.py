#!/usr/bin/env python3
"""
erdplace CLI

Command-line interface for the ER diagram auto-layout engine.

Usage:
    erdplace layout <schema.json> [options]
    erdplace report <schema.json> [options]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml


def load_schema_file(path_arg: str):
    """
    Load a schema from a JSON file.

    Returns:
        Schema

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a usable schema
    """
    from .schema.abstraction import Schema

    path = Path(path_arg)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    with open(path, 'r') as f:
        data = json.load(f)
    return Schema.from_dict(data)


def build_engine(args):
    """Engine configured from --settings, --iterations and --count-crossings."""
    from .engine import LayoutEngine
    from .settings import load_settings

    settings = load_settings(args.settings)
    overrides = {}
    if args.iterations is not None:
        overrides['maxIterations'] = args.iterations
    if args.count_crossings:
        overrides['countCrossings'] = True
    return LayoutEngine(settings.merged(overrides))


def run_layout(args):
    schema = load_schema_file(args.schema)
    engine = build_engine(args)
    bounds = {"width": args.width, "height": args.height}
    return engine.calculate_layout(schema, bounds)


def cmd_layout(args):
    """Lay out a schema and write the result JSON."""
    result = run_layout(args)
    text = json.dumps(result.to_dict(include_diagnostics=args.diagnostics), indent=2)

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(text + "\n")
        stats = result.statistics
        if stats is None:
            print(f"Empty schema, wrote {output_path}")
        else:
            print(f"Placed {stats.total_tables} tables in {stats.total_clusters} clusters")
            print(f"  Overlaps: {stats.overlaps}")
            print(f"  Efficiency: {stats.layout_efficiency}%")
            print(f"Saved to: {output_path}")
    else:
        print(text)

    return 0


def cmd_report(args):
    """Print layout statistics for a schema."""
    result = run_layout(args)

    if result.statistics is None:
        print("Schema has no tables.")
        return 0

    print(result.statistics.summary())
    print()

    diagnostics = result.diagnostics
    status = "converged" if diagnostics.converged else "hit the iteration cap"
    print(f"Force simulation: {diagnostics.iterations} iterations, {status}")
    print(f"Overlap passes: {diagnostics.overlap_passes}")
    if diagnostics.orphan_count:
        print(f"Orphans: {diagnostics.orphan_count} in {diagnostics.orphan_rows} rows")

    print()
    print("Clusters:")
    for index, cluster in enumerate(result.clusters, 1):
        print(f"  {index}. {', '.join(cluster.tables)}")

    return 0


def _add_layout_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('schema', help='Path to schema JSON file')
    parser.add_argument('--width', type=float, default=1200.0, help='Canvas width (default: 1200)')
    parser.add_argument('--height', type=float, default=800.0, help='Canvas height (default: 800)')
    parser.add_argument('--settings', help='YAML file of layout setting overrides')
    parser.add_argument('--iterations', type=int, help='Max force iterations (default: 100)')
    parser.add_argument('--count-crossings', action='store_true',
                        help='Count relationship-line crossings in the statistics')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog='erdplace',
        description='Automatic layout for entity-relationship diagrams',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  erdplace layout schema.json -o layout.json
  erdplace layout schema.json --width 1600 --height 900 --settings tight.yaml
  erdplace report schema.json --count-crossings
        """,
    )

    parser.add_argument('--version', action='version', version='erdplace 0.1.0')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Layout command
    layout_parser = subparsers.add_parser('layout', help='Compute table positions')
    _add_layout_arguments(layout_parser)
    layout_parser.add_argument('-o', '--output', help='Output file path (default: stdout)')
    layout_parser.add_argument('--diagnostics', action='store_true',
                               help='Include pipeline diagnostics in the output')

    # Report command
    report_parser = subparsers.add_parser('report', help='Print layout statistics')
    _add_layout_arguments(report_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    # Dispatch command
    commands = {
        'layout': cmd_layout,
        'report': cmd_report,
    }

    try:
        return commands[args.command](args)
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        # json.JSONDecodeError is a ValueError
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
