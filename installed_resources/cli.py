"""
Command-line interface for finding installed resources.
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from .errors import ErrorCollector, ResourceDiscoveryError
from .finder import InstalledResourceFinder
from .reporting import (
    export_resources_csv,
    export_worksheets,
    format_table,
    print_summary,
    save_resources_json,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List installed PowerShell modules and scripts and their metadata"
    )

    parser.add_argument(
        "--name",
        nargs="+",
        default=None,
        help="Names of the resources to find. Default: all (*)"
    )

    parser.add_argument(
        "--version",
        default=None,
        help="Exact version or version range such as '[1.0.0,2.0.0)'. Default: latest"
    )

    parser.add_argument(
        "--path",
        default=None,
        help="Search this directory instead of PSModulePath and the default install locations"
    )

    parser.add_argument(
        "--format",
        choices=["table", "json", "csv"],
        default="table",
        help="Output format. Default: table"
    )

    parser.add_argument(
        "--output-dir",
        default="./output",
        help="Output directory for json/csv/xlsx exports. Default: ./output"
    )

    parser.add_argument(
        "--get-worksheets",
        action="store_true",
        help="Export modules and scripts to an Excel file with one sheet each"
    )

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while metadata files are read"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every path searched and metadata file read"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    errors = ErrorCollector()
    finder = InstalledResourceFinder(error_sink=errors)

    try:
        found = finder.find(
            names=args.name,
            version=args.version,
            path=Path(args.path) if args.path else None,
        )
        resources = list(tqdm(found, unit="resource", disable=not args.progress))
    except ResourceDiscoveryError as e:
        print(f"Error: {e} [{e.error_id}]", file=sys.stderr)
        sys.exit(1)

    output_dir = Path(args.output_dir)
    stem = "_".join(args.name) if args.name and args.name != ["*"] else "installed"

    if args.format == "table":
        print(format_table(resources))
    elif args.format == "json":
        results_file = save_resources_json(resources, output_dir, stem)
        print(f"Results saved to: {results_file}")
    else:
        csv_file = export_resources_csv(resources, output_dir, stem)
        print(f"Results saved to: {csv_file}")

    if args.get_worksheets:
        excel_file = export_worksheets(resources, output_dir, stem)
        if excel_file is not None:
            print(f"Worksheets saved to: {excel_file}")

    if args.verbose:
        print_summary(resources, len(errors))

    return 0


if __name__ == "__main__":
    main()
