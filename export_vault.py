#!/usr/bin/env python3
"""
Vault Markdown Export Tool - Main CLI Entry Point

This script provides the command-line interface for exporting notes from a
vault of interlinked markdown notes into a self-contained markdown tree, with
images copied next to the export, embedded notes inlined and wiki links
optionally converted to plain markdown links.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

import yaml

from config_loader import ConfigLoader, get_nested
from exporters import ExportReport, MarkdownExporter
from logger import log_config, log_section, setup_logging
from models import DocumentExportResult
from vault import VaultError, VaultFactory

__version__ = "1.0.0"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Export vault notes to a portable markdown tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export the whole vault using config.yaml
  vault-export --config config.yaml

  # Export one folder of the vault
  vault-export Projects --vault ~/Notes --output export

  # Export a single note
  vault-export "Projects/Roadmap.md"

  # Preview output paths without writing
  vault-export Projects --dry-run

  # Write JSON and CSV reports of the run
  vault-export --report-path report.json --csv-report report.csv

  # Verbose logging
  vault-export -vv
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        'paths',
        nargs='*',
        default=['.'],
        help='Vault-relative notes or folders to export (default: whole vault)'
    )

    parser.add_argument(
        '--config',
        type=str,
        default='config.yaml',
        help='Path to configuration YAML file (default: config.yaml)'
    )

    parser.add_argument(
        '--vault',
        type=str,
        help='Vault root directory (overrides vault.path)'
    )

    parser.add_argument(
        '--output',
        type=str,
        help='Output directory (overrides export.output_directory)'
    )

    parser.add_argument(
        '--report-path',
        type=str,
        help='Where to write the JSON export report'
    )

    parser.add_argument(
        '--csv-report',
        dest='csv_report_path',
        type=str,
        help='Where to write the per-document CSV summary'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    parser.add_argument(
        '--dry-run',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Preview output paths without making changes'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_configuration(args: argparse.Namespace) -> dict:
    """Load the config file if present and merge CLI arguments over it."""
    if Path(args.config).exists():
        config = ConfigLoader.load(args.config)
    elif args.config != 'config.yaml':
        raise FileNotFoundError(f"Configuration file not found: {args.config}")
    else:
        config = {}

    config = ConfigLoader.merge_with_args(config, args)
    ConfigLoader.validate(config)
    return config


def run_export(config: dict, paths: List[str], logger: logging.Logger) -> int:
    """Execute the export of every requested path."""
    settings = ConfigLoader.build_settings(config)
    dry_run = get_nested(config, 'run.dry_run', False)

    vault = VaultFactory.create_vault(config, logger)
    exporter = MarkdownExporter(vault, settings, logger=logger)

    if dry_run:
        logger.info("Dry-run mode: listing output paths")
        for path in paths:
            planned = exporter.plan(exporter.document_walker.iter_export_params(path))
            for source, target in planned:
                print(f"{source} -> {target}")
        logger.info("Dry-run complete. No changes made.")
        return 0

    start_time = time.time()
    results: List[DocumentExportResult] = []
    for path in paths:
        results.extend(exporter.export_path(path))
    duration = time.time() - start_time

    report_generator = ExportReport(logger)
    report = report_generator.generate_report(results, duration, output_directory=settings.output)
    print("\n" + report_generator.format_console_report(report))

    report_path = get_nested(config, 'run.report_path')
    if report_path:
        try:
            report_generator.export_json_report(report, report_path)
        except OSError as e:
            logger.warning(f"Failed to export JSON report: {str(e)}")

    csv_report_path = get_nested(config, 'run.csv_report_path')
    if csv_report_path:
        try:
            report_generator.export_csv_summary(report, csv_report_path)
        except OSError as e:
            logger.warning(f"Failed to export CSV summary: {str(e)}")

    failed = report['summary']['failed']
    if failed > 0:
        logger.warning(f"Export completed with {failed} failed documents")
        return 1

    logger.info("Export completed successfully")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(verbosity=args.verbose)
        logger = logging.getLogger('vault_markdown_export.cli')

        log_section("Vault Markdown Export Tool")
        logger.info(f"Version: {__version__}")

        logger.info(f"Loading configuration from {args.config}")
        config = load_configuration(args)

        # Reconfigure logging with config file settings
        setup_logging(
            verbosity=args.verbose,
            log_file=get_nested(config, 'logging.file'),
            level=get_nested(config, 'logging.level')
        )
        log_config(config)

        return run_export(config, args.paths, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except yaml.YAMLError as e:
        print(f"ERROR: Invalid configuration file: {e}", file=sys.stderr)
        return 2
    except VaultError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nExport interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
