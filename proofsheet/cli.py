"""
Command Line Interface for proofsheet.
"""

import argparse
import logging
import os
import signal
from typing import List, Optional

from .cancellation import CancellationToken
from .config import PipelineConfig
from .errors import ProofsheetError
from .manifest import Manifest
from .pipeline import Pipeline
from .pipeline_progress import PipelineProgress
from .reporter import Reporter
from .scanner import Scanner

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('sh').setLevel(logging.WARNING)

    return logging.getLogger('proofsheet')


def get_config(args: argparse.Namespace) -> PipelineConfig:
    """Get pipeline configuration from environment and CLI overrides."""
    config = PipelineConfig.from_env()

    if args.size:
        config.thumbnail_size = args.size
    if args.workers:
        config.max_workers = args.workers
    if args.auto_orient:
        config.auto_orient = True
    if args.recursive:
        config.recursive = True
    if args.manifest_only:
        config.generate_thumbnails = False

    return config


def default_thumb_dir(output: str) -> str:
    """Thumbnails go in a 'thumbnails' directory beside the manifest."""
    return os.path.join(os.path.dirname(os.path.abspath(output)), 'thumbnails')


def cmd_scan(args: argparse.Namespace) -> int:
    """Execute scan command."""
    logger = setup_logging(args.verbose)

    try:
        config = get_config(args)
    except ProofsheetError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_ERROR
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return EXIT_ERROR

    if args.dry_run:
        try:
            candidates = Scanner(config, logger).scan(args.input)
        except ProofsheetError as e:
            logger.error(f"Scan failed: {e}")
            return EXIT_ERROR
        Reporter().report_candidates(candidates)
        return EXIT_OK

    thumb_dir = args.thumb_dir or default_thumb_dir(args.output)
    logger.info(f"Input: {args.input}")
    if config.generate_thumbnails:
        logger.info(f"Thumbnails: {thumb_dir} ({config.thumbnail_size}px)")
    else:
        logger.info("Manifest-only mode: no thumbnails will be written")

    progress = None
    if not args.quiet:
        progress = PipelineProgress(show_files=args.show_files, logger=logger)

    token = CancellationToken()

    def on_interrupt(signum, frame):
        logger.info("Interrupted by user, cancelling...")
        token.cancel()

    previous_handler = signal.signal(signal.SIGINT, on_interrupt)
    try:
        pipeline = Pipeline.with_detected_tools(config, sink=progress, token=token, logger=logger)
        candidates = pipeline.scan(args.input)
        if progress is not None:
            progress.stats.total = len(candidates)
        manifest = pipeline.run(args.input, thumb_dir, candidates)
    except ProofsheetError as e:
        logger.error(f"Scan failed: {e}")
        return EXIT_ERROR
    except Exception as e:
        logger.exception(f"Scan failed: {e}")
        return EXIT_ERROR
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    reporter = Reporter()
    if args.manifest_only:
        reporter.report_table(manifest)
    else:
        try:
            manifest.save(args.output)
        except OSError as e:
            logger.error(f"Failed to write manifest {args.output}: {e}")
            return EXIT_ERROR
        if not args.quiet and not args.show_files:
            print()
            reporter.report_summary(manifest)

    if manifest.partial:
        return EXIT_CANCELLED
    return EXIT_OK


def cmd_report(args: argparse.Namespace) -> int:
    """Execute report command."""
    logger = setup_logging(args.verbose)

    try:
        manifest = Manifest.load(args.manifest)
    except FileNotFoundError:
        logger.error(f"Manifest not found: {args.manifest}")
        return EXIT_ERROR
    except Exception as e:
        logger.error(f"Failed to load manifest: {e}")
        return EXIT_ERROR

    reporter = Reporter()

    if args.type == 'summary':
        reporter.report_summary(manifest)
    elif args.type == 'table':
        reporter.report_table(manifest)
    elif args.type == 'degraded':
        reporter.report_degraded(manifest)

    return EXIT_OK


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='proofsheet',
        description='Concurrent metadata and thumbnail pipeline for media deliveries',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. Scan:     python -m proofsheet scan /path/to/delivery -o manifest.json
  2. Report:   python -m proofsheet report -m manifest.json

Video support:
  Video metadata and previews need ffprobe and ffmpeg on PATH (or
  PROOFSHEET_FFPROBE / PROOFSHEET_FFMPEG). Without them videos are
  listed as degraded.

Testing:
  Use --dry-run to list what would be processed without decoding anything.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Scan command
    scan_parser = subparsers.add_parser('scan', help='Process a directory and write a manifest')
    scan_parser.add_argument('input', help='Directory to scan')
    scan_parser.add_argument('-o', '--output', default='manifest.json', help='Output manifest file')
    scan_parser.add_argument('--thumb-dir', metavar='DIR',
                             help='Thumbnail directory (default: thumbnails/ beside the manifest)')
    scan_parser.add_argument('-s', '--size', type=int, help='Thumbnail size (default: 300)')
    scan_parser.add_argument('-w', '--workers', type=int, metavar='N',
                             help='Maximum worker threads (default: CPU count)')
    scan_parser.add_argument('--auto-orient', action='store_true',
                             help='Apply EXIF orientation to thumbnails and dimensions')
    scan_parser.add_argument('--recursive', action='store_true', help='Descend into subdirectories')
    scan_parser.add_argument('--manifest-only', action='store_true',
                             help='Skip thumbnails and print a tab-separated listing')
    scan_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    scan_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    scan_parser.add_argument('--show-files', action='store_true',
                             help='Print each file as processed with result')
    scan_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    # Report command
    report_parser = subparsers.add_parser('report', help='Generate reports from manifest')
    report_parser.add_argument('-m', '--manifest', required=True, help='Input manifest file')
    report_parser.add_argument('-t', '--type', choices=['summary', 'table', 'degraded'],
                               default='summary', help='Report type')
    report_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return EXIT_ERROR

    if parsed_args.command == 'scan':
        return cmd_scan(parsed_args)
    elif parsed_args.command == 'report':
        return cmd_report(parsed_args)

    return EXIT_ERROR
