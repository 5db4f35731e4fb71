"""
CFD Domain Generator - Main CLI

Computes the CFD computational domain (influence region, BPG domain
boundary and blockage check) from a JSON configuration.

Usage:
    python -m cfd_domain.main <config.json> [--output-dir <dir>]

Example:
    python -m cfd_domain.main ./site/config.json --output-dir ./output -v
"""

import argparse
import logging
import os
import sys
from typing import Optional

from . import __version__
from .errors import ConfigurationError
from .io.config_loader import load_config
from .pipeline import run_pipeline


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging to console and optionally to file.

    Args:
        verbose: If True, use DEBUG level; otherwise INFO
        log_file: Optional path to log file. If provided, logs will be written to file.
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='CFD Domain Generator - Influence region and BPG domain boundary'
    )

    parser.add_argument(
        'config',
        help='JSON configuration file'
    )

    parser.add_argument(
        '--output-dir',
        default='./output',
        help='Output directory for generated files (default: ./output)'
    )

    parser.add_argument(
        '--output-file',
        default=None,
        help='Base name of the output files (default: output_file_name from config)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Disable log file output (only console)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    os.makedirs(args.output_dir, exist_ok=True)

    overrides = {'output_dir': args.output_dir, 'verbose': args.verbose}
    if args.output_file:
        overrides['output_file_name'] = args.output_file

    # Log to console until the output name is known
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config, **overrides)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    log_file = None
    if not args.no_log_file:
        log_file = os.path.join(args.output_dir, f"{config.output_file_name}.log")
        setup_logging(args.verbose, log_file)

    result = run_pipeline(config)
    report = result.report

    if result.success:
        stats = report.stats
        print(f"\nSuccess! Domain boundary with {stats.boundary_vertices} vertices")
        print(f"Buildings loaded: {stats.buildings_loaded}")
        print(f"Top height: {stats.top_height:.2f}m")
        if stats.blockage_ratio is not None:
            print(f"Blockage ratio: {stats.blockage_ratio * 100:.2f}%")
            if stats.corrected:
                print(f"Domain enlarged by factor {stats.enlarge_ratio:.3f}")
        if stats.layer_areas:
            print("\nSurface areas:")
            for name, area in stats.layer_areas.items():
                print(f"  {name}: {area:.1f}m2")
        print(f"Output surfaces: {', '.join(report.output_surfaces)}")
        print(f"Output files: {', '.join(report.output_files)}")
        if log_file:
            print(f"Log file: {log_file}")
        return 0

    print(f"\nFailed with {len(report.errors)} errors:")
    for error in report.errors:
        print(f"  - {error}")
    return 1


if __name__ == '__main__':
    sys.exit(main())
