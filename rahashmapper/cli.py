"""
Command-line interface for RA Hash Mapper
"""

import argparse
import logging
import os
import sys

from . import __version__
from .exceptions import RAHashMapperError
from .monitor import setup_monitoring, log_event
from .pipeline import HashMapPipeline
from .reporter import format_summary
from .settings import DEFAULT_SETTINGS, build_config, load_settings, save_settings
from .shared_config import DEFAULT_CONFIG_PATH, REPORT_FORMATS

API_KEY_ENV = 'RAHASHMAPPER_API_KEY'


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser"""
    parser = argparse.ArgumentParser(
        prog='rahashmapper',
        description='Check a ROM library against RetroAchievements hashes',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s --write-config ~/.rahashmapper/config.json
  %(prog)s
  %(prog)s --config ./ra.json --missing-only
  %(prog)s --library D:/roms --output D:/reports --hash-tool ./RAHasher.exe

The API key can also be given with the RAHASHMAPPER_API_KEY environment variable.
        '''
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f'Path to the JSON configuration file (default: {DEFAULT_CONFIG_PATH})'
    )

    parser.add_argument(
        '--write-config',
        type=str,
        metavar='PATH',
        help='Write a configuration template with the built-in platform table and exit'
    )

    override_group = parser.add_argument_group('Overrides')

    override_group.add_argument(
        '--library', '-l',
        type=str,
        help='ROM library root (one subfolder per platform)'
    )

    override_group.add_argument(
        '--output', '-o',
        type=str,
        help='Folder to write RA_HashMapReport into'
    )

    override_group.add_argument(
        '--api-key', '-k',
        type=str,
        help='RetroAchievements web API key'
    )

    override_group.add_argument(
        '--hash-tool',
        type=str,
        help='Path to RAHasher (or a compatible tool)'
    )

    override_group.add_argument(
        '--missing-only',
        action='store_true',
        default=None,
        help='Only report files without a RetroAchievements match'
    )

    override_group.add_argument(
        '--format', '-f',
        type=str,
        choices=REPORT_FORMATS,
        help='Report format (default: csv)'
    )

    output_group = parser.add_argument_group('Output')

    output_group.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress progress and summary output'
    )

    output_group.add_argument(
        '--verbose', '-V',
        action='store_true',
        help='Echo log events to stderr'
    )

    output_group.add_argument(
        '--log-file',
        type=str,
        help='Log file path (default: ~/.rahashmapper/logs/run-<date>.log)'
    )

    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def _overrides(args) -> dict:
    return {
        'library_path': args.library,
        'output_path': args.output,
        'api_key': args.api_key or os.getenv(API_KEY_ENV),
        'hash_tool_path': args.hash_tool,
        'missing_only': args.missing_only,
        'report_format': args.format,
    }


def run_cli(args=None):
    """Run the CLI. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(args)

    if args.write_config:
        save_settings(DEFAULT_SETTINGS, args.write_config)
        print(f"Configuration template written to: {args.write_config}")
        return 0

    setup_monitoring(log_file=args.log_file, echo=args.verbose)
    log_event('cli.start', f'Config: {args.config}')

    quiet = args.quiet

    def log(msg):
        if not quiet:
            print(msg)

    def progress(current, total, system):
        if not quiet:
            percent = current / total * 100 if total else 100
            print(f"   {system}: {current:,} / {total:,} ({percent:.0f}%)...", end='\r')
            if current == total:
                print()

    log("RA Hash Mapper")
    log("=" * 50)

    try:
        config = build_config(load_settings(args.config), _overrides(args))
        log(f"\nLibrary: {config.library_path}")
        pipeline = HashMapPipeline(config, progress_callback=progress)
        summary = pipeline.run()
    except RAHashMapperError as e:
        log_event('cli.error', str(e), logging.ERROR)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    log("\nResults:")
    for line in format_summary(summary):
        log(line)
    log(f"\nReport saved to: {summary.report_path} ({summary.reported_rows:,} rows)")
    log_event('cli.done', f'Report: {summary.report_path}')
    return 0


def main():
    """Entry point"""
    sys.exit(run_cli())


if __name__ == '__main__':
    main()
