"""
Command Line Interface for scanprep
"""

import argparse
import dataclasses
import sys
import logging
from pathlib import Path
from typing import List, Optional

from . import __version__
from .classifier import ScanErrorClassifier
from .config import Settings, load_settings
from .models import ScanQuality
from .recovery import RecoveryCoordinator
from .reporters import get_reporter
from .validator import PreScanValidator


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging"""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _add_format_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '-f', '--format',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='scanprep',
        description='scanprep - Validate SonarQube scan configuration and recover from failed scans',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s validate /path/to/project                  # Check scan readiness
  %(prog)s validate /path/to/project -f json -o out.json
  %(prog)s classify "Unable to find source files in /p/src"
  sonar-scanner 2>&1 | %(prog)s classify              # Classify scanner output
  %(prog)s recover /path/to/project --error-file scan.log --write --project-key my-app
        """
    )

    parser.add_argument(
        '-c', '--config',
        help='Settings file (default: .scanprep.yaml in the project root)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Debug mode (very verbose)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    validate = subparsers.add_parser('validate', help='Run pre-scan validation on a project')
    validate.add_argument('path', help='Project root directory')
    _add_format_option(validate)
    validate.add_argument(
        '-o', '--output',
        help='Output file path (default: stdout)'
    )
    validate.add_argument(
        '--no-resolve',
        action='store_true',
        help='Do not run the build tool to resolve dependency classpaths'
    )

    classify = subparsers.add_parser('classify', help='Classify scanner error output')
    classify.add_argument('message', nargs='?', help='Error text (default: read stdin)')
    classify.add_argument('--file', help='Read the error text from a file')
    _add_format_option(classify)

    recover = subparsers.add_parser('recover', help='Analyze a failed scan and propose a configuration')
    recover.add_argument('path', help='Project root directory')
    error_source = recover.add_mutually_exclusive_group(required=True)
    error_source.add_argument('--error', help='Scanner error text')
    error_source.add_argument('--error-file', help='File holding the scanner output')
    recover.add_argument(
        '--write',
        action='store_true',
        help='Write the suggested configuration (existing file is backed up)'
    )
    recover.add_argument('--project-key', help='Project key for the written configuration')
    _add_format_option(recover)

    return parser.parse_args(args)


def _reporter(args: argparse.Namespace, output: Optional[str] = None):
    reporter_kwargs = {}
    if args.format == 'text':
        reporter_kwargs['use_colors'] = not output
    return get_reporter(args.format, **reporter_kwargs)


def _read_text_file(path: str) -> Optional[str]:
    try:
        return Path(path).read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        print(f"Error: Cannot read {path}: {e}", file=sys.stderr)
        return None


def run_validate(args: argparse.Namespace, settings: Settings) -> int:
    """Run pre-scan validation"""
    if args.no_resolve:
        settings = dataclasses.replace(settings, resolve_dependencies=False)

    validator = PreScanValidator(settings=settings)
    result = validator.validate(args.path)

    _reporter(args, args.output).report(result, args.output)

    if result.scan_quality == ScanQuality.DEGRADED:
        return 1
    return 0


def run_classify(args: argparse.Namespace) -> int:
    """Classify a scanner error message"""
    if args.file:
        message = _read_text_file(args.file)
        if message is None:
            return 1
    elif args.message is not None:
        message = args.message
    else:
        message = sys.stdin.read()

    if not message.strip():
        print("Error: No error message given", file=sys.stderr)
        return 1

    classifier = ScanErrorClassifier()
    error = classifier.parse(message)
    _reporter(args).report(error)

    return 0 if classifier.is_recoverable(error) else 2


def run_recover(args: argparse.Namespace, settings: Settings) -> int:
    """Analyze a failed scan and optionally write a new configuration"""
    if args.write and not args.project_key:
        print("Error: --write requires --project-key", file=sys.stderr)
        return 1

    if args.error_file:
        error_text = _read_text_file(args.error_file)
        if error_text is None:
            return 1
    else:
        error_text = args.error

    coordinator = RecoveryCoordinator(settings=settings)
    analysis = coordinator.analyze(error_text, args.path)
    _reporter(args).report(analysis)

    if not analysis.recoverable:
        return 2

    if args.write:
        result = coordinator.apply(analysis, args.path, args.project_key)
        if not result.success:
            print(f"Error: {result.error}", file=sys.stderr)
            return 1
        print(f"Wrote {result.config_path}", file=sys.stderr)
        if result.backup_path:
            print(f"Previous configuration saved to {result.backup_path}", file=sys.stderr)

    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parsed_args = parse_args(args)

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    project_path = getattr(parsed_args, 'path', None)
    if project_path is not None and not Path(project_path).is_dir():
        print(f"Error: Project path is not a directory: {project_path}", file=sys.stderr)
        return 1

    try:
        if parsed_args.command == 'classify':
            return run_classify(parsed_args)

        settings = load_settings(project_path, parsed_args.config)
        if parsed_args.verbose and settings.source_file:
            print(f"Using settings from {settings.source_file}", file=sys.stderr)
        if parsed_args.command == 'validate':
            return run_validate(parsed_args, settings)
        return run_recover(parsed_args, settings)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        if parsed_args.debug:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
