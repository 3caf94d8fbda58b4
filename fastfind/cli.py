"""Command line interface for FastFind.

Usage:
    fastfind PATH [PATTERN] [options]
    python -m fastfind PATH [PATTERN] [options]
"""

import argparse
import json
import sys
from typing import List, Optional

from . import __version__
from ._common.config import FilterMode, FindConfig
from .api import find_with_config
from .planning import ConfigurationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fastfind",
        description="Enumerate a directory tree and report matching entries",
    )
    parser.add_argument('path', help="Root directory to enumerate")
    parser.add_argument('pattern', nargs='?', default='*',
                        help="Wildcard name pattern, e.g. '*.log' (default: *)")

    kinds = parser.add_argument_group("entry kinds")
    kinds.add_argument('--directories', '-d', action='store_true',
                       help="Include directories")
    kinds.add_argument('--no-files', dest='files', action='store_false',
                       help="Exclude files")

    recursion = parser.add_argument_group("recursion")
    recursion.add_argument('--recurse', '-r', action='store_true',
                           help="Descend into subdirectories")
    recursion.add_argument('--depth', type=int, default=None, metavar='N',
                           help="Levels below the root to visit (default: unbounded)")
    recursion.add_argument('--parallel', '-p', action='store_true',
                           help="List the root's subdirectories concurrently")
    recursion.add_argument('--workers', type=int, default=None, metavar='N',
                           help="Thread bound for --parallel")

    attributes = parser.add_argument_group("attribute filter")
    attributes.add_argument('--hidden', action='store_true')
    attributes.add_argument('--system', action='store_true')
    attributes.add_argument('--read-only', action='store_true')
    attributes.add_argument('--compressed', action='store_true')
    attributes.add_argument('--archive', action='store_true')
    attributes.add_argument('--reparse-point', action='store_true')
    attributes.add_argument('--filter-mode', default=FilterMode.INCLUDE.value,
                            choices=[mode.value for mode in FilterMode],
                            help="How attributes are compared (default: Include)")

    parser.add_argument('--suppress-errors', '-s', action='store_true',
                        help="Silently treat unreadable directories as empty")
    parser.add_argument('--large-fetch', action='store_true',
                        help="Use larger listing batches where supported")
    parser.add_argument('--format', choices=['text', 'json'], default='text',
                        help="Output format (default: text)")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> FindConfig:
    return FindConfig.from_options(
        pattern=args.pattern,
        include_files=args.files,
        include_directories=args.directories,
        recurse=args.recurse,
        max_depth=args.depth,
        parallel=args.parallel,
        suppress_errors=args.suppress_errors,
        large_fetch=args.large_fetch,
        include_hidden=args.hidden,
        include_system=args.system,
        include_read_only=args.read_only,
        include_compressed=args.compressed,
        include_archive=args.archive,
        include_reparse_point=args.reparse_point,
        filter_mode=args.filter_mode,
        max_workers=args.workers,
    )


def main(argv: Optional[List[str]] = None, reader=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        results = find_with_config(args.path, config_from_args(args), reader=reader)
    except ConfigurationError as e:
        print(f"fastfind: {e}", file=sys.stderr)
        return 2

    if args.format == 'json':
        json.dump([info.metadata() for info in results], sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        for info in results:
            print(info.identifier())
    return 0


if __name__ == '__main__':
    sys.exit(main())
