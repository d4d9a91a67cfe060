"""
Command line interface: print the import graph of a package as DOT
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .analysis import analyze
from .config import setup_logging
from .exceptions import ImportGraphError, UsageError
from .models import IGNORED_PSEUDO_PACKAGES, AnalysisOptions

logger = logging.getLogger(__name__)


def split_list(value: str) -> List[str]:
    """Split a comma-separated option, dropping empty items"""
    if not value:
        return []
    return [item for item in value.split(",") if item]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="import-graph",
        description="Print the import dependency graph of a Python package in Graphviz DOT format.",
        epilog="Example: import-graph -s mypackage | dot -Tsvg -o deps.svg",
    )
    parser.add_argument("packages", nargs="*", metavar="package",
                        help="import path of the root package to analyze")
    parser.add_argument("-s", dest="ignore_stdlib", action="store_true",
                        help="ignore packages in the Python standard library")
    parser.add_argument("-d", dest="delve_stdlib", action="store_true",
                        help="show dependencies of packages in the Python standard library")
    parser.add_argument("-i", dest="ignore_packages", default="",
                        help="a comma-separated list of packages to ignore")
    parser.add_argument("-p", dest="ignore_prefixes", default="",
                        help="a comma-separated list of prefixes to ignore")
    parser.add_argument("-o", dest="only_prefixes", default="",
                        help="a comma-separated list of prefixes to include")
    parser.add_argument("--tags", default="",
                        help="a comma-separated list of tags to consider satisfied "
                             "(platform names, TYPE_CHECKING)")
    parser.add_argument("--horizontal", action="store_true",
                        help="lay out the dependency graph horizontally instead of vertically")
    parser.add_argument("-t", dest="include_tests", action="store_true",
                        help="include test modules")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log resolution details to stderr")
    return parser


def parse_options(argv: Optional[List[str]] = None):
    """Parse argv into the root import path and the run options"""
    args = build_parser().parse_args(argv)
    if len(args.packages) != 1:
        raise UsageError("need one package name to process")

    options = AnalysisOptions(
        ignore_stdlib=args.ignore_stdlib,
        delve_stdlib=args.delve_stdlib,
        ignored=IGNORED_PSEUDO_PACKAGES | set(split_list(args.ignore_packages)),
        ignored_prefixes=split_list(args.ignore_prefixes),
        only_prefixes=split_list(args.only_prefixes),
        tags=split_list(args.tags),
        horizontal=args.horizontal,
        include_tests=args.include_tests,
    )
    return args.packages[0], options, args.verbose


def main(argv: Optional[List[str]] = None) -> int:
    # The .env of the project being analyzed, not of this package
    load_dotenv(find_dotenv(usecwd=True))
    setup_logging()
    try:
        import_path, options, verbose = parse_options(argv)
        if verbose:
            logging.getLogger("import_graph").setLevel(logging.DEBUG)
        result = analyze(import_path, options, search_root=os.getcwd())
    except UsageError as e:
        logger.error(str(e))
        return 2
    except ImportGraphError as e:
        logger.error(str(e))
        return 1

    sys.stdout.write(result.dot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
