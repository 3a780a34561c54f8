"""
Command line entry points for fsearch.

``fsgrep`` searches file contents and ``fsfind`` searches paths. Both parse
their arguments before any traversal starts; a configuration error prints
usage text and exits with a non-zero status. Once the search has started no
error is fatal, and a run with no matches still exits with status 0.
"""

import os
import sys
import logging
from typing import List, Optional

from .config.parser import CommandLineParser, ConfigurationError, ToolDefinition
from .config.tools import grep_tool, find_tool, GREP_PROGRAM, FIND_PROGRAM
from .tools.formatter import ResultFormatter
from .tools.searcher import run_search


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_USAGE = 1

LOG_FORMAT = "[%(levelname)s] %(message)s"


def configure_logging(debug: bool = False) -> None:
    """
    Send diagnostics to standard error.

    Args:
        debug: Show debug messages (skipped entries, walk statistics)
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("fsearch").setLevel(level)


def run_tool(tool: ToolDefinition, args: List[str]) -> int:
    """
    Parse arguments and run a search for one tool.

    Args:
        tool: Definition of the tool being run
        args: Process arguments after the program name

    Returns:
        Process exit status
    """
    parser = CommandLineParser(tool)

    try:
        result = parser.parse(args)
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        print(parser.usage(), file=sys.stderr)
        return EXIT_USAGE

    configure_logging(result.debug)
    for warning in result.warnings:
        logger.debug(warning)

    formatter = ResultFormatter(result.config.output_mode)
    summary = run_search(result.config, formatter)
    logger.debug(f"{tool.program_name}: {summary}")

    return EXIT_SUCCESS


def _program_name(default: str) -> str:
    if sys.argv and sys.argv[0]:
        return os.path.basename(sys.argv[0])
    return default


def grep_main(argv: Optional[List[str]] = None) -> int:
    """Content search entry point."""
    if argv is None:
        return run_tool(grep_tool(_program_name(GREP_PROGRAM)), sys.argv[1:])
    return run_tool(grep_tool(), argv)


def find_main(argv: Optional[List[str]] = None) -> int:
    """Filename search entry point."""
    if argv is None:
        return run_tool(find_tool(_program_name(FIND_PROGRAM)), sys.argv[1:])
    return run_tool(find_tool(), argv)


if __name__ == "__main__":
    sys.exit(grep_main())
