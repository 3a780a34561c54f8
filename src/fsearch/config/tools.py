"""
Tool definitions for the fsearch command line programs.

fsgrep searches file contents, fsfind searches canonical paths. Both share
the same traversal flags; they differ in how roots are given, whether the
regex flag carries its own values, and which output modes exist.
"""

from ..models.config import OutputMode, SearchMode
from .parser import Flag, ToolDefinition


GREP_PROGRAM = "fsgrep"
FIND_PROGRAM = "fsfind"

DEBUG_FLAG = Flag("D", "Print debug diagnostics.")


def grep_tool(program_name: str = GREP_PROGRAM) -> ToolDefinition:
    """Build the definition of the content search tool."""
    flags = [
        Flag("R", "Match with regex.", takes_values=True),
        Flag("r", "Search recursively."),
        Flag("n", "Print line number."),
        Flag("L", "Print file names without match."),
        Flag("l", "Print file names with match."),
        Flag("s", "Follow symbolic link."),
        Flag("e", "Exclude files/directories.", takes_values=True),
        Flag("p", "Specify paths to search into.", takes_values=True),
        DEBUG_FLAG,
    ]
    examples = [
        f"{program_name} 'foreach' -rn  // Print each line and number containing 'foreach'",
        f"{program_name} 'foreach' -rL  // Print each file that does not contain 'foreach'",
        f"{program_name} 'foreach' 'another pattern' -p /home -rl  // Print each file under /home containing either pattern",
        f"{program_name} -R 'fn \\w+' -r -e target  // Print lines matching a regex, skipping paths containing 'target'",
        f"{program_name} -R '\\-\\-\\w+' -r  // A regex starting with '-' is given to -R with the dash escaped",
    ]
    return ToolDefinition(
        program_name=program_name,
        flags=flags,
        examples=examples,
        search_mode=SearchMode.CONTENT,
        path_flag="p",
        output_modes={
            "n": OutputMode.LINE_NUMBERS,
            "l": OutputMode.PATHS_WITH_MATCH,
            "L": OutputMode.PATHS_WITHOUT_MATCH,
        },
    )


def find_tool(program_name: str = FIND_PROGRAM) -> ToolDefinition:
    """Build the definition of the filename search tool."""
    flags = [
        Flag("d", "Specify directory to search into.", takes_values=True),
        Flag("r", "Find files recursively."),
        Flag("e", "Exclude dir or files.", takes_values=True),
        Flag("s", "Follow symlink."),
        Flag("R", "Match patterns as regex."),
        DEBUG_FLAG,
    ]
    examples = [
        f"{program_name} \"pattern\" -d <dir>",
        f"{program_name} \"pattern\" -r",
        f"{program_name} '\\.py$' -rR -e .git",
    ]
    return ToolDefinition(
        program_name=program_name,
        flags=flags,
        examples=examples,
        search_mode=SearchMode.FILENAME,
        path_flag="d",
    )
