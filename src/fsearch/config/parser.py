"""
Command-line configuration parser for fsearch.

This module turns process arguments into a validated SearchConfig. Argument
scanning is a small state machine: a flag owns every free argument that
follows it until the next flag, arguments before the first flag are free
arguments, and ``--`` switches to free arguments for the rest of the line.

Any problem found here is a configuration error: it is raised before
traversal starts and the command line tools answer it with usage text.
"""

import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..models.config import SearchConfig, OutputMode, SearchMode


logger = logging.getLogger(__name__)

END_OF_FLAGS = "--"


class ConfigurationError(Exception):
    """Raised when the command line cannot be turned into a configuration."""
    pass


@dataclass(frozen=True)
class Flag:
    """
    A single-letter command line flag.

    Attributes:
        id: Flag letter, used after a leading dash
        description: One-line help text
        takes_values: Whether free arguments after the flag belong to it
    """
    id: str
    description: str
    takes_values: bool = False


@dataclass
class ToolDefinition:
    """
    Flags and option mapping of one command line tool.

    Attributes:
        program_name: Name shown in usage text
        flags: Flags accepted by the tool, in usage order
        examples: Example invocations shown in usage text
        search_mode: What the tool matches patterns against
        path_flag: Flag whose values are the search roots
        regex_flag: Flag selecting regular expressions; if it takes values
            they are the expressions, otherwise the free arguments are
        recursive_flag: Flag enabling recursion
        follow_symlinks_flag: Flag enabling symlink following
        exclude_flag: Flag whose values are exclusion substrings
        debug_flag: Flag enabling debug diagnostics
        output_modes: Flags selecting an output mode
    """
    program_name: str
    flags: List[Flag]
    examples: List[str] = field(default_factory=list)
    search_mode: SearchMode = SearchMode.CONTENT
    path_flag: str = "p"
    regex_flag: str = "R"
    recursive_flag: str = "r"
    follow_symlinks_flag: str = "s"
    exclude_flag: str = "e"
    debug_flag: str = "D"
    output_modes: Dict[str, OutputMode] = field(default_factory=dict)

    def find_flag(self, flag_id: str) -> Optional[Flag]:
        """Find a flag accepted by this tool."""
        for flag in self.flags:
            if flag.id == flag_id:
                return flag
        return None


@dataclass
class ParsedArguments:
    """
    Result of scanning the argument list.

    Attributes:
        flags: Flags given by the user, in first-seen order, with their values
        free_args: Arguments not owned by any flag
    """
    flags: Dict[str, List[str]] = field(default_factory=dict)
    free_args: List[str] = field(default_factory=list)

    def has_flag(self, flag_id: str) -> bool:
        return flag_id in self.flags

    def values(self, flag_id: str) -> List[str]:
        """Get the values given to a flag, empty if absent."""
        return list(self.flags.get(flag_id, []))


@dataclass
class ConfigParseResult:
    """
    Result of command line parsing.

    Attributes:
        config: The parsed and validated configuration
        warnings: List of non-fatal warnings
        arguments: The scanned arguments the configuration was built from
        debug: Whether debug diagnostics were requested
    """
    config: SearchConfig
    warnings: List[str]
    arguments: ParsedArguments
    debug: bool = False


class ScanState(Enum):
    """States of the argument scanner."""
    FREE = "free"        # no flag seen yet: arguments are free
    FLAG = "flag"        # arguments belong to the current flag
    LITERAL = "literal"  # after "--": everything is a free argument


class ArgumentScanner:
    """
    State machine that assigns arguments to flags.

    A dash followed by letters is a group of flags (``-rn`` is ``-r -n``);
    the last flag of the group becomes the current flag. Repeated flags
    accumulate their values. A lone ``-`` is an ordinary argument.
    """

    def __init__(self, tool: ToolDefinition):
        self.tool = tool

    def scan(self, args: List[str]) -> ParsedArguments:
        """
        Scan arguments, excluding the program name.

        Args:
            args: Process arguments after the program name

        Returns:
            ParsedArguments with flag values and free arguments

        Raises:
            ConfigurationError: On unknown flags or values given to a flag that takes none
        """
        parsed = ParsedArguments()
        state = ScanState.FREE
        current: Optional[Flag] = None

        for arg in args:
            if state != ScanState.LITERAL and arg == END_OF_FLAGS:
                state = ScanState.LITERAL
                current = None
                continue

            if state != ScanState.LITERAL and self._is_flag_group(arg):
                for flag_id in arg[1:]:
                    current = self.tool.find_flag(flag_id)
                    if current is None:
                        raise ConfigurationError(f"Unknown flag: {flag_id}")
                    parsed.flags.setdefault(current.id, [])
                state = ScanState.FLAG
                continue

            if state == ScanState.FLAG:
                if not current.takes_values:
                    raise ConfigurationError(f"Flag -{current.id} does not take values, got '{arg}'")
                parsed.flags[current.id].append(arg)
            else:
                parsed.free_args.append(arg)

        return parsed

    @staticmethod
    def _is_flag_group(arg: str) -> bool:
        return len(arg) > 1 and arg.startswith('-')


class CommandLineParser:
    """
    Builds a SearchConfig from process arguments for one tool.

    This class scans the argument list, resolves flags to configuration
    options, validates the result with pydantic and renders usage text.
    """

    def __init__(self, tool: ToolDefinition):
        """
        Initialize the parser.

        Args:
            tool: Flags and option mapping of the tool being run
        """
        self.tool = tool
        self.scanner = ArgumentScanner(tool)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def parse(self, args: List[str]) -> ConfigParseResult:
        """
        Parse process arguments into a configuration.

        Args:
            args: Process arguments after the program name

        Returns:
            ConfigParseResult containing the configuration and warnings

        Raises:
            ConfigurationError: If the arguments do not form a valid configuration
        """
        arguments = self.scanner.scan(args)
        config, warnings = self.build_config(arguments)

        self.logger.debug(f"Configuration parsed: {config}")

        return ConfigParseResult(
            config=config,
            warnings=warnings,
            arguments=arguments,
            debug=arguments.has_flag(self.tool.debug_flag)
        )

    def build_config(self, arguments: ParsedArguments) -> Tuple[SearchConfig, List[str]]:
        """
        Resolve scanned arguments to a validated SearchConfig.

        Args:
            arguments: Result of argument scanning

        Returns:
            Tuple of (configuration, warnings)

        Raises:
            ConfigurationError: On conflicting output modes or invalid settings
        """
        tool = self.tool
        warnings = []

        config_data = {
            'recursive': arguments.has_flag(tool.recursive_flag),
            'follow_symlinks': arguments.has_flag(tool.follow_symlinks_flag),
            'exclude': arguments.values(tool.exclude_flag),
            'output_mode': self._resolve_output_mode(arguments),
            'search_mode': tool.search_mode,
            'patterns': list(arguments.free_args),
        }

        if arguments.has_flag(tool.path_flag):
            config_data['roots'] = arguments.values(tool.path_flag)

        if arguments.has_flag(tool.regex_flag):
            config_data['use_regex'] = True
            regex_flag = tool.find_flag(tool.regex_flag)
            if regex_flag.takes_values:
                config_data['regex_patterns'] = arguments.values(tool.regex_flag)
                if arguments.free_args:
                    warnings.append(
                        f"Ignoring literal patterns because -{tool.regex_flag} is set: "
                        f"{', '.join(arguments.free_args)}"
                    )
            else:
                config_data['regex_patterns'] = list(arguments.free_args)

        try:
            config = SearchConfig.from_dict(config_data)
        except ValidationError as e:
            raise ConfigurationError(self._describe_validation_error(e)) from e

        return config, warnings

    def _resolve_output_mode(self, arguments: ParsedArguments) -> OutputMode:
        """
        Select the single output mode requested by the user.

        Raises:
            ConfigurationError: If more than one output mode flag is given
        """
        selected = [flag_id for flag_id in self.tool.output_modes if arguments.has_flag(flag_id)]

        if len(selected) > 1:
            flags = ", ".join(f"-{flag_id}" for flag_id in selected)
            raise ConfigurationError(f"Output mode flags are mutually exclusive: {flags}")

        if selected:
            return self.tool.output_modes[selected[0]]
        return OutputMode.DEFAULT

    @staticmethod
    def _describe_validation_error(error: ValidationError) -> str:
        messages = []
        for detail in error.errors():
            message = detail.get('msg', '')
            # pydantic prefixes messages raised from validators
            if message.startswith('Value error, '):
                message = message[len('Value error, '):]
            messages.append(message)
        return "; ".join(messages) or str(error)

    def usage(self) -> str:
        """
        Render usage text: program name, flag table and examples.

        Returns:
            Usage text as a string
        """
        lines = [
            "",
            f"USAGE: {self.tool.program_name} [VALUES] [OPTIONS] [ARGS]",
            "OPTIONS:",
        ]
        for flag in self.tool.flags:
            lines.append(f"    -{flag.id}    {flag.description}")

        lines.append("EXAMPLES:")
        lines.extend(self.tool.examples)
        lines.append("")

        return "\n".join(lines)


def parse_arguments(tool: ToolDefinition, args: List[str]) -> ConfigParseResult:
    """
    Convenience function to parse arguments for a tool.

    Args:
        tool: Tool definition
        args: Process arguments after the program name

    Returns:
        ConfigParseResult containing parsed configuration

    Raises:
        ConfigurationError: If the arguments are invalid
    """
    parser = CommandLineParser(tool)
    return parser.parse(args)
