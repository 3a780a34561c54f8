"""
Configuration management package for fsearch.

This package turns command line arguments into validated search
configurations and defines the flags of each command line tool.
"""

from .parser import (
    ArgumentScanner,
    CommandLineParser,
    ConfigParseResult,
    ConfigurationError,
    Flag,
    ParsedArguments,
    ToolDefinition,
    parse_arguments
)
from .tools import grep_tool, find_tool

__all__ = [
    'ArgumentScanner',
    'CommandLineParser',
    'ConfigParseResult',
    'ConfigurationError',
    'Flag',
    'ParsedArguments',
    'ToolDefinition',
    'parse_arguments',
    'grep_tool',
    'find_tool'
]
