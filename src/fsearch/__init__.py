"""
fsearch - Core Package

Recursive filename and content search tools in the spirit of the classic
Unix find and grep commands.
"""

__version__ = "0.1.0"
__author__ = "fsearch Team"
