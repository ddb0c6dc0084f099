"""
Command-line interface for nativeplan.
"""

from nativeplan.cli.parser import CLI, main

__all__ = ["CLI", "main"]
