"""
Configuration loading for nativeplan.

Provides parsing of YAML build context files.
"""

from nativeplan.config.parser import parse_context_file, parse_context_data

__all__ = [
    "parse_context_file",
    "parse_context_data",
]
