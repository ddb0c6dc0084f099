"""
Toolchain handling for nativeplan: compiler classification, flag
capability queries and MSYS2 toolchain overrides.
"""

from nativeplan.toolchain.compiler import (
    CompilerKind,
    CompilerProfile,
    detect_compiler,
    detect_compiler_from_context,
)
from nativeplan.toolchain.capabilities import FlagCapabilities
from nativeplan.toolchain.msys2 import ToolchainOverride, OverrideSpec

__all__ = [
    "CompilerKind",
    "CompilerProfile",
    "detect_compiler",
    "detect_compiler_from_context",
    "FlagCapabilities",
    "ToolchainOverride",
    "OverrideSpec",
]
