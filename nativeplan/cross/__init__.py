"""
Cross-compilation support for nativeplan.

Currently Android NDK cross-compilation: ABI resolution and the settings
the NDK's CMake toolchain file expects.
"""

from nativeplan.cross.android import (
    AndroidAbi,
    AndroidCrossConfig,
    resolve_android_abi,
    toolchain_file,
)

__all__ = [
    "AndroidAbi",
    "AndroidCrossConfig",
    "resolve_android_abi",
    "toolchain_file",
]
