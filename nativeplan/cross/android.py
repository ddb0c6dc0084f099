"""
Android cross-compilation configuration.

Maps an Android target triple and an NDK location onto the settings the
NDK's CMake toolchain file expects: toolchain file path, ABI, ARM
instruction mode, platform level, linker and STL choice.
"""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Tuple

from nativeplan.backends.base import PlanBackend
from nativeplan.core import context as keys
from nativeplan.core.context import BuildContext
from nativeplan.core.exceptions import UnsupportedArchitectureError
from nativeplan.core.features import BuildOptions, FeatureSet
from nativeplan.core.target import TargetEnvironment

logger = logging.getLogger(__name__)

# Checked in order; the first substring found in the triple wins.
ABI_TABLE: Tuple[Tuple[str, str], ...] = (
    ("aarch64", "arm64-v8a"),
    ("armv7", "armeabi-v7a"),
    ("x86_64", "x86_64"),
    ("i686", "x86"),
    ("neon", "armeabi-v7a with NEON"),
    ("arm", "armeabi-v7a"),
)

# Architectures that must be built in ARM (not Thumb) instruction mode
ARM_MODE_ARCHS = ("armv7",)


@dataclass(frozen=True)
class AndroidAbi:
    """
    Resolved Android ABI.

    Attributes:
        abi: ABI string passed to the NDK (e.g. 'arm64-v8a')
        arm_mode: Instruction mode to force, if any
    """

    abi: str
    arm_mode: Optional[str] = None


def resolve_android_abi(triple: str) -> AndroidAbi:
    """
    Resolve the Android ABI for a target triple.

    Args:
        triple: Rust/LLVM target triple (e.g. 'armv7-linux-androideabi')

    Returns:
        AndroidAbi for the triple

    Raises:
        UnsupportedArchitectureError: If no ABI matches the triple

    Example:
        >>> resolve_android_abi("aarch64-linux-android").abi
        'arm64-v8a'
    """
    for substring, abi in ABI_TABLE:
        if substring in triple:
            arm_mode = "arm" if substring in ARM_MODE_ARCHS else None
            return AndroidAbi(abi=abi, arm_mode=arm_mode)
    raise UnsupportedArchitectureError(triple)


def toolchain_file(ndk: str) -> str:
    """Path of the NDK's CMake toolchain file."""
    return str(PurePosixPath(ndk) / "build" / "cmake" / "android.toolchain.cmake")


class AndroidCrossConfig:
    """Append Android cross-compilation settings to a plan."""

    def __init__(
        self,
        ctx: BuildContext,
        target: TargetEnvironment,
        features: FeatureSet,
        options: BuildOptions,
    ):
        self.ctx = ctx
        self.target = target
        self.features = features
        self.options = options

    def applies(self) -> bool:
        return self.target.is_android

    def apply(self, backend: PlanBackend) -> AndroidAbi:
        """
        Define the Android settings on a backend.

        Args:
            backend: Backend receiving the defines

        Returns:
            The resolved ABI

        Raises:
            MissingContextFactError: If the NDK location is not set
            UnsupportedArchitectureError: If the triple has no Android ABI
        """
        ndk = self.ctx.require(keys.ANDROID_NDK, "Android NDK location")
        backend.define("CMAKE_TOOLCHAIN_FILE", toolchain_file(ndk))

        platform = self.ctx.get(keys.ANDROID_PLATFORM)
        if platform:
            backend.define("ANDROID_PLATFORM", platform)

        if self.features.android_lld:
            backend.define("ANDROID_LD", "lld")

        if self.options.android_shared_stl:
            backend.define("ANDROID_STL", "c++_shared")

        resolved = resolve_android_abi(self.target.triple)
        if resolved.arm_mode:
            backend.define("ANDROID_ARM_MODE", resolved.arm_mode)
        backend.define("ANDROID_ABI", resolved.abi)

        logger.info(f"Android target {self.target.triple} -> ABI {resolved.abi}")
        return resolved
