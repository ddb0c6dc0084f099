"""
Compiler flag and define planning.

FlagPlanner is the decision table that turns target, compiler and feature
inputs into ordered flags and defines. Rules run in a fixed precedence and
only ever append; every flag goes through the backend's capability query.
"""

import logging
from typing import List, Optional

from nativeplan.backends.base import PlanBackend
from nativeplan.core.context import BuildContext
from nativeplan.core.features import BuildOptions, FeatureSet
from nativeplan.core.target import OperatingSystem, TargetEnvironment
from nativeplan.cross.android import AndroidAbi, AndroidCrossConfig
from nativeplan.toolchain.compiler import CompilerProfile

logger = logging.getLogger(__name__)


# ============================================================================
# Flag Tables
# ============================================================================

WINDOWS_BASELINE_FLAGS = [
    "-mcx16",
    "-fno-exceptions",
    "-fno-rtti",
    "-pthread",
]

UNIX_BASELINE_FLAGS = [
    "-fPIC",
    "-pthread",
    "-fno-exceptions",
    "-fno-rtti",
    "-mcx16",
    "-Wno-unused-parameter",
]

MSVC_FLAGS = [
    "/nologo",
    "/W4",
    "/WX",
    "/wd4127",
    "/wd4324",
    "/wd4201",
    "/Ob2",
    "/DNDEBUG",
    "/EHsc",
    "/Gd",
    "/TP",
    "/Gm-",
    "/GS",
    "/fp:precise",
    "/Zc:wchar_t",
    "/Zc:forScope",
    "/Zc:inline",
]

MSVC_RELEASE_FLAGS = "/O2 /Ob2 /DNDEBUG /EHsc"

FRAME_POINTER_FLAG = "-fomit-frame-pointer"
NATIVE_ARCH_FLAG = "-march=native"
TLS_LOCAL_DYNAMIC = "-ftls-model=local-dynamic"
TLS_INITIAL_EXEC = "-ftls-model=initial-exec"

# Targets whose linkers cannot handle the explicit TLS models
NO_TLS_MODEL_OS = (OperatingSystem.HAIKU,)


class FlagPlanner:
    """
    Derive compiler flags and defines for one build.

    Args:
        ctx: Build context (needed only by the Android stage)
        target: Target environment
        compiler: Classified compiler
        features: Feature toggles
        options: Build options
    """

    def __init__(
        self,
        ctx: BuildContext,
        target: TargetEnvironment,
        compiler: CompilerProfile,
        features: FeatureSet,
        options: BuildOptions,
    ):
        self.ctx = ctx
        self.target = target
        self.compiler = compiler
        self.features = features
        self.options = options

    def apply(self, backend: PlanBackend) -> Optional[AndroidAbi]:
        """
        Run every rule against backend in precedence order.

        Returns:
            The Android ABI when the target is Android, otherwise None

        Raises:
            MissingContextFactError: Android target without an NDK location
            UnsupportedArchitectureError: Android triple without an ABI
        """
        self.apply_platform_baseline(backend)
        self.apply_msvc_dialect(backend)
        self.apply_optimization(backend)
        self.apply_language_standard(backend)
        self.apply_tls_model(backend)
        self.apply_features(backend)
        return self.apply_android(backend)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def apply_platform_baseline(self, backend: PlanBackend) -> None:
        if self.target.is_windows:
            backend.flags_if_supported(WINDOWS_BASELINE_FLAGS)
        elif self.target.is_linux or self.target.is_unix:
            backend.flags_if_supported(UNIX_BASELINE_FLAGS)

    def apply_msvc_dialect(self, backend: PlanBackend) -> None:
        if not self.target.is_msvc:
            return
        backend.flags_if_supported(MSVC_FLAGS)
        backend.set_release_flags(MSVC_RELEASE_FLAGS)

    def apply_optimization(self, backend: PlanBackend) -> None:
        backend.flags_if_supported([self.options.profile.optim_level, FRAME_POINTER_FLAG])

    def apply_language_standard(self, backend: PlanBackend) -> None:
        standard = self.options.cxx_standard
        # Both spellings are offered; the capability query keeps the matching one
        backend.flags_if_supported([standard.gnu_flag, standard.msvc_flag], c=False)
        backend.set_cxx_standard(standard)

    def apply_tls_model(self, backend: PlanBackend) -> None:
        flag = self.tls_model_flag()
        if flag:
            backend.flag_if_supported(flag)

    def tls_model_flag(self) -> Optional[str]:
        """Return the TLS model flag for the target, or None if none applies."""
        if not (self.target.is_unix or self.target.is_gnu):
            return None
        if self.target.os in NO_TLS_MODEL_OS:
            return None
        return TLS_LOCAL_DYNAMIC if self.features.local_dynamic_tls else TLS_INITIAL_EXEC

    def apply_features(self, backend: PlanBackend) -> None:
        features = self.features

        if features.native_cpu:
            backend.define("SNMALLOC_OPTIMISE_FOR_CURRENT_MACHINE", "ON")
            backend.flag_if_supported(NATIVE_ARCH_FLAG)

        if features.qemu:
            backend.define("SNMALLOC_QEMU_WORKAROUND", "ON")

        if features.lto:
            if self.compiler.is_known_gnu_compatible:
                backend.define("SNMALLOC_IPO", "ON")
            else:
                logger.debug(f"Skipping IPO for {self.compiler.kind.value} compiler")

        if features.notls:
            backend.define("SNMALLOC_ENABLE_DYNAMIC_LOADING", "ON")

        if features.win8compat:
            backend.define(*backend.win8compat_define)

        backend.define(
            "SNMALLOC_USE_WAIT_ON_ADDRESS", "1" if features.wait_on_address else "0"
        )

        if features.stats:
            backend.define("USE_SNMALLOC_STATS", "ON")

    def apply_android(self, backend: PlanBackend) -> Optional[AndroidAbi]:
        android = AndroidCrossConfig(self.ctx, self.target, self.features, self.options)
        if not android.applies():
            return None
        return android.apply(backend)

    def describe(self) -> List[str]:
        """Short human-readable summary of the inputs, for logging."""
        return [
            f"target={self.target}",
            f"compiler={self.compiler.kind.value}",
            f"profile={self.options.profile.value}",
            f"cxx={self.options.cxx_standard.value}",
            f"features={sorted(self.features.enabled())}",
        ]
