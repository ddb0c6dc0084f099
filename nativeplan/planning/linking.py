"""
Link directive planning.

LinkPlanner decides which libraries and search paths the final link needs
for the compiled native library, by platform. It is independent of the
flag planner: both read the same immutable inputs.
"""

import logging

from nativeplan.backends.base import PlanBackend
from nativeplan.core.features import BuildOptions, CxxStandard, FeatureSet
from nativeplan.core.target import OperatingSystem, TargetEnvironment
from nativeplan.planning.plan import BuildPlan, LinkKind

logger = logging.getLogger(__name__)

LLVM_CXX_RUNTIME = "c++"
GNU_CXX_RUNTIME = "stdc++"

FREEBSD_LIBRARY_DIR = "/usr/local/lib"

# Unix targets that get neither c_nonshared nor the generic Unix treatment
NON_GNU_UNIX_OS = (OperatingSystem.MACOS, OperatingSystem.FREEBSD)

# Targets whose default C++ runtime is LLVM's
LLVM_RUNTIME_OS = (OperatingSystem.MACOS, OperatingSystem.OPENBSD)


class LinkPlanner:
    """
    Derive link directives for one build.

    Args:
        target: Target environment
        features: Feature toggles
        options: Build options
    """

    def __init__(self, target: TargetEnvironment, features: FeatureSet, options: BuildOptions):
        self.target = target
        self.features = features
        self.options = options

    def apply(self, plan: BuildPlan, backend: PlanBackend) -> None:
        """Append search paths and link directives to plan."""
        target = self.target

        plan.link(self.options.target_lib, LinkKind.STATIC)
        plan.add_search_path(backend.search_path(target, self.options))

        if target.is_msvc:
            self._link_msvc(plan)
            return

        if target.os is OperatingSystem.FREEBSD:
            plan.add_search_path(FREEBSD_LIBRARY_DIR)
            plan.link(LLVM_CXX_RUNTIME)
            return

        runtime_linked = False

        if target.is_windows and target.is_gnu:
            self._link_mingw(plan)
            runtime_linked = True

        if target.is_linux:
            self._link_linux(plan)
            runtime_linked = True

        if target.is_unix and target.os not in NON_GNU_UNIX_OS and target.is_gnu:
            plan.link("c_nonshared")

        if target.os is OperatingSystem.ANDROID or target.is_android:
            # The NDK toolchain file selects the C++ STL
            runtime_linked = True

        if not target.is_windows and not runtime_linked:
            plan.link(self.default_cxx_runtime())

    def default_cxx_runtime(self) -> str:
        """Platform default C++ runtime for the fallback rule."""
        if self.target.os in LLVM_RUNTIME_OS:
            return LLVM_CXX_RUNTIME
        return GNU_CXX_RUNTIME

    # ------------------------------------------------------------------
    # Platform rules
    # ------------------------------------------------------------------

    def _link_msvc(self, plan: BuildPlan) -> None:
        if self.features.win8compat:
            logger.debug("win8compat set, not linking mincore")
            return
        plan.link("mincore")

    def _link_mingw(self, plan: BuildPlan) -> None:
        plan.link("bcrypt")
        plan.link("winpthread")
        if self.target.is_clang_msys:
            plan.link(LLVM_CXX_RUNTIME)
        else:
            plan.link(GNU_CXX_RUNTIME)
            plan.link("atomic")

    def _link_linux(self, plan: BuildPlan) -> None:
        plan.link("atomic")
        plan.link(GNU_CXX_RUNTIME)
        plan.link("pthread")
        if self.options.cxx_standard is CxxStandard.CXX17 and not self.target.is_clang_msys:
            # GCC's C++17 thread-exit support lives in libgcc
            plan.link("gcc")
