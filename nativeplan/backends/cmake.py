"""
CMake backend.

Models a build that configures snmalloc's own CMake project and builds the
shim target. Defines become -D cache entries; accepted flags and toolchain
substitutions are folded into the CMAKE_<LANG>_FLAGS entries.
"""

import logging
from pathlib import PurePosixPath
from typing import List

from nativeplan.backends.base import PlanBackend
from nativeplan.core.features import BuildOptions, CxxStandard
from nativeplan.core.target import TargetEnvironment
from nativeplan.planning.plan import BuildPlan

logger = logging.getLogger(__name__)

CMAKE_SOURCE_DIR = "snmalloc"


class CMakeBackend(PlanBackend):
    """CMake orchestration backend."""

    name = "cmake"

    def preamble(self, options: BuildOptions) -> None:
        self.define("SNMALLOC_RUST_SUPPORT", "ON")
        self.define("CMAKE_SH", "CMAKE_SH-NOTFOUND")

    def set_cxx_standard(self, standard: CxxStandard) -> None:
        self.define("CMAKE_CXX_STANDARD", standard.value)

    def search_path(self, target: TargetEnvironment, options: BuildOptions) -> str:
        build_dir = PurePosixPath(options.out_dir) / "build"
        if target.is_msvc:
            # Multi-config generators place outputs under the configuration name
            return str(build_dir / options.profile.build_type)
        return str(build_dir)


def configure_args(plan: BuildPlan) -> List[str]:
    """
    Render a plan as CMake configure arguments.

    Args:
        plan: Finished build plan

    Returns:
        Arguments for 'cmake -S ... -B ...'
    """
    build_dir = str(PurePosixPath(plan.out_dir) / "build")
    args = [
        "-S",
        CMAKE_SOURCE_DIR,
        "-B",
        build_dir,
        f"-DCMAKE_BUILD_TYPE={plan.profile.build_type}",
    ]

    for name, value in plan.defines:
        args.append(f"-D{name}={value}")

    toolchain = plan.toolchain
    if toolchain.c_compiler:
        args.append(f"-DCMAKE_C_COMPILER={toolchain.c_compiler}")
    if toolchain.cxx_compiler:
        args.append(f"-DCMAKE_CXX_COMPILER={toolchain.cxx_compiler}")
    if toolchain.system_name:
        args.append(f"-DCMAKE_SYSTEM_NAME={toolchain.system_name}")

    if plan.c_flags:
        args.append(f"-DCMAKE_C_FLAGS={' '.join(plan.c_flags)}")
    if plan.cxx_flags:
        args.append(f"-DCMAKE_CXX_FLAGS={' '.join(plan.cxx_flags)}")
    if toolchain.exe_linker_flags:
        args.append(f"-DCMAKE_EXE_LINKER_FLAGS={' '.join(toolchain.exe_linker_flags)}")

    logger.debug(f"CMake configure arguments: {' '.join(args)}")
    return args


def build_args(plan: BuildPlan) -> List[str]:
    """Render the 'cmake --build' arguments that build the shim library."""
    return [
        "--build",
        str(PurePosixPath(plan.out_dir) / "build"),
        "--config",
        plan.profile.build_type,
        "--target",
        plan.target_lib,
    ]
