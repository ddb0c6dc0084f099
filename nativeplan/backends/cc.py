"""
Direct-compile backend.

Models a build that invokes the C++ compiler on the shim source directly
and archives the result into the output directory. Defines become
preprocessor definitions on the compiler command line.
"""

import logging
from typing import List

from nativeplan.backends.base import PlanBackend
from nativeplan.core.features import BuildOptions, BuildProfile
from nativeplan.core.target import TargetEnvironment
from nativeplan.planning.plan import BuildPlan

logger = logging.getLogger(__name__)

SHIM_INCLUDE_DIR = "snmalloc/src"
SHIM_SOURCE = "snmalloc/src/snmalloc/override/rust.cc"


class CCBackend(PlanBackend):
    """Direct compiler invocation backend."""

    name = "cc"
    win8compat_define = ("WINVER", "0x0603")

    def set_release_flags(self, flags: str) -> None:
        # No multi-config generator here: release flags go straight on the command line
        if self.plan.profile is BuildProfile.RELEASE:
            self.flags_if_supported(flags.split())

    def search_path(self, target: TargetEnvironment, options: BuildOptions) -> str:
        return options.out_dir


def compiler_args(plan: BuildPlan, msvc: bool = False) -> List[str]:
    """
    Render a plan as C++ compiler arguments.

    Args:
        plan: Finished build plan
        msvc: Use MSVC spelling for defines and include paths

    Returns:
        Arguments: include path, defines, C++ flags, then the shim source
    """
    prefix = "/" if msvc else "-"
    args = [f"{prefix}I{SHIM_INCLUDE_DIR}"]
    for name, value in plan.defines:
        args.append(f"{prefix}D{name}={value}")
    args.extend(plan.cxx_flags)
    args.append(SHIM_SOURCE)
    return args
