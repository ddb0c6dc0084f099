"""
Planner backend interface.

The decision tables talk to a native build backend only through this
interface: "define a symbol" and "apply a flag if supported", plus a few
hooks where the direct-compile and CMake backends realize the same decision
differently. Every call is recorded in the backend's BuildPlan.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Tuple

from nativeplan.core.features import BuildOptions, CxxStandard
from nativeplan.core.target import TargetEnvironment
from nativeplan.planning.plan import BuildPlan
from nativeplan.toolchain.capabilities import FlagCapabilities

logger = logging.getLogger(__name__)


class PlanBackend(ABC):
    """
    Abstract base class for planner backends.

    Attributes:
        plan: Plan being accumulated
        capabilities: Flag capability query for the active compiler/target
    """

    name = "abstract"

    # Define that stands in for the mincore requirement on Windows 8 builds
    win8compat_define: Tuple[str, str] = ("WIN8COMPAT", "ON")

    def __init__(self, plan: BuildPlan, capabilities: FlagCapabilities):
        self.plan = plan
        self.capabilities = capabilities

    def define(self, name: str, value: str) -> "PlanBackend":
        """Define a preprocessor or build-system symbol."""
        logger.debug(f"[{self.name}] define {name}={value}")
        self.plan.define(name, value)
        return self

    def flag_if_supported(self, flag: str, c: bool = True, cxx: bool = True) -> bool:
        """
        Apply a flag if the capability query accepts it.

        Rejected flags are recorded on the plan, never raised.

        Returns:
            True if the flag is in the plan after the call
        """
        reason = self.capabilities.rejection_reason(flag)
        if reason is not None:
            if self.plan.has_flag(flag):
                # Already placed by the toolchain override
                logger.debug(f"[{self.name}] keeping override flag {flag}")
                return True
            logger.debug(f"[{self.name}] skipping {flag}: {reason}")
            self.plan.reject_flag(flag, reason)
            return False
        self.plan.add_flag(flag, c=c, cxx=cxx)
        return True

    def flags_if_supported(self, flags: List[str], c: bool = True, cxx: bool = True) -> List[str]:
        """Apply several flags; return the ones that were accepted."""
        return [flag for flag in flags if self.flag_if_supported(flag, c=c, cxx=cxx)]

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    def preamble(self, options: BuildOptions) -> None:
        """Record backend-wide settings before any planner rule runs."""
        pass

    def set_release_flags(self, flags: str) -> None:
        """Configure the release-mode compiler flags of an MSVC build."""
        self.define("CMAKE_CXX_FLAGS_RELEASE", flags)
        self.define("CMAKE_C_FLAGS_RELEASE", flags)

    def set_cxx_standard(self, standard: CxxStandard) -> None:
        """Record the C++ standard as a build-system setting, if the backend has one."""
        pass

    @abstractmethod
    def search_path(self, target: TargetEnvironment, options: BuildOptions) -> str:
        """Directory the compiled native library is placed in."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
