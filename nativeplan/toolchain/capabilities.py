"""
Flag capability queries.

Answers "does this flag apply to the active compiler and target?" so that
the planner can apply flags only where they are supported and record the
ones it skips. A flag that is not known to be unsupported is accepted.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from nativeplan.core.target import TargetEnvironment
from nativeplan.toolchain.compiler import CompilerKind, CompilerProfile

logger = logging.getLogger(__name__)

# Flags only the clang driver understands
CLANG_ONLY_PREFIXES = (
    "-Qunused-arguments",
    "-stdlib=",
)

# Flags that only exist for x86 code generation
X86_ONLY_FLAGS = ("-mcx16",)


@dataclass(frozen=True)
class FlagCapabilities:
    """
    Capability query for one compiler/target pair.

    Attributes:
        compiler: Classified compiler
        target: Target environment
    """

    compiler: CompilerProfile
    target: TargetEnvironment

    @property
    def msvc_dialect(self) -> bool:
        """True when flags must be spelled the MSVC way."""
        return self.compiler.is_msvc or self.target.is_msvc

    def rejection_reason(self, flag: str) -> Optional[str]:
        """
        Explain why a flag does not apply.

        Returns:
            None if the flag applies, otherwise a short reason
        """
        if flag.startswith("/"):
            if not self.msvc_dialect:
                return "MSVC flag on a GNU-style compiler"
            return None

        if self.msvc_dialect:
            return "GNU-style flag on MSVC"

        if flag.startswith(CLANG_ONLY_PREFIXES) and self.compiler.kind is CompilerKind.GCC:
            return "clang-only flag on gcc"

        if flag in X86_ONLY_FLAGS and not self.target.is_x86:
            return f"x86-only flag on {self.target.arch}"

        return None

    def supports(self, flag: str) -> bool:
        return self.rejection_reason(flag) is None
