"""
MSYS2 toolchain override.

MSYS2 sub-environments pin a compiler/runtime pairing that differs from a
plain MinGW install. When one is active the compiler executables, linker
and baseline flags are substituted before any generic rule runs, so the
generic rules compose on top of them.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from nativeplan.core.target import Msystem, TargetEnvironment
from nativeplan.planning.plan import BuildPlan, ToolchainSettings

logger = logging.getLogger(__name__)

PRAGMA_WARNING = "-Wno-error=unknown-pragmas"


@dataclass(frozen=True)
class OverrideSpec:
    """Substitutions for one MSYS2 sub-environment."""

    c_compiler: Optional[str] = None
    cxx_compiler: Optional[str] = None
    linker: Optional[str] = None
    stdlib: Optional[str] = None
    system_name: Optional[str] = None
    c_flags: List[str] = field(default_factory=list)
    cxx_flags: List[str] = field(default_factory=list)
    exe_linker_flags: List[str] = field(default_factory=list)


_CLANG_OVERRIDE = OverrideSpec(
    c_compiler="clang",
    cxx_compiler="clang++",
    linker="lld",
    stdlib="libc++",
    c_flags=["-fuse-ld=lld", "-mcx16", PRAGMA_WARNING, "-Qunused-arguments"],
    cxx_flags=[
        "-fuse-ld=lld",
        "-stdlib=libc++",
        "-mcx16",
        PRAGMA_WARNING,
        "-Qunused-arguments",
    ],
    exe_linker_flags=["-fuse-ld=lld", "-stdlib=libc++"],
)

_UCRT_OVERRIDE = OverrideSpec(
    linker="lld",
    system_name="Windows",
    c_flags=["-fuse-ld=lld", PRAGMA_WARNING],
    cxx_flags=["-fuse-ld=lld", PRAGMA_WARNING],
)

OVERRIDES: Dict[Msystem, OverrideSpec] = {
    Msystem.CLANG64: _CLANG_OVERRIDE,
    Msystem.CLANGARM64: _CLANG_OVERRIDE,
    Msystem.UCRT64: _UCRT_OVERRIDE,
}


class ToolchainOverride:
    """Apply MSYS2 sub-environment substitutions to a plan."""

    def __init__(self, target: TargetEnvironment):
        self.target = target

    def spec(self) -> Optional[OverrideSpec]:
        """Return the override for the target, or None when none applies."""
        if self.target.msystem is None or not self.target.is_windows:
            return None
        if self.target.is_msvc:
            logger.debug(f"Ignoring MSYS2 {self.target.msystem_name} for an MSVC target")
            return None
        return OVERRIDES.get(self.target.msystem)

    def apply(self, plan: BuildPlan) -> bool:
        """
        Record the substitutions and baseline flags in plan.

        Returns:
            True if an override was applied
        """
        spec = self.spec()
        if spec is None:
            return False

        logger.info(f"Applying MSYS2 {self.target.msystem_name} toolchain override")
        plan.toolchain = ToolchainSettings(
            c_compiler=spec.c_compiler,
            cxx_compiler=spec.cxx_compiler,
            linker=spec.linker,
            stdlib=spec.stdlib,
            system_name=spec.system_name,
            c_flags=list(spec.c_flags),
            cxx_flags=list(spec.cxx_flags),
            exe_linker_flags=list(spec.exe_linker_flags),
        )

        # The substituted toolchain accepts these; they bypass the capability query
        for flag in spec.c_flags:
            plan.add_flag(flag, c=True, cxx=False)
        for flag in spec.cxx_flags:
            plan.add_flag(flag, c=False, cxx=True)
        return True
