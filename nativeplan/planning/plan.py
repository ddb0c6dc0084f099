"""
Build plan model.

A BuildPlan is the append-only result of a planning run: ordered compiler
flags (C and C++), ordered defines, link directives, toolchain substitutions
and provenance strings. Stages only ever add to it; duplicate flags and
repeated link directives of the same kind are absorbed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from nativeplan.core.exceptions import LinkKindConflictError
from nativeplan.core.features import BuildProfile

logger = logging.getLogger(__name__)


class LinkKind(Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class LinkDirective:
    """A library the final link must pull in."""

    name: str
    kind: LinkKind = LinkKind.DYNAMIC

    def __str__(self) -> str:
        return f"{self.kind.value}={self.name}"


@dataclass(frozen=True)
class RejectedFlag:
    """A flag the capability query refused, kept for inspection."""

    flag: str
    reason: str


@dataclass
class ToolchainSettings:
    """
    Compiler and linker substitutions requested before the generic rules run.

    Attributes:
        c_compiler: Replacement C compiler executable
        cxx_compiler: Replacement C++ compiler executable
        linker: Linker to use (e.g. 'lld')
        stdlib: C++ standard library (e.g. 'libc++')
        system_name: System identity to report to the build system
        c_flags: Baseline C flags for the substituted toolchain
        cxx_flags: Baseline C++ flags for the substituted toolchain
        exe_linker_flags: Flags for the final executable link
    """

    c_compiler: Optional[str] = None
    cxx_compiler: Optional[str] = None
    linker: Optional[str] = None
    stdlib: Optional[str] = None
    system_name: Optional[str] = None
    c_flags: List[str] = field(default_factory=list)
    cxx_flags: List[str] = field(default_factory=list)
    exe_linker_flags: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(
            [
                self.c_compiler,
                self.cxx_compiler,
                self.linker,
                self.stdlib,
                self.system_name,
                self.c_flags,
                self.cxx_flags,
                self.exe_linker_flags,
            ]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "c_compiler": self.c_compiler,
            "cxx_compiler": self.cxx_compiler,
            "linker": self.linker,
            "stdlib": self.stdlib,
            "system_name": self.system_name,
            "c_flags": list(self.c_flags),
            "cxx_flags": list(self.cxx_flags),
            "exe_linker_flags": list(self.exe_linker_flags),
        }


@dataclass
class BuildPlan:
    """
    Append-only accumulator for one planning run.

    Attributes:
        target_lib: Output name of the native library being built
        profile: Build profile
        out_dir: Native build output directory
        c_flags: Ordered C compiler flags
        cxx_flags: Ordered C++ compiler flags
        rejected_flags: Flags dropped by the capability query
        defines: Ordered (name, value) pairs
        link_libraries: Ordered link directives
        search_paths: Ordered native library search paths
        toolchain: Toolchain substitutions
        provenance: Build information exported to the compiled output
    """

    target_lib: str
    profile: BuildProfile = BuildProfile.RELEASE
    out_dir: str = "."
    c_flags: List[str] = field(default_factory=list)
    cxx_flags: List[str] = field(default_factory=list)
    rejected_flags: List[RejectedFlag] = field(default_factory=list)
    defines: List[Tuple[str, str]] = field(default_factory=list)
    link_libraries: List[LinkDirective] = field(default_factory=list)
    search_paths: List[str] = field(default_factory=list)
    toolchain: ToolchainSettings = field(default_factory=ToolchainSettings)
    provenance: Dict[str, str] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def add_flag(self, flag: str, c: bool = True, cxx: bool = True) -> bool:
        """
        Append a flag to the C and/or C++ flag lists.

        A flag already present in a list is not appended again.

        Returns:
            True if the flag was appended to at least one list
        """
        added = False
        if c and flag not in self.c_flags:
            self.c_flags.append(flag)
            added = True
        if cxx and flag not in self.cxx_flags:
            self.cxx_flags.append(flag)
            added = True
        return added

    def reject_flag(self, flag: str, reason: str) -> None:
        rejected = RejectedFlag(flag, reason)
        if rejected not in self.rejected_flags:
            self.rejected_flags.append(rejected)

    def has_flag(self, flag: str) -> bool:
        return flag in self.c_flags or flag in self.cxx_flags

    @property
    def flags(self) -> List[str]:
        """All flags in first-seen order, C flags first."""
        merged = list(self.c_flags)
        merged.extend(f for f in self.cxx_flags if f not in merged)
        return merged

    # ------------------------------------------------------------------
    # Defines
    # ------------------------------------------------------------------

    def define(self, name: str, value: str) -> None:
        self.defines.append((name, value))

    def define_value(self, name: str) -> Optional[str]:
        """Return the last value defined for name, or None."""
        for key, value in reversed(self.defines):
            if key == name:
                return value
        return None

    def has_define(self, name: str) -> bool:
        return any(key == name for key, _ in self.defines)

    def define_count(self, name: str) -> int:
        return sum(1 for key, _ in self.defines if key == name)

    # ------------------------------------------------------------------
    # Linking
    # ------------------------------------------------------------------

    def link(self, name: str, kind: LinkKind = LinkKind.DYNAMIC) -> None:
        """
        Append a link directive.

        Raises:
            LinkKindConflictError: If name is already linked with the other kind
        """
        for existing in self.link_libraries:
            if existing.name != name:
                continue
            if existing.kind is not kind:
                raise LinkKindConflictError(name, existing.kind.value, kind.value)
            logger.debug(f"Link directive for {name} already present")
            return
        self.link_libraries.append(LinkDirective(name, kind))

    def add_search_path(self, path: str) -> None:
        if path not in self.search_paths:
            self.search_paths.append(path)

    def library_names(self) -> List[str]:
        return [directive.name for directive in self.link_libraries]

    def link_kind(self, name: str) -> Optional[LinkKind]:
        for directive in self.link_libraries:
            if directive.name == name:
                return directive.kind
        return None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary suitable for JSON or YAML output."""
        return {
            "target_lib": self.target_lib,
            "profile": self.profile.value,
            "out_dir": self.out_dir,
            "c_flags": list(self.c_flags),
            "cxx_flags": list(self.cxx_flags),
            "rejected_flags": [
                {"flag": r.flag, "reason": r.reason} for r in self.rejected_flags
            ],
            "defines": [[name, value] for name, value in self.defines],
            "link_libraries": [
                {"name": d.name, "kind": d.kind.value} for d in self.link_libraries
            ],
            "search_paths": list(self.search_paths),
            "toolchain": self.toolchain.to_dict(),
            "provenance": dict(self.provenance),
        }
