"""
Compiler classification.

The active compiler is classified once per planning run from the target
environment and an optional executable hint (typically the CC variable).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nativeplan.core import context as keys
from nativeplan.core.context import BuildContext
from nativeplan.core.target import TargetEnvironment

logger = logging.getLogger(__name__)


class CompilerKind(Enum):
    CLANG = "clang"
    GCC = "gcc"
    MSVC = "msvc"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        """Name used in build provenance (e.g. 'Clang')."""
        return self.value.capitalize()


@dataclass(frozen=True)
class CompilerProfile:
    """
    Classified compiler.

    Attributes:
        kind: Compiler family
        hint: Executable hint the classification was made from, if any
    """

    kind: CompilerKind
    hint: Optional[str] = None

    @property
    def is_msvc(self) -> bool:
        return self.kind is CompilerKind.MSVC

    @property
    def is_known_gnu_compatible(self) -> bool:
        """True for compilers known to support GNU-style IPO (clang, gcc)."""
        return self.kind in (CompilerKind.CLANG, CompilerKind.GCC)


def detect_compiler(target: TargetEnvironment, hint: Optional[str] = None) -> CompilerProfile:
    """
    Classify the compiler for a target.

    MSVC environments always use MSVC. Otherwise the hint is searched for
    'clang' before 'gcc', since clang drivers are often installed under
    gcc-like names as well.

    Args:
        target: Detected target environment
        hint: Compiler executable name or path

    Returns:
        CompilerProfile; kind is UNKNOWN when the hint is missing or unrecognized

    Example:
        >>> detect_compiler(linux_target, "/usr/bin/clang-18").kind
        <CompilerKind.CLANG: 'clang'>
    """
    if target.is_msvc:
        return CompilerProfile(CompilerKind.MSVC, hint)

    if hint:
        lowered = hint.lower()
        if "clang" in lowered:
            return CompilerProfile(CompilerKind.CLANG, hint)
        if "gcc" in lowered:
            return CompilerProfile(CompilerKind.GCC, hint)

    logger.debug(f"Could not classify compiler from hint {hint!r}")
    return CompilerProfile(CompilerKind.UNKNOWN, hint)


def detect_compiler_from_context(ctx: BuildContext, target: TargetEnvironment) -> CompilerProfile:
    return detect_compiler(target, ctx.get(keys.COMPILER))
