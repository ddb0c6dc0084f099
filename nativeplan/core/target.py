"""
Target environment detection for nativeplan.

Turns the raw target facts of a build context (OS, environment, family,
triple and an optional MSYS2 sub-environment) into a normalized, immutable
TargetEnvironment. Detection only; no build decisions are made here.

Usage:
    from nativeplan.core.target import TargetEnvironment

    target = TargetEnvironment.from_context(ctx)
    if target.is_windows and target.is_gnu:
        ...
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nativeplan.core import context as keys
from nativeplan.core.context import BuildContext

logger = logging.getLogger(__name__)


class OperatingSystem(Enum):
    """Target operating system."""

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    FREEBSD = "freebsd"
    OPENBSD = "openbsd"
    ANDROID = "android"
    HAIKU = "haiku"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "OperatingSystem":
        normalized = value.strip().lower()
        if normalized == "darwin":
            return cls.MACOS
        for member in cls:
            if member.value == normalized:
                return member
        return cls.OTHER


class TargetEnv(Enum):
    """Target ABI environment."""

    GNU = "gnu"
    MSVC = "msvc"
    MUSL = "musl"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "TargetEnv":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


class TargetFamily(Enum):
    """Target platform family."""

    UNIX = "unix"
    WINDOWS = "windows"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "TargetFamily":
        # Cargo may report several families, e.g. "unix,wasm"
        families = {part.strip().lower() for part in value.split(",")}
        if "windows" in families:
            return cls.WINDOWS
        if "unix" in families:
            return cls.UNIX
        return cls.OTHER


class Msystem(Enum):
    """MSYS2 sub-environment."""

    CLANG64 = "CLANG64"
    CLANGARM64 = "CLANGARM64"
    UCRT64 = "UCRT64"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "Msystem":
        normalized = value.strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class TargetEnvironment:
    """
    Immutable facts about the build target.

    Attributes:
        os: Normalized operating system
        env: Normalized ABI environment
        family: Platform family
        triple: Full target triple (e.g. 'x86_64-unknown-linux-gnu')
        msystem: MSYS2 sub-environment, if any
        os_name: OS string as reported by the build driver
        env_name: Environment string as reported by the build driver
        family_name: Family string as reported by the build driver
        msystem_name: MSYS2 tag as reported, if any
    """

    os: OperatingSystem
    env: TargetEnv
    family: TargetFamily
    triple: str
    msystem: Optional[Msystem] = None
    os_name: str = ""
    env_name: str = ""
    family_name: str = ""
    msystem_name: Optional[str] = None

    @classmethod
    def from_context(cls, ctx: BuildContext) -> "TargetEnvironment":
        """
        Detect the target environment from a build context.

        Raises:
            MissingContextFactError: If OS, environment, family or triple is absent
        """
        os_name = ctx.require(keys.TARGET_OS, "target OS")
        env_name = ctx.require(keys.TARGET_ENV, "target environment")
        family_name = ctx.require(keys.TARGET_FAMILY, "target family")
        triple = ctx.require(keys.TARGET_TRIPLE, "target triple")

        msystem_name = ctx.get(keys.MSYSTEM) or None
        target = cls(
            os=OperatingSystem.parse(os_name),
            env=TargetEnv.parse(env_name),
            family=TargetFamily.parse(family_name),
            triple=triple,
            msystem=Msystem.parse(msystem_name) if msystem_name else None,
            os_name=os_name,
            env_name=env_name,
            family_name=family_name,
            msystem_name=msystem_name,
        )
        logger.debug(f"Detected target: {target}")
        return target

    @property
    def is_msvc(self) -> bool:
        return self.env is TargetEnv.MSVC

    @property
    def is_gnu(self) -> bool:
        return self.env is TargetEnv.GNU

    @property
    def is_windows(self) -> bool:
        return self.family is TargetFamily.WINDOWS

    @property
    def is_unix(self) -> bool:
        return self.family is TargetFamily.UNIX

    @property
    def is_linux(self) -> bool:
        return self.os is OperatingSystem.LINUX

    @property
    def is_android(self) -> bool:
        """True when the triple asks for Android cross-compilation."""
        return "android" in self.triple

    @property
    def is_clang_msys(self) -> bool:
        """True for any clang-flavoured MSYS2 sub-environment (CLANG64, CLANGARM64, CLANG32)."""
        return bool(self.msystem_name) and "CLANG" in self.msystem_name.upper()

    @property
    def arch(self) -> str:
        """Architecture component of the triple."""
        return self.triple.split("-", 1)[0]

    @property
    def is_x86(self) -> bool:
        return self.arch in ("x86_64", "i386", "i586", "i686")

    def __str__(self) -> str:
        parts = [self.triple, f"({self.os.value}/{self.env.value}/{self.family.value})"]
        if self.msystem_name:
            parts.append(f"[{self.msystem_name}]")
        return " ".join(parts)
