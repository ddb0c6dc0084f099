"""
Feature toggles and build options.

FeatureSet holds the independent boolean toggles that drive the planner.
BuildOptions holds the remaining per-build choices: profile, C++ dialect,
checked library variant, backend and output directory.
"""

import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict

from nativeplan.core import context as keys
from nativeplan.core.context import BuildContext
from nativeplan.core.exceptions import InvalidContextFactError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureSet:
    """
    Immutable snapshot of the named feature toggles.

    Attributes:
        native_cpu: Tune for the build machine's CPU
        qemu: Work around QEMU user-mode limitations
        wait_on_address: Use the OS wait-on-address primitive
        lto: Request inter-procedural optimization
        notls: Avoid thread-local storage (allows dynamic loading)
        win8compat: Target Windows 8 instead of requiring mincore
        stats: Compile allocator statistics
        android_lld: Link Android targets with lld
        local_dynamic_tls: Use the local-dynamic TLS model
    """

    native_cpu: bool = False
    qemu: bool = False
    wait_on_address: bool = False
    lto: bool = False
    notls: bool = False
    win8compat: bool = False
    stats: bool = False
    android_lld: bool = False
    local_dynamic_tls: bool = False

    @classmethod
    def from_context(cls, ctx: BuildContext) -> "FeatureSet":
        return cls(**{f.name: ctx.has_feature(f.name) for f in fields(cls)})

    def enabled(self) -> Dict[str, bool]:
        """Return only the toggles that are switched on."""
        return {f.name: True for f in fields(self) if getattr(self, f.name)}


class BuildProfile(Enum):
    DEBUG = "debug"
    RELEASE = "release"

    @property
    def build_type(self) -> str:
        """CMake-style build type name."""
        return self.value.capitalize()

    @property
    def optim_level(self) -> str:
        return "-O0" if self is BuildProfile.DEBUG else "-O3"


class CxxStandard(Enum):
    CXX17 = "17"
    CXX20 = "20"

    @property
    def gnu_flag(self) -> str:
        return f"-std=c++{self.value}"

    @property
    def msvc_flag(self) -> str:
        return f"/std:c++{self.value}"


class BackendKind(Enum):
    """Native build backend the plan is produced for."""

    CC = "cc"
    CMAKE = "cmake"


CHECKED_LIBRARY = "snmallocshim-checks-rust"
UNCHECKED_LIBRARY = "snmallocshim-rust"


@dataclass(frozen=True)
class BuildOptions:
    """
    Per-build options that are not feature toggles.

    Attributes:
        profile: Debug or release
        cxx_standard: Selected C++ dialect
        checked: Build the checked allocator variant
        backend: Direct compilation or CMake orchestration
        out_dir: Native build output directory
        android_shared_stl: Use the shared C++ STL on Android
    """

    profile: BuildProfile = BuildProfile.RELEASE
    cxx_standard: CxxStandard = CxxStandard.CXX20
    checked: bool = False
    backend: BackendKind = BackendKind.CMAKE
    out_dir: str = "."
    android_shared_stl: bool = False

    @classmethod
    def from_context(cls, ctx: BuildContext) -> "BuildOptions":
        """
        Read build options from a context.

        Feature names follow the Cargo manifest ('debug', 'usecxx17', 'check',
        'build_cc', 'android_shared_stl'); explicit facts take precedence.

        Raises:
            InvalidContextFactError: If an explicit fact has an unknown value
        """
        profile = BuildProfile.DEBUG if ctx.has_feature("debug") else BuildProfile.RELEASE
        explicit_profile = ctx.get(keys.PROFILE)
        if explicit_profile:
            profile = _parse_enum(BuildProfile, keys.PROFILE, explicit_profile.lower())

        cxx_standard = CxxStandard.CXX17 if ctx.has_feature("usecxx17") else CxxStandard.CXX20
        explicit_std = ctx.get(keys.CXX_STANDARD)
        if explicit_std:
            cxx_standard = _parse_enum(CxxStandard, keys.CXX_STANDARD, explicit_std)

        backend = BackendKind.CC if ctx.has_feature("build_cc") else BackendKind.CMAKE
        explicit_backend = ctx.get(keys.BACKEND)
        if explicit_backend:
            backend = _parse_enum(BackendKind, keys.BACKEND, explicit_backend.lower())

        return cls(
            profile=profile,
            cxx_standard=cxx_standard,
            checked=ctx.has_feature("check"),
            backend=backend,
            out_dir=ctx.get(keys.OUT_DIR) or ".",
            android_shared_stl=ctx.has_feature("android_shared_stl"),
        )

    @property
    def is_debug(self) -> bool:
        return self.profile is BuildProfile.DEBUG

    @property
    def target_lib(self) -> str:
        """Output name of the compiled native library."""
        return CHECKED_LIBRARY if self.checked else UNCHECKED_LIBRARY


def _parse_enum(enum_cls, fact: str, value: str):
    try:
        return enum_cls(value)
    except ValueError:
        expected = " or ".join(member.value for member in enum_cls)
        raise InvalidContextFactError(fact, value, expected)
