"""
End-to-end tests for plan_build: the concrete scenarios and the
properties every plan must satisfy.
"""

from dataclasses import fields

import pytest

from nativeplan.core.exceptions import MissingContextFactError, UnsupportedArchitectureError
from nativeplan.core.features import BackendKind, FeatureSet
from nativeplan.planning.plan import LinkKind
from nativeplan.planning.planner import plan_build, resolve_inputs
from nativeplan.toolchain.compiler import CompilerKind
from tests.utils.builders import TARGET_PRESETS, ContextBuilder

UNIX_ONLY_FLAGS = ["-fPIC", "-pthread", "-Wno-unused-parameter", "-fno-rtti", "-mcx16"]

TOGGLES = [f.name for f in fields(FeatureSet)]


class TestScenarios:
    """The reference scenarios."""

    def test_linux_stats_cxx20(self):
        ctx = ContextBuilder().for_target("linux").with_features("stats").build()

        plan = plan_build(ctx)

        assert plan.define_value("USE_SNMALLOC_STATS") == "ON"
        for library in ["atomic", "stdc++", "pthread"]:
            assert plan.link_kind(library) is LinkKind.DYNAMIC
        assert not any(flag.startswith("/") for flag in plan.flags)
        assert "-std=c++20" in plan.cxx_flags

    def test_msvc_without_win8compat(self):
        ctx = ContextBuilder().for_target("msvc").build()

        plan = plan_build(ctx)

        assert plan.link_kind("mincore") is LinkKind.DYNAMIC
        for flag in ["/nologo", "/W4", "/WX", "/Zc:inline"]:
            assert flag in plan.cxx_flags
        assert "-fPIC" not in plan.flags

    def test_clangarm64_override(self):
        ctx = (
            ContextBuilder()
            .for_target("mingw-arm64")
            .with_msystem("CLANGARM64")
            .build()
        )

        plan = plan_build(ctx)

        assert plan.toolchain.c_compiler == "clang"
        assert plan.toolchain.cxx_compiler == "clang++"
        assert "-fuse-ld=lld" in plan.cxx_flags
        assert "-stdlib=libc++" in plan.cxx_flags
        assert plan.link_kind("c++") is LinkKind.DYNAMIC
        assert "stdc++" not in plan.library_names()

    def test_android_armv7(self):
        ctx = (
            ContextBuilder()
            .for_target("android")
            .with_triple("armv7-linux-androideabi")
            .with_ndk("/opt/android-ndk")
            .build()
        )

        plan = plan_build(ctx)

        assert plan.define_value("ANDROID_ABI") == "armeabi-v7a"
        assert plan.define_value("ANDROID_ARM_MODE") == "arm"
        assert plan.define_value("CMAKE_TOOLCHAIN_FILE").startswith("/opt/android-ndk/")

    def test_riscv_linux_without_ndk(self):
        ctx = ContextBuilder().with_triple("riscv64-unknown-linux").build()

        plan = plan_build(ctx)

        assert not plan.has_define("ANDROID_ABI")
        assert not plan.has_define("CMAKE_TOOLCHAIN_FILE")
        assert "-mcx16" not in plan.flags

    def test_lto_with_unknown_compiler(self):
        ctx = ContextBuilder().with_compiler(None).with_features("lto").build()

        inputs = resolve_inputs(ctx)
        plan = plan_build(ctx)

        assert inputs.compiler.kind is CompilerKind.UNKNOWN
        assert not plan.has_define("SNMALLOC_IPO")
        assert "-fPIC" in plan.cxx_flags
        assert plan.has_define("SNMALLOC_USE_WAIT_ON_ADDRESS")
        assert "atomic" in plan.library_names()


class TestDeterminism:
    """Re-planning the same inputs yields identical output."""

    @pytest.mark.parametrize("preset", sorted(set(TARGET_PRESETS) - {"android"}))
    @pytest.mark.parametrize("backend", [BackendKind.CC, BackendKind.CMAKE])
    def test_identical_plans(self, preset, backend):
        ctx = ContextBuilder().for_target(preset).with_features("stats", "lto").build()

        assert plan_build(ctx, backend).to_dict() == plan_build(ctx, backend).to_dict()


class TestMutualExclusion:
    """MSVC and GNU flag dialects never mix."""

    @pytest.mark.parametrize("msystem", [None, "CLANG64", "UCRT64"])
    @pytest.mark.parametrize("hint", [None, "cl.exe", "clang", "gcc"])
    @pytest.mark.parametrize("toggle", TOGGLES)
    def test_msvc_has_no_unix_flags(self, msystem, hint, toggle):
        ctx = (
            ContextBuilder()
            .for_target("msvc")
            .with_msystem(msystem)
            .with_compiler(hint)
            .with_features(toggle)
            .build()
        )

        plan = plan_build(ctx)

        for flag in UNIX_ONLY_FLAGS:
            assert flag not in plan.flags
        assert all(flag.startswith("/") for flag in plan.flags)

    @pytest.mark.parametrize("preset", ["linux", "mingw", "linux-musl", "freebsd"])
    @pytest.mark.parametrize("toggle", TOGGLES)
    def test_gnu_has_no_msvc_flags(self, preset, toggle):
        ctx = ContextBuilder().for_target(preset).with_compiler("gcc").with_features(toggle).build()

        plan = plan_build(ctx)

        assert not any(flag.startswith("/") for flag in plan.flags)


def _diff(a, b):
    return {key for key in a if a[key] != b[key]}


class TestToggleIndependence:
    """Flipping one toggle only changes what that toggle controls."""

    AFFECTED = {
        "native_cpu": {"c_flags", "cxx_flags", "rejected_flags", "defines"},
        "qemu": {"defines"},
        "wait_on_address": {"defines"},
        "lto": {"defines"},
        "notls": {"defines"},
        "win8compat": {"defines", "link_libraries"},
        "stats": {"defines"},
        "android_lld": set(),
        "local_dynamic_tls": {"c_flags", "cxx_flags"},
    }

    @pytest.mark.parametrize("preset", ["linux", "msvc", "mingw", "macos"])
    @pytest.mark.parametrize("toggle", TOGGLES)
    def test_single_toggle(self, preset, toggle):
        base = ContextBuilder().for_target(preset).with_compiler("clang").build()

        off = plan_build(base).to_dict()
        on = plan_build(base.with_features(toggle)).to_dict()

        assert _diff(off, on) <= self.AFFECTED[toggle]

    def test_wait_on_address_only_changes_its_value(self):
        base = ContextBuilder().with_compiler("gcc").build()

        off = plan_build(base)
        on = plan_build(base.with_features("wait_on_address"))

        changed = [(a, b) for a, b in zip(off.defines, on.defines) if a != b]
        assert changed == [
            (("SNMALLOC_USE_WAIT_ON_ADDRESS", "0"), ("SNMALLOC_USE_WAIT_ON_ADDRESS", "1"))
        ]


class TestAndroidCompleteness:
    """Every supported architecture yields exactly one ABI."""

    @pytest.mark.parametrize(
        "triple,abi",
        [
            ("aarch64-linux-android", "arm64-v8a"),
            ("armv7-linux-androideabi", "armeabi-v7a"),
            ("x86_64-linux-android", "x86_64"),
            ("i686-linux-android", "x86"),
            ("arm-linux-androideabi", "armeabi-v7a"),
        ],
    )
    def test_one_abi(self, triple, abi):
        ctx = ContextBuilder().for_target("android").with_triple(triple).with_ndk("/ndk").build()

        plan = plan_build(ctx)

        assert plan.define_count("ANDROID_ABI") == 1
        assert plan.define_value("ANDROID_ABI") == abi

    def test_unsupported_architecture(self):
        ctx = (
            ContextBuilder()
            .for_target("android")
            .with_triple("riscv64-linux-android")
            .with_ndk("/ndk")
            .build()
        )

        with pytest.raises(UnsupportedArchitectureError):
            plan_build(ctx)

    def test_missing_ndk(self):
        ctx = ContextBuilder().for_target("android").build()

        with pytest.raises(MissingContextFactError):
            plan_build(ctx)


class TestLtoGating:
    """IPO is requested only for clang and gcc."""

    @pytest.mark.parametrize(
        "preset,hint,expected",
        [
            ("linux", "clang", 1),
            ("linux", "gcc", 1),
            ("linux", None, 0),
            ("mingw", "x86_64-w64-mingw32-gcc", 1),
            ("msvc", "cl.exe", 0),
            ("msvc", "clang", 0),
        ],
    )
    def test_ipo_define(self, preset, hint, expected):
        ctx = ContextBuilder().for_target(preset).with_compiler(hint).with_features("lto").build()

        assert plan_build(ctx).define_count("SNMALLOC_IPO") == expected


class TestOrdering:
    """Toolchain override results stay ahead of the generic rules."""

    def test_override_flags_come_first(self):
        ctx = ContextBuilder().for_target("mingw").with_msystem("CLANG64").build()

        plan = plan_build(ctx)

        assert plan.cxx_flags[:2] == ["-fuse-ld=lld", "-stdlib=libc++"]
        assert plan.cxx_flags.count("-mcx16") == 1

    def test_cmake_preamble_first(self):
        plan = plan_build(ContextBuilder().build(), BackendKind.CMAKE)

        assert plan.defines[:2] == [
            ("SNMALLOC_RUST_SUPPORT", "ON"),
            ("CMAKE_SH", "CMAKE_SH-NOTFOUND"),
        ]


class TestProvenance:
    """Build information exported to the compiled output."""

    def test_fields(self):
        ctx = ContextBuilder().for_target("linux").with_compiler("gcc").build()

        provenance = plan_build(ctx).provenance

        assert provenance == {
            "BUILD_TARGET_OS": "linux",
            "BUILD_TARGET_ENV": "gnu",
            "BUILD_TARGET_FAMILY": "unix",
            "BUILD_TARGET": "x86_64-unknown-linux-gnu",
            "BUILD_CC": "Gcc",
            "BUILD_TYPE": "Release",
            "BUILD_DEBUG": "false",
            "BUILD_OPTIM_LEVEL": "-O3",
            "BUILD_CXX_STANDARD": "20",
        }

    def test_msystem_included_when_set(self):
        ctx = ContextBuilder().for_target("mingw").with_msystem("UCRT64").build()

        assert plan_build(ctx).provenance["BUILD_MSYSTEM"] == "UCRT64"

    def test_debug(self):
        ctx = ContextBuilder().with_features("debug", "usecxx17").build()

        provenance = plan_build(ctx).provenance

        assert provenance["BUILD_TYPE"] == "Debug"
        assert provenance["BUILD_DEBUG"] == "true"
        assert provenance["BUILD_OPTIM_LEVEL"] == "-O0"
        assert provenance["BUILD_CXX_STANDARD"] == "17"


class TestOverrideAndCapabilities:
    """Override flags and the capability query agree on the plan."""

    def test_msvc_from_msys2_shell_keeps_msvc_toolchain(self):
        ctx = ContextBuilder().for_target("msvc").with_msystem("CLANG64").build()

        plan = plan_build(ctx, BackendKind.CMAKE)

        assert plan.toolchain.is_empty()
        assert "-fuse-ld=lld" not in plan.flags
        assert "mincore" in plan.library_names()

    def test_override_flag_not_reported_as_rejected(self):
        ctx = ContextBuilder().for_target("mingw-arm64").with_msystem("CLANGARM64").build()

        plan = plan_build(ctx)

        rejected = {entry.flag for entry in plan.rejected_flags}
        assert plan.has_flag("-mcx16")
        assert "-mcx16" not in rejected
        assert not rejected & set(plan.flags)
