"""
Unit tests for target environment detection.
"""

import pytest

from nativeplan.core.exceptions import MissingContextFactError
from nativeplan.core.target import (
    Msystem,
    OperatingSystem,
    TargetEnv,
    TargetEnvironment,
    TargetFamily,
)
from tests.utils.builders import ContextBuilder


class TestEnumParsing:
    """Tests for the normalizing parsers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("windows", OperatingSystem.WINDOWS),
            ("Linux", OperatingSystem.LINUX),
            ("macos", OperatingSystem.MACOS),
            ("darwin", OperatingSystem.MACOS),
            ("freebsd", OperatingSystem.FREEBSD),
            ("openbsd", OperatingSystem.OPENBSD),
            ("android", OperatingSystem.ANDROID),
            ("haiku", OperatingSystem.HAIKU),
            ("netbsd", OperatingSystem.OTHER),
        ],
    )
    def test_operating_system(self, value, expected):
        assert OperatingSystem.parse(value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("gnu", TargetEnv.GNU),
            ("msvc", TargetEnv.MSVC),
            ("musl", TargetEnv.MUSL),
            ("", TargetEnv.UNKNOWN),
            ("sgx", TargetEnv.UNKNOWN),
        ],
    )
    def test_target_env(self, value, expected):
        assert TargetEnv.parse(value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("unix", TargetFamily.UNIX),
            ("windows", TargetFamily.WINDOWS),
            ("unix,wasm", TargetFamily.UNIX),
            ("wasm", TargetFamily.OTHER),
            ("", TargetFamily.OTHER),
        ],
    )
    def test_target_family(self, value, expected):
        assert TargetFamily.parse(value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("CLANG64", Msystem.CLANG64),
            ("clangarm64", Msystem.CLANGARM64),
            ("UCRT64", Msystem.UCRT64),
            ("MINGW64", Msystem.OTHER),
            ("CLANG32", Msystem.OTHER),
        ],
    )
    def test_msystem(self, value, expected):
        assert Msystem.parse(value) is expected


class TestTargetEnvironmentFromContext:
    """Tests for TargetEnvironment.from_context."""

    def test_linux(self):
        ctx = ContextBuilder().for_target("linux").build()

        target = TargetEnvironment.from_context(ctx)

        assert target.os is OperatingSystem.LINUX
        assert target.env is TargetEnv.GNU
        assert target.family is TargetFamily.UNIX
        assert target.triple == "x86_64-unknown-linux-gnu"
        assert target.msystem is None
        assert target.is_linux and target.is_unix and target.is_gnu
        assert not target.is_windows and not target.is_msvc

    def test_msys2_tag_kept_raw(self):
        ctx = ContextBuilder().for_target("mingw").with_msystem("CLANG64").build()

        target = TargetEnvironment.from_context(ctx)

        assert target.msystem is Msystem.CLANG64
        assert target.msystem_name == "CLANG64"
        assert target.is_clang_msys

    def test_empty_msystem_is_unset(self):
        ctx = ContextBuilder().for_target("mingw").with_msystem("").build()

        target = TargetEnvironment.from_context(ctx)

        assert target.msystem is None
        assert not target.is_clang_msys

    def test_clang32_counts_as_clang_msys(self):
        """Test that any CLANG-flavoured MSYS2 environment selects the LLVM runtime."""
        ctx = ContextBuilder().for_target("mingw").with_msystem("CLANG32").build()

        target = TargetEnvironment.from_context(ctx)

        assert target.msystem is Msystem.OTHER
        assert target.is_clang_msys

    @pytest.mark.parametrize(
        "fact", ["target_os", "target_env", "target_family", "target_triple"]
    )
    def test_missing_required_fact_is_fatal(self, fact):
        ctx = ContextBuilder().without(fact).build()

        with pytest.raises(MissingContextFactError) as exc_info:
            TargetEnvironment.from_context(ctx)

        assert exc_info.value.fact == fact

    def test_android_flag_follows_triple(self):
        ctx = ContextBuilder().for_target("android").build()

        target = TargetEnvironment.from_context(ctx)

        assert target.is_android
        assert target.arch == "aarch64"

    @pytest.mark.parametrize(
        "triple,is_x86",
        [
            ("x86_64-unknown-linux-gnu", True),
            ("i686-pc-windows-gnu", True),
            ("aarch64-unknown-linux-gnu", False),
            ("riscv64gc-unknown-linux-gnu", False),
        ],
    )
    def test_is_x86(self, triple, is_x86):
        ctx = ContextBuilder().with_triple(triple).build()

        assert TargetEnvironment.from_context(ctx).is_x86 is is_x86

    def test_target_is_immutable(self):
        target = TargetEnvironment.from_context(ContextBuilder().build())

        with pytest.raises(AttributeError):
            target.triple = "other"

    def test_str(self):
        ctx = ContextBuilder().for_target("mingw").with_msystem("UCRT64").build()

        text = str(TargetEnvironment.from_context(ctx))

        assert "x86_64-pc-windows-gnu" in text
        assert "UCRT64" in text
