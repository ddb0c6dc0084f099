"""
Pytest configuration and shared fixtures for nativeplan tests.
"""

import pytest

from nativeplan.core.context import BuildContext
from nativeplan.core.features import BuildOptions, FeatureSet
from nativeplan.core.target import TargetEnvironment
from nativeplan.toolchain.compiler import detect_compiler
from tests.utils.builders import ContextBuilder


@pytest.fixture
def context_builder() -> ContextBuilder:
    """Fresh context builder defaulting to Linux/GNU."""
    return ContextBuilder()


@pytest.fixture
def linux_context() -> BuildContext:
    return ContextBuilder().for_target("linux").with_compiler("gcc").build()


@pytest.fixture
def msvc_context() -> BuildContext:
    return ContextBuilder().for_target("msvc").with_compiler("cl.exe").build()


@pytest.fixture
def linux_target(linux_context) -> TargetEnvironment:
    return TargetEnvironment.from_context(linux_context)


@pytest.fixture
def msvc_target(msvc_context) -> TargetEnvironment:
    return TargetEnvironment.from_context(msvc_context)


@pytest.fixture
def gcc_profile(linux_target):
    return detect_compiler(linux_target, "gcc")


@pytest.fixture
def default_features() -> FeatureSet:
    return FeatureSet()


@pytest.fixture
def default_options() -> BuildOptions:
    return BuildOptions()
