"""
Build context for nativeplan.

The build context is the single snapshot of ambient facts a planning run
works from: target description, compiler hint, NDK location, output
directory and the set of enabled feature names. It is captured once, up
front, and threaded through every stage so no stage reads the process
environment on its own.

Usage:
    from nativeplan.core.context import BuildContext

    # From a Cargo build script environment
    ctx = BuildContext.from_environ()

    # From explicit values (tests, config files)
    ctx = BuildContext.from_mapping(
        {"target_os": "linux", "target_env": "gnu",
         "target_family": "unix", "target_triple": "x86_64-unknown-linux-gnu"},
        features=["stats"],
    )
"""

import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from nativeplan.core.exceptions import MissingContextFactError

logger = logging.getLogger(__name__)


# ============================================================================
# Fact Keys
# ============================================================================

TARGET_OS = "target_os"
TARGET_ENV = "target_env"
TARGET_FAMILY = "target_family"
TARGET_TRIPLE = "target_triple"
MSYSTEM = "msystem"
COMPILER = "compiler"
ANDROID_NDK = "android_ndk"
ANDROID_PLATFORM = "android_platform"
OUT_DIR = "out_dir"
BACKEND = "backend"
PROFILE = "profile"
CXX_STANDARD = "cxx_standard"

REQUIRED_FACTS = (TARGET_OS, TARGET_ENV, TARGET_FAMILY, TARGET_TRIPLE)

# Cargo build-script variables -> fact keys
ENVIRON_KEYS = {
    "CARGO_CFG_TARGET_OS": TARGET_OS,
    "CARGO_CFG_TARGET_ENV": TARGET_ENV,
    "CARGO_CFG_TARGET_FAMILY": TARGET_FAMILY,
    "TARGET": TARGET_TRIPLE,
    "MSYSTEM": MSYSTEM,
    "CC": COMPILER,
    "ANDROID_NDK": ANDROID_NDK,
    "ANDROID_PLATFORM": ANDROID_PLATFORM,
    "OUT_DIR": OUT_DIR,
    "NATIVEPLAN_BACKEND": BACKEND,
}

FEATURE_PREFIX = "CARGO_FEATURE_"

# Cargo feature names that differ from the canonical toggle names
FEATURE_ALIASES = {
    "usewait_on_address": "wait_on_address",
}


def normalize_feature_name(name: str) -> str:
    """
    Normalize a feature name to its canonical form.

    Cargo spells features with dashes in manifests and with underscores in
    CARGO_FEATURE_* variables; both map to the same lowercase name.

    Example:
        >>> normalize_feature_name("native-cpu")
        'native_cpu'
        >>> normalize_feature_name("USEWAIT_ON_ADDRESS")
        'wait_on_address'
    """
    canonical = name.strip().lower().replace("-", "_")
    return FEATURE_ALIASES.get(canonical, canonical)


@dataclass(frozen=True)
class BuildContext:
    """
    Immutable snapshot of the ambient build facts.

    Attributes:
        facts: Fact key to string value. Empty strings are present values.
        features: Canonical names of the enabled feature toggles
    """

    facts: Mapping[str, str] = field(default_factory=dict)
    features: FrozenSet[str] = frozenset()

    def __post_init__(self):
        # Detach from the caller's mapping so later mutation cannot leak in
        object.__setattr__(self, "facts", MappingProxyType(dict(self.facts)))
        object.__setattr__(
            self,
            "features",
            frozenset(normalize_feature_name(f) for f in self.features),
        )

    @classmethod
    def from_mapping(
        cls,
        facts: Mapping[str, Optional[str]],
        features: Iterable[str] = (),
    ) -> "BuildContext":
        """
        Create a context from explicit facts.

        Facts whose value is None are treated as absent.
        """
        present = {k: str(v) for k, v in facts.items() if v is not None}
        return cls(facts=present, features=frozenset(features))

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildContext":
        """
        Create a context from a Cargo build-script environment.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            BuildContext with every recognized variable captured
        """
        if environ is None:
            environ = os.environ

        facts: Dict[str, str] = {}
        for variable, key in ENVIRON_KEYS.items():
            if variable in environ:
                facts[key] = environ[variable]

        features = set()
        for variable in environ:
            if variable.startswith(FEATURE_PREFIX):
                features.add(normalize_feature_name(variable[len(FEATURE_PREFIX):]))

        logger.debug(
            f"Captured {len(facts)} fact(s) and {len(features)} feature(s) from environment"
        )
        return cls(facts=facts, features=frozenset(features))

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return a fact value, or default when absent."""
        return self.facts.get(key, default)

    def require(self, key: str, hint: Optional[str] = None) -> str:
        """
        Return a fact value that must be present.

        Raises:
            MissingContextFactError: If the fact is absent
        """
        if key not in self.facts:
            raise MissingContextFactError(key, hint)
        return self.facts[key]

    def has_feature(self, name: str) -> bool:
        """Check whether a feature toggle is enabled."""
        return normalize_feature_name(name) in self.features

    def with_facts(self, **facts: Optional[str]) -> "BuildContext":
        """Return a copy with facts added, replaced, or (value None) removed."""
        merged = dict(self.facts)
        for key, value in facts.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = value
        return BuildContext(facts=merged, features=self.features)

    def with_features(self, *enabled: str, disabled: Iterable[str] = ()) -> "BuildContext":
        """Return a copy with the given features enabled and/or disabled."""
        removed = {normalize_feature_name(f) for f in disabled}
        features = (set(self.features) | {normalize_feature_name(f) for f in enabled}) - removed
        return BuildContext(facts=self.facts, features=frozenset(features))
