"""
Core functionality for nativeplan.

This package contains the build context, target detection, feature toggles
and the exception hierarchy that every planner stage depends on.
"""

from .context import (
    BuildContext,
    normalize_feature_name,
)

from .target import (
    TargetEnvironment,
    OperatingSystem,
    TargetEnv,
    TargetFamily,
    Msystem,
)

from .features import (
    FeatureSet,
    BuildOptions,
    BuildProfile,
    CxxStandard,
    BackendKind,
)

from .exceptions import (
    NativePlanError,
    ContextError,
    MissingContextFactError,
    InvalidContextFactError,
    PlanningError,
    UnsupportedArchitectureError,
    LinkKindConflictError,
    ConfigError,
)

__all__ = [
    "BuildContext",
    "normalize_feature_name",
    "TargetEnvironment",
    "OperatingSystem",
    "TargetEnv",
    "TargetFamily",
    "Msystem",
    "FeatureSet",
    "BuildOptions",
    "BuildProfile",
    "CxxStandard",
    "BackendKind",
    "NativePlanError",
    "ContextError",
    "MissingContextFactError",
    "InvalidContextFactError",
    "PlanningError",
    "UnsupportedArchitectureError",
    "LinkKindConflictError",
    "ConfigError",
]
