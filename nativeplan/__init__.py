"""
nativeplan - native build planning for the snmalloc Rust shim.

Translates a build context (target triple, compiler, profile and feature
toggles) into ordered compiler flags, defines and link directives.
"""

__version__ = "0.1.0"

from nativeplan.core.context import BuildContext
from nativeplan.core.exceptions import NativePlanError
from nativeplan.planning.plan import BuildPlan
from nativeplan.planning.planner import plan_build, resolve_inputs

__all__ = [
    "__version__",
    "BuildContext",
    "BuildPlan",
    "NativePlanError",
    "plan_build",
    "resolve_inputs",
]
