"""
Planner backends for nativeplan.

Two adapters implement the PlanBackend interface: CCBackend for direct
compilation and CMakeBackend for CMake orchestration. Both carry the same
decision table; they differ only in how decisions are realized.
"""

from typing import Dict, List, Type

from nativeplan.backends.base import PlanBackend
from nativeplan.backends.cc import CCBackend, compiler_args
from nativeplan.backends.cmake import CMakeBackend, configure_args, build_args
from nativeplan.core.features import BackendKind
from nativeplan.planning.plan import BuildPlan, LinkKind
from nativeplan.toolchain.capabilities import FlagCapabilities

BACKENDS: Dict[BackendKind, Type[PlanBackend]] = {
    BackendKind.CC: CCBackend,
    BackendKind.CMAKE: CMakeBackend,
}


def create_backend(
    kind: BackendKind, plan: BuildPlan, capabilities: FlagCapabilities
) -> PlanBackend:
    """Instantiate the backend adapter for kind."""
    return BACKENDS[kind](plan, capabilities)


def render_cargo_directives(plan: BuildPlan) -> List[str]:
    """
    Render a plan as Cargo build-script directives.

    Returns:
        Lines in the order Cargo should receive them: provenance,
        search paths, then libraries
    """
    lines = [f"cargo:rustc-env={key}={value}" for key, value in plan.provenance.items()]
    lines.extend(f"cargo:rustc-link-search=native={path}" for path in plan.search_paths)
    for directive in plan.link_libraries:
        if directive.kind is LinkKind.STATIC:
            lines.append(f"cargo:rustc-link-lib=static={directive.name}")
        else:
            lines.append(f"cargo:rustc-link-lib=dylib={directive.name}")
    return lines


__all__ = [
    "PlanBackend",
    "CCBackend",
    "CMakeBackend",
    "BACKENDS",
    "create_backend",
    "compiler_args",
    "configure_args",
    "build_args",
    "render_cargo_directives",
]
