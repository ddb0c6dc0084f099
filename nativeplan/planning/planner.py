"""
Planning entry point.

plan_build() resolves the immutable inputs once from a build context and
runs the planner stages in their fixed order:

    backend preamble -> MSYS2 toolchain override -> flag planner
    (Android last) -> link planner -> provenance

Usage:
    from nativeplan.core.context import BuildContext
    from nativeplan.planning.planner import plan_build

    plan = plan_build(BuildContext.from_environ())
    for line in render_cargo_directives(plan):
        print(line)
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from nativeplan.backends import create_backend
from nativeplan.core.context import BuildContext
from nativeplan.core.features import BackendKind, BuildOptions, FeatureSet
from nativeplan.core.target import TargetEnvironment
from nativeplan.planning.flags import FlagPlanner
from nativeplan.planning.linking import LinkPlanner
from nativeplan.planning.plan import BuildPlan
from nativeplan.toolchain.capabilities import FlagCapabilities
from nativeplan.toolchain.compiler import CompilerProfile, detect_compiler_from_context
from nativeplan.toolchain.msys2 import ToolchainOverride

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanInputs:
    """The immutable inputs of one planning run."""

    target: TargetEnvironment
    compiler: CompilerProfile
    features: FeatureSet
    options: BuildOptions


def resolve_inputs(ctx: BuildContext) -> PlanInputs:
    """
    Detect target, compiler, features and options from a context.

    Raises:
        MissingContextFactError: If a required target fact is absent
        InvalidContextFactError: If an explicit option has an unknown value
    """
    target = TargetEnvironment.from_context(ctx)
    return PlanInputs(
        target=target,
        compiler=detect_compiler_from_context(ctx, target),
        features=FeatureSet.from_context(ctx),
        options=BuildOptions.from_context(ctx),
    )


def build_provenance(inputs: PlanInputs) -> Dict[str, str]:
    """Build information exported to the compiled output for runtime introspection."""
    target, options = inputs.target, inputs.options
    provenance = {
        "BUILD_TARGET_OS": target.os_name,
        "BUILD_TARGET_ENV": target.env_name,
        "BUILD_TARGET_FAMILY": target.family_name,
        "BUILD_TARGET": target.triple,
        "BUILD_CC": inputs.compiler.kind.display_name,
        "BUILD_TYPE": options.profile.build_type,
        "BUILD_DEBUG": "true" if options.is_debug else "false",
        "BUILD_OPTIM_LEVEL": options.profile.optim_level,
        "BUILD_CXX_STANDARD": options.cxx_standard.value,
    }
    if target.msystem_name:
        provenance["BUILD_MSYSTEM"] = target.msystem_name
    return provenance


def plan_with_inputs(
    ctx: BuildContext, inputs: PlanInputs, backend_kind: Optional[BackendKind] = None
) -> BuildPlan:
    """
    Run all planner stages for already-resolved inputs.

    Args:
        ctx: Build context (Android NDK facts are read from it)
        inputs: Resolved inputs
        backend_kind: Backend override; defaults to inputs.options.backend

    Returns:
        The finished plan
    """
    options = inputs.options
    kind = backend_kind or options.backend

    plan = BuildPlan(
        target_lib=options.target_lib,
        profile=options.profile,
        out_dir=options.out_dir,
    )
    capabilities = FlagCapabilities(inputs.compiler, inputs.target)
    backend = create_backend(kind, plan, capabilities)

    flag_planner = FlagPlanner(ctx, inputs.target, inputs.compiler, inputs.features, options)
    logger.debug(f"Planning with {kind.value} backend: {', '.join(flag_planner.describe())}")

    backend.preamble(options)
    ToolchainOverride(inputs.target).apply(plan)
    flag_planner.apply(backend)
    LinkPlanner(inputs.target, inputs.features, options).apply(plan, backend)
    plan.provenance.update(build_provenance(inputs))

    logger.info(
        f"Planned {plan.target_lib} for {inputs.target.triple}: "
        f"{len(plan.cxx_flags)} flag(s), {len(plan.defines)} define(s), "
        f"{len(plan.link_libraries)} link directive(s)"
    )
    return plan


def plan_build(ctx: BuildContext, backend_kind: Optional[BackendKind] = None) -> BuildPlan:
    """
    Produce the build plan for a context.

    Raises:
        MissingContextFactError: Missing target fact, or Android without an NDK
        UnsupportedArchitectureError: Android triple without an ABI
    """
    return plan_with_inputs(ctx, resolve_inputs(ctx), backend_kind)
