"""
Planning for nativeplan: the build plan model and the flag and link
decision tables. The entry point is nativeplan.planning.planner.plan_build.
"""

from nativeplan.planning.plan import (
    BuildPlan,
    LinkDirective,
    LinkKind,
    RejectedFlag,
    ToolchainSettings,
)

__all__ = [
    "BuildPlan",
    "LinkDirective",
    "LinkKind",
    "RejectedFlag",
    "ToolchainSettings",
]
