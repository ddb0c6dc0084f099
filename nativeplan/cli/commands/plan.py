"""
Plan command implementation.

Produces the build plan for a context and prints it in the requested format.
"""

import json
import logging

import yaml

from nativeplan.backends import compiler_args, configure_args, render_cargo_directives
from nativeplan.cli.utils import load_context, write_output
from nativeplan.core.features import BackendKind
from nativeplan.planning.planner import plan_with_inputs, resolve_inputs

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the plan command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = load_context(args)
    inputs = resolve_inputs(ctx)
    backend = BackendKind(args.backend) if args.backend else inputs.options.backend

    plan = plan_with_inputs(ctx, inputs, backend)

    if args.format == "json":
        text = json.dumps(plan.to_dict(), indent=2)
    elif args.format == "yaml":
        text = yaml.safe_dump(plan.to_dict(), sort_keys=False, default_flow_style=False)
    elif args.format == "cargo":
        text = "\n".join(render_cargo_directives(plan))
    elif backend is BackendKind.CMAKE:
        text = "\n".join(configure_args(plan))
    else:
        text = "\n".join(compiler_args(plan, msvc=inputs.target.is_msvc))

    write_output(text, args.output)
    return 0
