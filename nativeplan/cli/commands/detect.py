"""
Detect command implementation.

Shows the target environment, compiler classification and toggles that a
plan for the selected context would be built from.
"""

import logging

from nativeplan.cli.utils import load_context
from nativeplan.planning.planner import resolve_inputs

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the detect command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    inputs = resolve_inputs(load_context(args))
    target, options = inputs.target, inputs.options

    print(f"Target:    {target.triple}")
    print(f"  OS:      {target.os.value} ({target.os_name})")
    print(f"  Env:     {target.env.value}")
    print(f"  Family:  {target.family.value}")
    if target.msystem_name:
        print(f"  MSYSTEM: {target.msystem_name}")
    print(f"Compiler:  {inputs.compiler.kind.value}")
    print(f"Profile:   {options.profile.value}")
    print(f"C++:       {options.cxx_standard.value}")
    print(f"Backend:   {options.backend.value}")
    print(f"Library:   {options.target_lib}")

    enabled = sorted(inputs.features.enabled())
    print(f"Features:  {', '.join(enabled) if enabled else '(none)'}")
    return 0
