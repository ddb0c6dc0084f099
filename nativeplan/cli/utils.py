"""
Shared utilities for CLI commands.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from nativeplan.config.parser import parse_context_file
from nativeplan.core.context import BuildContext

logger = logging.getLogger(__name__)


def load_context(args) -> BuildContext:
    """
    Load the build context selected by the command-line arguments.

    A --context file wins; otherwise the Cargo build-script environment is used.

    Raises:
        ConfigError: If the context file cannot be parsed
    """
    context_file: Optional[Path] = getattr(args, "context", None)
    if context_file:
        logger.debug(f"Using build context file {context_file}")
        return parse_context_file(context_file)
    logger.debug("Using build context from environment")
    return BuildContext.from_environ()


def write_output(text: str, output: Optional[Path] = None) -> None:
    """Write text to output, or to stdout when no path is given."""
    if not text.endswith("\n"):
        text += "\n"
    if output is None:
        sys.stdout.write(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {output}")
