"""
Centralized exception hierarchy for nativeplan.

Fatal planning conditions are raised as subclasses of NativePlanError;
the caller decides whether to abort or report.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class NativePlanError(Exception):
    """Base exception for all nativeplan errors."""

    pass


# ============================================================================
# Build Context Exceptions
# ============================================================================


class ContextError(NativePlanError):
    """Base exception for build context errors."""

    pass


class MissingContextFactError(ContextError):
    """Raised when a required build context fact is absent."""

    def __init__(self, fact: str, hint: Optional[str] = None):
        self.fact = fact
        self.hint = hint
        msg = f"Required build context fact not set: {fact}"
        if hint:
            msg += f" ({hint})"
        super().__init__(msg)


class InvalidContextFactError(ContextError):
    """Raised when a build context fact has a value that cannot be used."""

    def __init__(self, fact: str, value: str, expected: str):
        self.fact = fact
        self.value = value
        super().__init__(f"Invalid value for {fact}: {value!r} (expected {expected})")


# ============================================================================
# Planning Exceptions
# ============================================================================


class PlanningError(NativePlanError):
    """Base exception for errors raised while building a plan."""

    pass


class UnsupportedArchitectureError(PlanningError):
    """Raised when an Android triple names an architecture with no ABI."""

    def __init__(self, triple: str):
        self.triple = triple
        super().__init__(f"Unsupported Android architecture: {triple}")


class LinkKindConflictError(PlanningError):
    """Raised when a library would be linked both statically and dynamically."""

    def __init__(self, library: str, existing: str, requested: str):
        self.library = library
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Library {library!r} already linked as {existing}, "
            f"cannot also link as {requested}"
        )


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(NativePlanError):
    """Build context file parsing or validation error."""

    pass
