"""
Error hierarchy for the CFD domain generator.

Every error raised by the core is fatal for the run: nothing here is
retried or replaced by a default. The pipeline logs the error and
reports a failed run.
"""


class DomainError(Exception):
    """Base error for domain computations."""


class ConfigurationError(DomainError):
    """Unrecognized domain shape, malformed region specification or bad config value."""


class ResolutionError(DomainError):
    """Influence region could not be resolved automatically."""


class GeometryDegenerate(DomainError):
    """Input geometry is empty or collapses to zero length/area."""


class ReconstructionError(DomainError):
    """Raised by single-building reconstruction collaborators."""
