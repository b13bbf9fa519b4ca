"""
Error taxonomy for the recognition core.
"""


class InvalidObservation(ValueError):
    """A hand observation with a malformed or incomplete keypoint set."""


class BackendUnavailable(RuntimeError):
    """The pose-estimation backend failed to initialize."""


class TransientEstimationError(RuntimeError):
    """A single frame's estimation call failed."""
