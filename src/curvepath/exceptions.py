"""Exceptions raised while building, evaluating and flattening curves."""


class CurveError(Exception):
    """Base class of all curvepath errors."""


class InvalidArgument(CurveError, ValueError):
    """A constructor or setter received a malformed value."""


class InvalidCurveState(CurveError):
    """A curve cannot be appended in its current state.

    Raised by ``append_to`` when the control path, the index sequencer or the
    variant specific vectors do not fit together. Sliding-window curves may have
    emitted earlier windows before the problem was detected.
    """


class DegenerateEvaluation(CurveError, ArithmeticError):
    """Flattening produced a NaN or infinite distance, or could not subdivide further."""
