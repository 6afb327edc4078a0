"""Exception types for shape completion."""


class ShapeCompletionError(Exception):
    """Base class for all shape completion errors."""


class PreconditionViolation(ShapeCompletionError):
    """
    A caller broke a documented contract.

    Raised for malformed spline segments, mismatched point-set sizes,
    incomplete assignments and out-of-range grid access. The core never
    catches it.
    """


class HoleFillError(ShapeCompletionError):
    """A hole fill finished with a failure result that the caller unwrapped."""
