"""Error types raised by boxfit components."""


class BoxFitError(ValueError):
    """Base class for input-validation failures in boxfit."""


class InvalidBoundsError(BoxFitError):
    """A prior bound pair is empty or inverted, or sigma_min is not positive."""


class EmptyObservationError(BoxFitError):
    """A point set with zero points was passed where observations are required."""


class NonPositiveExtentError(BoxFitError):
    """A box with a zero or negative length, width or height was mapped to points."""
