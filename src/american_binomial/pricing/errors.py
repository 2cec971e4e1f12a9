class InvalidInput(ValueError):
    """A caller-supplied parameter violates a precondition."""


class EmptySample(InvalidInput):
    """The price sample holds no usable (strictly positive) observation."""


class NotInitialized(RuntimeError):
    """The pricer lattices are missing or too short for the requested query."""
