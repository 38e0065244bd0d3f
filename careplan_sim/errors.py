"""Error types raised by the projection engine."""


class ConfigurationError(ValueError):
    """Invalid person parameters or projection options."""


class DataAlignmentError(ValueError):
    """Projections cannot be placed on a shared years-from-now index."""
