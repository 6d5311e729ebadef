"""Domain validation errors for the tracking context."""


class ValidationError(ValueError):
    """Raised when an entity cannot be written as supplied."""

    pass


class MissingGeometryError(ValidationError):
    """Raised when a place has neither a circle nor a polygon."""

    pass
