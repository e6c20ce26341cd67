"""Exceptions raised by the world engine."""


class SymbolosError(Exception):
    """Base class for engine errors."""
    pass


class SnapshotError(SymbolosError):
    """Raised when a frame or archive cannot be written, read or indexed."""
    pass


class PipelineNotFoundError(SymbolosError):
    """Raised when a pipeline id is not registered."""
    pass


class ContextKeyError(SymbolosError, KeyError):
    """Raised when a required context entry is missing."""
    pass
