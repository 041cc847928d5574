"""Form session exceptions."""


class FormSessionError(Exception):
    """Base class for form session failures."""


class ModelConstructionError(FormSessionError):
    """Raised when a session has neither a model nor a factory to build one."""


class NoEditContextError(FormSessionError):
    """Raised when an operation needs an edit context and the session has none."""
