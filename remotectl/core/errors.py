"""Domain-specific errors for remotectl."""


class RemotectlError(Exception):
    """Base error for remotectl."""


class CommandTableLoadError(RemotectlError):
    """Raised when a command table file cannot be read."""


class CommandTableValidationError(RemotectlError):
    """Raised when a command table does not conform to schema or semantics."""


class DispatchError(RemotectlError):
    """Raised when no transport is registered for the requested mode."""


class TransportError(RemotectlError):
    """Base transport error."""


class EmitterError(TransportError):
    """Raised when the infrared emitter driver reports a failure."""
