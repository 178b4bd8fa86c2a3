"""Exceptions raised by the log handle registry.

I/O failures are not wrapped: opening a stream raises the underlying
OSError, and a failed reopen is handed to the coordinator's abort callback.
"""


class LogHandleError(Exception):
    """Base class for registry errors."""


class ReservedNameError(LogHandleError, ValueError):
    """A caller tried to register a stream under the bootstrap sentinel name."""

    def __init__(self, name: str):
        super().__init__(f"stream name {name!r} is reserved")
        self.name = name


class NotConfiguredError(LogHandleError, RuntimeError):
    """The operation needs a registry that has a base path and a rotation trigger."""
