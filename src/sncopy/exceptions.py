"""Exceptions for sncopy."""


class SnCopyError(Exception):
    """Base class for errors raised by sncopy itself.

    Filesystem failures are not wrapped: they surface as the original
    :class:`OSError` subclasses.
    """


class QueueClosedError(SnCopyError, RuntimeError):
    """Raised when an item is pushed to a :class:`~sncopy.workqueue.WorkQueue`
    that has already been closed."""


class ConfigError(SnCopyError):
    """Raised when a configuration cannot be found, parsed, or is incomplete."""


class NoSourceVersionError(SnCopyError):
    """Raised when the source repository holds no (visible) version.

    The CLI treats this as an informational exit, not a failure.
    """
