class PromiseError(Exception):
    """Base class for all promise-related exceptions."""

    def __init__(self, message=''):
        super().__init__(message)
        self.message = str(message)


class CancellationError(PromiseError):
    """The promise chain was cancelled."""

    def __init__(self, message='', reason=None):
        super().__init__(message)
        self.reason = reason


class TimeoutError(PromiseError):
    """The operation exceeded the given deadline."""
    pass


class RejectionError(PromiseError):
    """A promise was rejected with a reason that is not an exception."""

    def __init__(self, reason):
        super().__init__('Promise rejected with {!r}'.format(reason))
        self.reason = reason


def as_exception(reason):
    """Returns reason if it can be raised, otherwise wraps it."""
    if isinstance(reason, BaseException):
        return reason
    return RejectionError(reason)
