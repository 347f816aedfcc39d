import logging

from .config import Default

logger = logging.getLogger(__name__)


def supports_promise(promise_cls):
    """Returns True if promise_cls can be constructed from an executor
    and its instances have a callable then()."""
    if promise_cls is None:
        return False
    try:
        trial = promise_cls(lambda resolve, reject: None)
    except Exception:
        return False
    return callable(getattr(trial, 'then', None))


class Family(object):
    """Holds the underlying promise class and scheduler of one PromiseX class.

    Every class produced by create_family() owns exactly one Family, so
    rebinding never leaks into other families.
    """

    def __init__(self, promise_cls=None, scheduler=None):
        self._scheduler = scheduler
        self.bind(promise_cls)

    @property
    def promise_cls(self):
        return self._promise_cls

    @property
    def valid(self):
        return self._valid

    def bind(self, promise_cls):
        """Rebinds the underlying promise class for instances created from now on."""
        self._promise_cls = promise_cls
        self._valid = supports_promise(promise_cls)
        logger.debug('Family bound to %r (valid=%s)', promise_cls, self._valid)

    @property
    def scheduler(self):
        if self._scheduler is not None:
            return self._scheduler
        scheduler = getattr(self._promise_cls, 'scheduler', None)
        if scheduler is not None:
            return scheduler
        return Default.get_scheduler()

    @scheduler.setter
    def scheduler(self, scheduler):
        self._scheduler = scheduler
        logger.debug('Family scheduler set to %r', scheduler)

    def check(self):
        if not self._valid:
            raise TypeError('Base promise needed but is undefined. '
                            'Use config("setPromise", promise_cls) or "createPromise".')

    def __repr__(self):
        return 'Family<{!r}, scheduler={!r}>'.format(self._promise_cls, self._scheduler)
