import abc

from ..config import Default


class SchedulerBase(metaclass=abc.ABCMeta):
    """Provides the next-tick and timer primitives promises are built on."""

    @abc.abstractmethod
    def __call__(self, fn, *args):
        """Queue fn to be called with args on the next tick.
        This method is intended to allow using schedulers as
        callback executors for promises"""

    @abc.abstractmethod
    def call_later(self, delay, fn, *args):
        """Schedule fn to be called after delay seconds.
        Returns a handle whose cancel() discards the call"""

    @abc.abstractmethod
    def now(self):
        """Current time of the scheduler clock in seconds"""

    def threadsafe(self):
        """Returns a callable with the same contract as __call__
        which may be invoked from any thread"""
        return self

    @staticmethod
    def _run(fn, *args):
        try:
            fn(*args)
        except Exception as ex:
            Default.on_unhandled_error(ex)
