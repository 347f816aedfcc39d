import asyncio
import functools

from .scheduler_base import SchedulerBase


class EventLoopScheduler(SchedulerBase):
    """Schedules callbacks on an asyncio event loop.

    If no loop is given, the loop running in the calling thread is used
    at the time of each call.
    """

    def __init__(self, loop=None):
        self._loop = loop

    @property
    def loop(self):
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def __call__(self, fn, *args):
        self.loop.call_soon(self._run, fn, *args)

    def call_later(self, delay, fn, *args):
        return self.loop.call_later(delay, self._run, fn, *args)

    def now(self):
        return self.loop.time()

    def threadsafe(self):
        # Loop has to be captured in the calling thread
        loop = self.loop
        return functools.partial(loop.call_soon_threadsafe, self._run)

    def __repr__(self):
        return '{}<{!r}>'.format(self.__class__.__name__, self._loop)
