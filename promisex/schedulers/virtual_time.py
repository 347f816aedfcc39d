import collections
import heapq
import itertools
import logging

from .scheduler_base import SchedulerBase

logger = logging.getLogger(__name__)


class TimerHandle(object):
    __slots__ = ('when', 'seq', 'fn', 'args', 'cancelled')

    def __init__(self, when, seq, fn, args):
        self.when = when
        self.seq = seq
        self.fn = fn
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def __lt__(self, other):
        return (self.when, self.seq) < (other.when, other.seq)

    def __repr__(self):
        state = ' cancelled' if self.cancelled else ''
        return 'TimerHandle<when={}{}>'.format(self.when, state)


class VirtualTimeScheduler(SchedulerBase):
    """Deterministic single-threaded scheduler driven by a virtual clock.

    Nothing runs until the owner calls run(), flush() or advance_by().
    Timers never wait for real time: the clock jumps straight to the
    next due timer.
    """

    def __init__(self, start=0.0):
        self._now = start
        self._ready = collections.deque()
        self._timers = []
        self._seq = itertools.count()

    def __call__(self, fn, *args):
        self._ready.append((fn, args))

    def call_later(self, delay, fn, *args):
        handle = TimerHandle(self._now + max(delay, 0), next(self._seq), fn, args)
        heapq.heappush(self._timers, handle)
        return handle

    def now(self):
        return self._now

    @property
    def pending(self):
        """Number of queued callbacks and live timers."""
        return len(self._ready) + sum(1 for t in self._timers if not t.cancelled)

    def flush(self):
        """Runs queued callbacks, including the ones they queue, without
        advancing the clock.

        Returns the number of callbacks executed.
        """
        count = 0
        while self._ready:
            fn, args = self._ready.popleft()
            self._run(fn, *args)
            count += 1
        return count

    def advance_by(self, delay):
        """Moves the clock forward by delay seconds firing all timers
        that become due on the way."""
        self.advance_to(self._now + delay)

    def advance_to(self, when):
        self.flush()
        while self._timers and self._timers[0].when <= when:
            self._fire(heapq.heappop(self._timers))
        self._now = max(self._now, when)

    def run(self):
        """Runs until neither callbacks nor timers are left."""
        self.flush()
        while self._timers:
            self._fire(heapq.heappop(self._timers))

    def _fire(self, handle):
        if handle.cancelled:
            return
        self._now = max(self._now, handle.when)
        logger.debug('Firing %r', handle)
        self._run(handle.fn, *handle.args)
        self.flush()

    def __repr__(self):
        return '{}<now={}, pending={}>'.format(
            self.__class__.__name__, self._now, self.pending)
