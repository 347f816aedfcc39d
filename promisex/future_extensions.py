import collections.abc
import functools
import logging

from .cancellation import Cancelled, is_cancelled
from .exceptions import PromiseError, TimeoutError
from .family import supports_promise
from .future_core import FutureCore, dualmethod, _bind

logger = logging.getLogger(__name__)

_CONFIG_ALIASES = {
    'getPromise': 'get_promise',
    'setPromise': 'set_promise',
    'createPromise': 'create_promise',
    'getScheduler': 'get_scheduler',
    'setScheduler': 'set_scheduler',
}


def _is_sequence(values):
    return (isinstance(values, collections.abc.Iterable)
            and not isinstance(values, (str, bytes)))


def _as_list(values):
    if _is_sequence(values):
        return list(values)
    return [values]


def _check_sequence(promises):
    if promises is None:
        raise TypeError('First argument needs to be a sequence of promises or values.')


def _then_wait(promise, fn):
    return lambda _: promise.then(fn)


def _reduce_step(fn, value, index, length, values):
    def step(accumulator):
        if is_cancelled(accumulator):
            return accumulator
        reduced = fn(accumulator, value, index, length, values)
        return reduced._promise if isinstance(reduced, FutureCore) else reduced
    return step


class FutureExtensions(object):
    """Mixin class for PromiseX factories and combination functions."""

    @classmethod
    def resolve(cls, value=None):
        """Returns promise resolved with value, or value itself if it is
        already a promise of this family."""
        if isinstance(value, cls):
            return value
        return cls(lambda resolve, _: resolve(value))

    @classmethod
    def reject(cls, reason=None):
        """Returns promise rejected with reason."""
        return cls(lambda _, reject: reject(reason))

    @classmethod
    def defer(cls):
        """Returns deferred promise with resolve() and reject() members."""
        return cls()

    @classmethod
    def cast(cls, value=None):
        """Returns promise of this family for value.

        Promises of this family are returned unchanged, underlying promises
        are wrapped and anything else becomes a resolved promise.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, cls._family.promise_cls):
            return cls(value)
        return cls.resolve(value)

    @classmethod
    def cancel(cls, reason=None):
        """Returns promise resolved with a cancellation marker carrying reason."""
        return cls(Cancelled(reason))

    @classmethod
    def _delayed(cls, ms, value=None):
        scheduler = cls._family.scheduler
        return cls(lambda resolve, _: scheduler.call_later(ms / 1000.0, resolve, value))

    @dualmethod
    def timeout(self, ms, reason=None):
        """Returns new promise failing with TimeoutError if this one does not
        settle within ms milliseconds."""
        return type(self).timeout(self, ms, reason)

    @timeout.classmethod
    def timeout(cls, promise, ms, reason=None):
        """Returns promise settled like promise, or rejected with TimeoutError
        if that does not happen within ms milliseconds.

        The late settlement of the loser is ignored.
        """
        scheduler = cls._family.scheduler
        source = cls._cast_promise(promise)
        message = reason or 'Timeout'

        def executor(resolve, reject):
            handle = scheduler.call_later(ms / 1000.0, lambda: reject(TimeoutError(message)))

            def on_resolve(value):
                handle.cancel()
                resolve(value)

            def on_reject(reason_):
                handle.cancel()
                reject(reason_)

            source.then(on_resolve, on_reject)

        return cls(executor)

    @classmethod
    def from_future(cls, future):
        """Returns promise settled from a concurrent.futures.Future
        (or any future with the same interface).

        The future may complete on any thread, settlement is handed over to
        the scheduler of this family. A cancelled future cancels the chain.
        """
        deliver = cls._family.scheduler.threadsafe()

        def executor(resolve, reject):
            def settle(f):
                if f.cancelled():
                    resolve(Cancelled('Future was cancelled'))
                elif f.exception() is not None:
                    reject(f.exception())
                else:
                    resolve(f.result())

            future.add_done_callback(lambda f: deliver(settle, f))

        return cls(executor)

    @classmethod
    def all(cls, promises):
        """Returns promise resolved with the list of all values in input order.

        Items are waited for one after another. The first rejection rejects
        the result, a cancelled item resolves it with the cancellation marker
        without waiting for the remaining items.
        """
        _check_sequence(promises)
        items = [cls._cast_promise(p) for p in _as_list(promises)]

        def executor(resolve, reject):
            results = []

            def add_result(value):
                if is_cancelled(value):
                    resolve(value)
                else:
                    results.append(value)

            sequence = cls._cast_promise(None)
            for item in items:
                sequence = sequence.then(_then_wait(item.then(None, reject), add_result))
            sequence.then(lambda _: resolve(results))

        return cls(executor)

    @classmethod
    def race(cls, promises):
        """Returns promise settled like the first item to settle.

        An empty sequence resolves with None, a single value that is not a
        sequence is treated as the only item.
        """
        _check_sequence(promises)
        items = [cls._cast_promise(p) for p in _as_list(promises)]

        def executor(resolve, reject):
            if not items:
                resolve(None)
                return
            for item in items:
                item.then(resolve, reject)

        return cls(executor)

    @classmethod
    def every(cls, promises):
        """Returns promise resolved once every item settled, with the list of
        item promises (inspect their status and value). Never rejects.

        A cancelled item resolves the result with its cancellation marker.
        """
        _check_sequence(promises)
        items = [cls.cast(p) for p in _as_list(promises)]

        def executor(resolve, _):
            results = [None] * len(items)
            left = len(items)

            if not left:
                resolve(results)
                return

            def on_settled(index, item, _):
                nonlocal left
                if item.is_cancelled:
                    resolve(item.value)
                    return
                results[index] = item
                left -= 1
                if not left:
                    resolve(results)

            for index, item in enumerate(items):
                settled = functools.partial(on_settled, index, item)
                item._promise.then(settled, settled)

        return cls(executor)

    @classmethod
    def any(cls, promises):
        """Returns promise resolved with the first value to resolve.

        Rejects with PromiseError only if all items reject. An empty sequence
        resolves with None.
        """
        _check_sequence(promises)

        if not _is_sequence(promises):
            return cls(cls._cast_promise(promises))

        items = [cls._cast_promise(p) for p in promises]

        def executor(resolve, reject):
            left = len(items)

            if not left:
                resolve(None)
                return

            def on_reject(_):
                nonlocal left
                left -= 1
                if not left:
                    reject(PromiseError('No promises resolved successfully.'))

            for item in items:
                item.then(resolve, on_reject)

        return cls(executor)

    @classmethod
    def map(cls, values, fn, context=None):
        """Returns list of promises, one per value, cast from
        fn(value, index, length, values).

        Exceptions raised by fn become rejected promises.
        """
        if not callable(fn):
            raise TypeError('Map-function is no valid function')

        values = _as_list(values)
        length = len(values)
        fn = _bind(fn, context)

        promises = []
        for index, value in enumerate(values):
            try:
                promises.append(cls.cast(fn(value, index, length, values)))
            except Exception as ex:
                promises.append(cls.reject(ex))
        return promises

    @classmethod
    def reduce(cls, values, fn, initial=None, context=None):
        """Returns promise resolved with the values reduced by
        fn(accumulator, value, index, length, values).

        Each step waits for the accumulator of the previous one, initial may
        be a promise. A cancelled accumulator skips all remaining steps.
        """
        if not callable(fn):
            raise TypeError('Reduce-function is no valid function')
        _check_sequence(values)

        items = _as_list(values)
        length = len(items)
        fn = _bind(fn, context)

        sequence = cls._cast_promise(initial)
        for index, value in enumerate(items):
            sequence = sequence.then(_reduce_step(fn, value, index, length, items))
        return cls(sequence)

    @classmethod
    def config(cls, option, value=None):
        """Reads or changes the configuration of this family.

        Options (camelCase names are accepted as well, e.g. getPromise):
            get_promise: returns underlying promise class.
            set_promise: rebinds underlying promise class for new instances.
            create_promise: returns new independent family bound to value.
            get_scheduler: returns scheduler used for timers and callbacks.
            set_scheduler: sets scheduler used for timers and callbacks.

        Returns:
            Requested option, True if an option was set, False for unknown
            options or missing value.
        """
        family = cls._family
        option = _CONFIG_ALIASES.get(option, option)
        if option == 'get_promise':
            return family.promise_cls
        if option == 'get_scheduler':
            return family.scheduler
        if value is None:
            return False

        if option == 'set_promise':
            if not supports_promise(value):
                raise TypeError('Invalid Promise: {!r}'.format(value))
            family.bind(value)
            return True
        if option == 'create_promise':
            if not supports_promise(value):
                raise TypeError('Invalid Promise: {!r}'.format(value))
            from .future import create_family

            return create_family(value, name=cls.__name__)
        if option == 'set_scheduler':
            family.scheduler = value
            return True

        logger.debug('Unknown config option %r', option)
        return False
