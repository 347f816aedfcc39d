from .cancellation import is_cancelled
from .exceptions import as_exception
from .future_core import FutureCore, dualmethod, _bind, _check_self_reference, _rejected


def _unwrap(derived, result):
    _check_self_reference(derived, result)
    return result._promise if isinstance(result, FutureCore) else result


def _raise(reason):
    raise as_exception(reason)


class FutureCallbacks(object):
    """Mixin class for operators deriving a new promise from an existing one.

    A cancellation marker travels through the resolve path: resolve handlers
    are skipped for it and it is passed on unchanged, until cancelled()
    handles it.
    """

    def then(self, on_resolve=None, on_reject=None, context=None):
        """Returns new promise set from the result of the handler matching
        how this promise settles.

        Args:
            on_resolve: called with the resolved value, skipped on cancellation.
            on_reject: called with the rejection reason.
            context: passed to handlers as first argument if given.
        """
        derived = None
        on_resolve = _bind(on_resolve, context)
        on_reject = _bind(on_reject, context)

        def then_resolve(value):
            if is_cancelled(value):
                return value
            return _unwrap(derived, on_resolve(value))

        def then_reject(reason):
            return _unwrap(derived, on_reject(reason))

        promise = self._promise.then(then_resolve if callable(on_resolve) else None,
                                     then_reject if callable(on_reject) else None)
        derived = self._new(promise)
        return derived

    def catch(self, on_reject=None, context=None):
        """Shorthand for then(None, on_reject, context)."""
        return self.then(None, on_reject, context)

    def finally_(self, callback, context=None):
        """Returns new promise which runs callback (without arguments) once
        this promise settles, skipped on cancellation.

        A callback result other than None replaces the value, and turns a
        rejection into resolution. If the callback returns a promise, it is
        waited for first. Exceptions from callback reject the new promise.
        """
        assert callable(callback), "PromiseX.finally_ expects callable"

        derived = None
        callback = _bind(callback, context)
        promise_cls = self._promise_cls

        def run_callback():
            result = callback()
            _check_self_reference(derived, result)
            return self._cast_promise(result)

        def on_resolve(value):
            if is_cancelled(value):
                return value
            return run_callback().then(lambda result: value if result is None else result)

        def on_reject(reason):
            def settle(result):
                if result is None:
                    return _rejected(promise_cls, reason)
                return result
            return run_callback().then(settle)

        derived = self._new(self._promise.then(on_resolve, on_reject))
        return derived

    def cancelled(self, on_cancelled=None, context=None):
        """Returns new promise handling cancellation of the chain.

        on_cancelled is only called for a cancellation marker, with its reason.
        Returning None keeps the chain cancelled, any other result continues
        the chain with it. Values and rejections pass through unchanged.
        """
        derived = None
        on_cancelled = _bind(on_cancelled, context)

        def then_resolve(value):
            if is_cancelled(value):
                result = on_cancelled(value.reason)
                if result is not None:
                    return _unwrap(derived, result)
            return value

        promise = self._promise.then(then_resolve if callable(on_cancelled) else None)
        derived = self._new(promise)
        return derived

    @dualmethod
    def delay(self, ms):
        """Returns new promise settling like this one, ms milliseconds later.
        Cancellation is passed on without waiting."""
        scheduler = self._family.scheduler
        promise_cls = self._promise_cls
        delay = ms / 1000.0

        def on_resolve(value):
            if is_cancelled(value):
                return value
            return promise_cls(lambda resolve, _: scheduler.call_later(delay, resolve, value))

        def on_reject(reason):
            return promise_cls(lambda _, reject: scheduler.call_later(delay, reject, reason))

        return self._new(self._promise.then(on_resolve, on_reject))

    @delay.classmethod
    def delay(cls, ms, value=None):
        """Returns promise resolved with value after ms milliseconds."""
        return cls._delayed(ms, value)

    def done(self, on_resolve=None, on_reject=None, context=None):
        """Terminates the chain.

        Optional handlers are attached like then(). A rejection left unhandled
        at the end is raised outside of the promise machinery on the next
        tick, where it reaches config.Default.UNHANDLED_FAILURE_CALLBACK.
        Returns None.
        """
        scheduler = self._family.scheduler

        def rethrow(reason):
            scheduler(_raise, reason)

        self.then(on_resolve, on_reject, context).catch(rethrow)

    def nodeify(self, callback, context=None):
        """Reports the outcome to callback(error, value) on the next tick.

        Called as callback(None, value) on resolution and callback(reason, None)
        on rejection. Not called at all for a cancelled chain.
        Returns this promise.
        """
        if not callable(callback):
            return self

        callback = _bind(callback, context)
        scheduler = self._family.scheduler

        def on_resolve(value):
            if not is_cancelled(value):
                scheduler(callback, None, value)

        def on_reject(reason):
            scheduler(callback, reason, None)

        self._promise.then(on_resolve, on_reject)
        return self
