from .config import Default


# States for Promise.
_PENDING = 'PENDING'
_FULFILLED = 'FULFILLED'
_REJECTED = 'REJECTED'


class Promise(object):
    """Promises/A+ style future used as the default underlying primitive.

    The executor is called synchronously with resolve and reject functions.
    Settlement callbacks are never run synchronously: they are always queued
    on the scheduler, in the order they were registered.
    """

    # Scheduler for settlement callbacks (config.Default.get_scheduler() if None)
    scheduler = None

    _state = _PENDING
    _value = None
    _handled = False

    def __init__(self, executor):
        assert callable(executor), "Promise expects callable executor"
        self._callbacks = []
        resolve, reject = self._resolvers()
        try:
            executor(resolve, reject)
        except Exception as ex:
            reject(ex)

    @classmethod
    def with_scheduler(cls, scheduler):
        """Returns subclass of this promise type bound to the given scheduler."""
        return type(cls.__name__, (cls,), {'scheduler': scheduler})

    @classmethod
    def resolve(cls, value=None):
        """Returns promise resolved with value, or value itself if it is
        already a promise of this type."""
        if isinstance(value, cls):
            return value
        return cls(lambda resolve, _: resolve(value))

    @classmethod
    def reject(cls, reason=None):
        """Returns promise rejected with reason."""
        return cls(lambda _, reject: reject(reason))

    def then(self, on_resolve=None, on_reject=None):
        """Returns new promise settled from the result of the handler matching
        the way this promise settles.

        Handlers that are not callable pass the settlement through unchanged.
        Exceptions raised by a handler reject the new promise.
        """
        def executor(resolve, reject):
            def on_done(_):
                if self._state == _FULFILLED:
                    handler, settle = on_resolve, resolve
                else:
                    handler, settle = on_reject, reject
                if not callable(handler):
                    settle(self._value)
                    return
                try:
                    result = handler(self._value)
                except Exception as ex:
                    reject(ex)
                else:
                    resolve(result)

            self._add_done_callback(on_done)

        return type(self)(executor)

    def catch(self, on_reject):
        return self.then(None, on_reject)

    def done(self):
        """Return True if the promise is settled."""
        return self._state != _PENDING

    def _resolvers(self):
        called = False

        def resolve(value=None):
            nonlocal called
            if called:
                return
            called = True
            self._resolve(value)

        def reject(reason=None):
            nonlocal called
            if called:
                return
            called = True
            self._try_set_state(_REJECTED, reason)

        return resolve, reject

    def _resolve(self, value):
        if value is self:
            self._try_set_state(_REJECTED, TypeError('Attempt to resolve promise with self'))
            return

        then = None
        if not isinstance(value, type):
            try:
                then = getattr(value, 'then', None)
            except Exception as ex:
                self._try_set_state(_REJECTED, ex)
                return

        if callable(then):
            resolve, reject = self._resolvers()
            try:
                then(resolve, reject)
            except Exception as ex:
                reject(ex)
        else:
            self._try_set_state(_FULFILLED, value)

    def _try_set_state(self, state, value):
        if self._state != _PENDING:
            return False
        self._state = state
        self._value = value
        self._on_result_set()
        return True

    def _on_result_set(self):
        if self._state == _REJECTED and not self._handled:
            self._get_scheduler()(self._check_handled)

        callbacks = self._callbacks[:]
        if not callbacks:
            return

        self._callbacks[:] = []
        for clb in callbacks:
            self._run_callback(clb)

    def _check_handled(self):
        if not self._handled:
            Default.on_unhandled_rejection(self._value)

    def _add_done_callback(self, fn):
        self._handled = True
        if self._state != _PENDING:
            self._run_callback(fn)
        else:
            self._callbacks.append(fn)

    def _run_callback(self, clb):
        self._get_scheduler()(clb, self)

    def _get_scheduler(self):
        if self.scheduler is not None:
            return self.scheduler
        return Default.get_scheduler()

    def __repr__(self):
        res = self.__class__.__name__
        if self._state == _FULFILLED:
            res += '<result={!r}>'.format(self._value)
        elif self._state == _REJECTED:
            res += '<reason={!r}>'.format(self._value)
        else:
            res += '<{}, {} callbacks>'.format(self._state, len(self._callbacks))
        return res
