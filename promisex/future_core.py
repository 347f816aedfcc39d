import asyncio
import functools
import inspect
import types

from .cancellation import Cancelled, is_cancelled
from .exceptions import CancellationError, as_exception


# States for PromiseX.
PENDING = 'pending'
RESOLVED = 'resolved'
REJECTED = 'rejected'

# Marks an omitted executor, None is a legal value to resolve with
_UNSET = object()


class dualmethod(object):
    """Method with separate implementations for instance and class access.

    Works like property: decorate the instance implementation, then register
    the class implementation with ``@<name>.classmethod``.
    """

    def __init__(self, finstance, fclass=None):
        self.finstance = finstance
        self.fclass = fclass
        functools.update_wrapper(self, finstance)

    def classmethod(self, fclass):
        return type(self)(self.finstance, fclass)

    def __get__(self, obj, cls=None):
        if obj is None:
            return types.MethodType(self.fclass, cls)
        return types.MethodType(self.finstance, obj)


def _bind(fn, context):
    if context is None or not callable(fn):
        return fn
    return functools.partial(fn, context)


def _accepts_instance(executor):
    try:
        inspect.signature(executor).bind(None, None, None)
    except (TypeError, ValueError):
        return False
    return True


def _check_self_reference(instance, value):
    if instance is not None and value is instance:
        raise TypeError('Attempt to resolve promise with self')


def _rejected(promise_cls, reason):
    # Underlying classes are only required to take an executor and expose then()
    return promise_cls(lambda _, reject: reject(reason))


def _resolved(promise_cls, value):
    return promise_cls(lambda resolve, _: resolve(value))


def _is_thenable(value):
    if isinstance(value, FutureCore):
        return True
    if isinstance(value, type):
        return False
    return callable(getattr(value, 'then', None))


class FutureCore(object):
    """Wraps an underlying promise and tracks its settlement.

    ``status`` and ``value`` are updated as soon as settlement is initiated
    and never change afterwards. Instances are only constructed through a
    family class (``PromiseX`` or the result of ``create_family()``).

    The executor argument decides how the instance settles:

    * an instance of the same family is returned unchanged;
    * an underlying promise is mirrored;
    * no executor gives a deferred with ``resolve`` and ``reject`` members;
    * a callable is called with ``(resolve, reject)``, plus the instance
      itself when it accepts a third argument, with ``context`` prepended
      when given;
    * anything else resolves the instance with that value.
    """

    PENDING = PENDING
    RESOLVED = RESOLVED
    REJECTED = REJECTED

    # Bound to each class produced by create_family()
    _family = None

    status = PENDING
    value = None

    # Called with the reason by abort(), executors may set it
    cancel_hook = None

    def __new__(cls, executor=_UNSET, context=None):
        if cls._family is None:
            raise TypeError("Failed to construct '{}': use PromiseX or a class "
                            "returned by create_family()".format(cls.__name__))
        if isinstance(executor, cls):
            return executor
        return super().__new__(cls)

    def __init__(self, executor=_UNSET, context=None):
        if executor is self:
            return

        family = self._family
        family.check()
        promise_cls = family.promise_cls

        self.status = PENDING
        self.value = None
        self._locked = False
        self._resolver = None
        self._promise_cls = promise_cls

        if isinstance(executor, promise_cls):
            self._promise = executor.then(self._on_fulfilled, self._on_rejected)
            return

        if executor is _UNSET:
            executor = self._make_deferred
            context = None
        elif not callable(executor):
            value = executor
            executor = lambda resolve, _: resolve(value)
            context = None

        self._promise = promise_cls(functools.partial(self._start, executor, context))

    def _start(self, executor, context, raw_resolve, raw_reject):
        def resolve(value=None):
            if self.status != PENDING or self._locked:
                return
            _check_self_reference(self, value)
            if _is_thenable(value):
                # Settles once the adopted promise does
                self._locked = True
                adopted = self._cast_promise(value)
                raw_resolve(adopted.then(self._on_fulfilled, self._on_rejected))
                return
            self.status = RESOLVED
            self.value = value
            raw_resolve(value)

        def reject(reason=None):
            if self.status != PENDING or self._locked:
                return
            _check_self_reference(self, reason)
            self.status = REJECTED
            self.value = reason
            raw_reject(reason)

        self._resolver = resolve
        executor = _bind(executor, context)
        args = (resolve, reject, self) if _accepts_instance(executor) else (resolve, reject)
        try:
            executor(*args)
        except Exception as ex:
            if self.status == PENDING and not self._locked:
                self.status = REJECTED
                self.value = ex
                raw_reject(ex)

    def _make_deferred(self, resolve, reject):
        def deferred_resolve(value=None):
            resolve(value)
            return self

        def deferred_reject(reason=None):
            reject(reason)
            return self

        self.resolve = deferred_resolve
        self.reject = deferred_reject

    def _on_fulfilled(self, value):
        self.status = RESOLVED
        self.value = value
        return value

    def _on_rejected(self, reason):
        self.status = REJECTED
        self.value = reason
        return _rejected(self._promise_cls, reason)

    @classmethod
    def _cast_promise(cls, value=None):
        """Returns underlying promise of this family for any value."""
        if isinstance(value, FutureCore):
            value = value._promise
        promise_cls = cls._family.promise_cls
        if isinstance(value, promise_cls):
            return value
        return _resolved(promise_cls, value)

    def _new(self, promise):
        return type(self)(promise)

    @property
    def is_cancelled(self):
        """Returns True if the promise resolved with a cancellation marker."""
        return self.status == RESOLVED and is_cancelled(self.value)

    def abort(self, reason=None):
        """Cancels a pending promise created from an executor or as deferred.

        Calls ``cancel_hook`` with the reason if the executor installed one,
        then resolves the promise with a cancellation marker unless the hook
        settled it already.

        Returns:
            True if the promise ends up cancelled by this call.
        """
        if self.status != PENDING or self._locked or self._resolver is None:
            return False
        if self.cancel_hook is not None:
            self.cancel_hook(reason)
        self._resolver(Cancelled(reason))
        return self.is_cancelled

    def __await__(self):
        future = asyncio.get_running_loop().create_future()

        def on_resolve(value):
            if future.done():
                return
            if is_cancelled(value):
                future.set_exception(CancellationError('Promise chain was cancelled', value.reason))
            else:
                future.set_result(value)

        def on_reject(reason):
            if not future.done():
                future.set_exception(as_exception(reason))

        self._promise.then(on_resolve, on_reject)
        return (yield from future)

    def __repr__(self):
        res = self.__class__.__name__
        if self.status == PENDING:
            return res + '<pending>'
        return res + '<{}, value={!r}>'.format(self.status, self.value)
