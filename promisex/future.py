from .config import Default
from .exceptions import CancellationError, TimeoutError
from .family import Family
from .future_core import FutureCore
from .future_callbacks import FutureCallbacks
from .future_extensions import FutureExtensions


class FutureBase(FutureCallbacks, FutureExtensions, FutureCore):
    """Promise wrapper adding state inspection, cancellation and combinators
    on top of an underlying promise class.

    Not bound to any family, use PromiseX or create_family().
    """

    CancellationError = CancellationError
    TimeoutError = TimeoutError


def create_family(promise_cls=None, scheduler=None, name='PromiseX'):
    """Returns new PromiseX class with its own configuration.

    Instances of different families never pass isinstance checks of
    each other.

    Args:
        promise_cls: underlying promise class (default - config.Default.get_promise_class()).
        scheduler: scheduler for timers and callbacks (default - the scheduler
        of promise_cls, or config.Default.get_scheduler()).
        name: name of the new class.
    """
    if promise_cls is None:
        promise_cls = Default.get_promise_class()
    return type(name, (FutureBase,), {
        '_family': Family(promise_cls, scheduler),
        '__module__': __name__,
    })


PromiseX = create_family()
