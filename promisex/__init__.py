"""Promise wrapper with state inspection, cooperative cancellation and combinators."""

from .config import Default
from .exceptions import PromiseError, CancellationError, TimeoutError, RejectionError
from .cancellation import Cancelled, is_cancelled
from .promise import Promise
from .family import Family, supports_promise
from .future_core import PENDING, RESOLVED, REJECTED
from .future import FutureBase, PromiseX, create_family
from .schedulers import SchedulerBase, EventLoopScheduler, VirtualTimeScheduler
