import traceback
import logging

logger = logging.getLogger(__package__)


def log_error_handler(cls, tb):
    try:
        logger.error('Promise callback raised an exception that was never handled:\n%s',
                     ''.join(tb))
    except Exception:
        pass


def log_rejection_handler(reason):
    try:
        logger.warning('Promise rejection was never handled: %r', reason)
    except Exception:
        pass


class Default(object):
    # Called when an exception escapes a scheduled callback
    # This includes errors rethrown by PromiseX.done()
    UNHANDLED_FAILURE_CALLBACK = staticmethod(log_error_handler)

    # Called when a promise is rejected and no reject path
    # was registered on it by the next tick
    UNHANDLED_REJECTION_CALLBACK = staticmethod(log_rejection_handler)

    # Default scheduler for promise callbacks and timers
    SCHEDULER = None

    # Default underlying promise class for new families
    PROMISE_CLASS = None

    @staticmethod
    def get_scheduler():
        if not Default.SCHEDULER:
            from .schedulers import EventLoopScheduler

            Default.SCHEDULER = EventLoopScheduler()
        return Default.SCHEDULER

    @staticmethod
    def get_promise_class():
        if not Default.PROMISE_CLASS:
            from .promise import Promise

            Default.PROMISE_CLASS = Promise
        return Default.PROMISE_CLASS

    @staticmethod
    def on_unhandled_error(exc):
        tb = traceback.format_exception(exc.__class__, exc,
                                        exc.__traceback__)
        Default.UNHANDLED_FAILURE_CALLBACK(exc.__class__, tb)

    @staticmethod
    def on_unhandled_rejection(reason):
        Default.UNHANDLED_REJECTION_CALLBACK(reason)
