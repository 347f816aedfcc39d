from .scheduler_base import SchedulerBase
from .event_loop import EventLoopScheduler
from .virtual_time import VirtualTimeScheduler, TimerHandle
