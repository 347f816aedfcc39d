from promisex import VirtualTimeScheduler
from promisex.config import Default
import unittest


class VirtualTimeSchedulerTest(unittest.TestCase):
    def setUp(self):
        self.scheduler = VirtualTimeScheduler()

        self.unhandled = []
        self._failure_callback = Default.UNHANDLED_FAILURE_CALLBACK
        Default.UNHANDLED_FAILURE_CALLBACK = staticmethod(lambda cls, tb: self.unhandled.append(cls))

    def tearDown(self):
        Default.UNHANDLED_FAILURE_CALLBACK = self._failure_callback

    def test_callbacks_wait_for_flush(self):
        calls = []
        self.scheduler(calls.append, 1)
        self.scheduler(calls.append, 2)
        self.assertEqual([], calls)
        self.assertEqual(2, self.scheduler.pending)

        self.assertEqual(2, self.scheduler.flush())
        self.assertEqual([1, 2], calls)
        self.assertEqual(0, self.scheduler.pending)

    def test_flush_runs_nested_callbacks(self):
        calls = []

        def outer():
            calls.append('outer')
            self.scheduler(calls.append, 'inner')

        self.scheduler(outer)
        self.scheduler.flush()
        self.assertEqual(['outer', 'inner'], calls)

    def test_timers_fire_in_order(self):
        calls = []
        self.scheduler.call_later(0.02, calls.append, 'b')
        self.scheduler.call_later(0.01, calls.append, 'a')
        self.scheduler.call_later(0.02, calls.append, 'c')

        self.scheduler.run()
        self.assertEqual(['a', 'b', 'c'], calls)
        self.assertEqual(0.02, self.scheduler.now())

    def test_advance_by(self):
        calls = []
        self.scheduler.call_later(1, calls.append, 'early')
        self.scheduler.call_later(3, calls.append, 'late')

        self.scheduler.advance_by(2)
        self.assertEqual(['early'], calls)
        self.assertEqual(2, self.scheduler.now())

        self.scheduler.advance_to(3)
        self.assertEqual(['early', 'late'], calls)

    def test_negative_delay_fires_now(self):
        calls = []
        self.scheduler.call_later(-5, calls.append, 1)
        self.scheduler.advance_by(0)
        self.assertEqual([1], calls)
        self.assertEqual(0, self.scheduler.now())

    def test_cancelled_timer(self):
        calls = []
        handle = self.scheduler.call_later(1, calls.append, 1)
        handle.cancel()
        self.assertEqual(0, self.scheduler.pending)

        self.scheduler.run()
        self.assertEqual([], calls)
        self.assertEqual(0, self.scheduler.now())

    def test_callback_exception_reported(self):
        def error():
            raise TypeError()

        calls = []
        self.scheduler(error)
        self.scheduler(calls.append, 1)
        self.scheduler.flush()

        self.assertEqual([TypeError], self.unhandled)
        self.assertEqual([1], calls)

    def test_threadsafe(self):
        self.assertIs(self.scheduler, self.scheduler.threadsafe())


if __name__ == '__main__':
    unittest.main()
