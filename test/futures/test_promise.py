from promisex import Promise, VirtualTimeScheduler
from promisex.config import Default
import unittest


class PromiseTest(unittest.TestCase):
    def setUp(self):
        self.scheduler = VirtualTimeScheduler()
        self.Promise = Promise.with_scheduler(self.scheduler)

        self.rejections = []
        self._rejection_callback = Default.UNHANDLED_REJECTION_CALLBACK
        Default.UNHANDLED_REJECTION_CALLBACK = staticmethod(self.rejections.append)

    def tearDown(self):
        Default.UNHANDLED_REJECTION_CALLBACK = self._rejection_callback

    def collect(self, p):
        results = []
        p.then(lambda v: results.append(('resolved', v)),
               lambda r: results.append(('rejected', r)))
        self.scheduler.run()
        return results

    def test_resolved(self):
        p = self.Promise(lambda resolve, reject: resolve(10))
        self.assertTrue(p.done())
        self.assertEqual([('resolved', 10)], self.collect(p))

    def test_rejected(self):
        p = self.Promise(lambda resolve, reject: reject('e'))
        self.assertEqual([('rejected', 'e')], self.collect(p))

    def test_settles_once(self):
        p = self.Promise(lambda resolve, reject: (resolve(1), reject(2), resolve(3)))
        self.assertEqual([('resolved', 1)], self.collect(p))

    def test_executor_exception(self):
        def executor(resolve, reject):
            raise ArithmeticError()

        results = self.collect(self.Promise(executor))
        self.assertEqual('rejected', results[0][0])
        self.assertIsInstance(results[0][1], ArithmeticError)

    def test_callbacks_are_asynchronous_and_ordered(self):
        calls = []
        p = self.Promise.resolve(1)
        p.then(lambda _: calls.append('first'))
        p.then(lambda _: calls.append('second'))
        self.assertEqual([], calls)

        self.scheduler.flush()
        self.assertEqual(['first', 'second'], calls)

    def test_non_callable_handlers_pass_through(self):
        self.assertEqual([('resolved', 1)], self.collect(self.Promise.resolve(1).then(None, 5)))
        self.assertEqual([('rejected', 2)], self.collect(self.Promise.reject(2).then('x')))

    def test_handler_exception_rejects(self):
        p = self.Promise.resolve(1).then(lambda _: {}['missing'])
        results = self.collect(p)
        self.assertIsInstance(results[0][1], KeyError)

    def test_catch_recovers(self):
        p = self.Promise.reject('e').catch(lambda r: r * 2)
        self.assertEqual([('resolved', 'ee')], self.collect(p))

    def test_resolve_returns_same_instance(self):
        p = self.Promise.resolve(1)
        self.assertIs(p, self.Promise.resolve(p))

    def test_adopts_promise(self):
        inner = []
        p = self.Promise(lambda resolve, reject: inner.append(resolve))
        outer = self.Promise.resolve(None).then(lambda _: p)

        self.scheduler.run()
        self.assertFalse(outer.done())

        inner[0]('adopted')
        self.assertEqual([('resolved', 'adopted')], self.collect(outer))

    def test_adopts_thenable(self):
        class Thenable(object):
            def then(self, resolve, reject):
                resolve('thenable')
                resolve('again')

        p = self.Promise.resolve(Thenable())
        self.assertEqual([('resolved', 'thenable')], self.collect(p))

    def test_thenable_raising_rejects(self):
        class Thenable(object):
            def then(self, resolve, reject):
                raise ValueError()

        results = self.collect(self.Promise.resolve(Thenable()))
        self.assertIsInstance(results[0][1], ValueError)

    def test_classes_are_not_thenables(self):
        class WithThen(object):
            def then(self, resolve, reject):
                pass

        self.assertEqual([('resolved', WithThen)], self.collect(self.Promise.resolve(WithThen)))

    def test_self_resolution_rejects(self):
        holder = []
        p = self.Promise.resolve(1).then(lambda _: holder[0])
        holder.append(p)

        results = self.collect(p)
        self.assertIsInstance(results[0][1], TypeError)

    def test_unhandled_rejection_reported(self):
        self.Promise.reject('lost')
        self.scheduler.run()
        self.assertEqual(['lost'], self.rejections)

    def test_handled_rejection_not_reported(self):
        self.Promise.reject('caught').catch(lambda _: None)
        self.scheduler.run()
        self.assertEqual([], self.rejections)

    def test_with_scheduler(self):
        other = VirtualTimeScheduler()
        OtherPromise = self.Promise.with_scheduler(other)
        self.assertTrue(issubclass(OtherPromise, self.Promise))

        calls = []
        OtherPromise.resolve(1).then(calls.append)
        self.scheduler.run()
        self.assertEqual([], calls)
        other.run()
        self.assertEqual([1], calls)


if __name__ == '__main__':
    unittest.main()
