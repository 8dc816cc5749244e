"""
Unit tests for the clock poller loop, with fake sleep and step functions.
"""
import unittest

from scoreboard.league.core.clock import ClockPoller


class TransientError(Exception):
    pass


class FakeStep:
    """Returns (or raises) the queued results in order."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class TestClockPoller(unittest.TestCase):

    def setUp(self):
        self.sleeps = []

    def _poller(self, step, **kwargs):
        return ClockPoller(step, retry_on=(TransientError,), interval=1.0,
                           sleep=self.sleeps.append, **kwargs)

    def test_stops_when_clock_stops(self):
        step = FakeStep([True, True, False])
        poller = self._poller(step)
        self.assertFalse(poller.run())
        self.assertEqual(step.calls, 3)
        self.assertEqual(poller.ticks, 3)
        self.assertEqual(self.sleeps, [1.0, 1.0, 1.0])

    def test_transient_failure_is_retried(self):
        step = FakeStep([True, TransientError("db gone"), True, False])
        poller = self._poller(step)
        self.assertFalse(poller.run())
        self.assertEqual(poller.failures, 1)
        self.assertEqual(step.calls, 4)

    def test_other_errors_propagate(self):
        step = FakeStep([KeyError("boom")])
        with self.assertRaises(KeyError):
            self._poller(step).run()

    def test_max_ticks(self):
        step = FakeStep([True] * 5)
        poller = self._poller(step, max_ticks=2)
        self.assertTrue(poller.run())
        self.assertEqual(step.calls, 2)


if __name__ == "__main__":
    unittest.main()
