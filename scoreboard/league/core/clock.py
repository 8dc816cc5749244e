"""
One-second game clock poller.

The clock is not a server timer: each tick reads the game, decrements it, and
when it has reached zero stops it. A failed tick is logged and retried on the
next one so a transient database error never freezes the clock.
"""
import logging
import time

logger = logging.getLogger(__name__)


class ClockPoller:
    def __init__(self, step, retry_on, interval=1.0, sleep=time.sleep, max_ticks=None):
        """
        Args:
            step: callable returning True while the clock should keep running
            retry_on: exception types treated as transient
            interval: seconds between ticks
            sleep: sleep function (swapped out in tests)
            max_ticks: stop after this many ticks; None runs until the clock stops
        """
        self.step = step
        self.retry_on = retry_on
        self.interval = interval
        self.sleep = sleep
        self.max_ticks = max_ticks
        self.ticks = 0
        self.failures = 0

    def run(self):
        while self.max_ticks is None or self.ticks < self.max_ticks:
            self.sleep(self.interval)
            self.ticks += 1
            try:
                running = self.step()
            except self.retry_on as e:
                self.failures += 1
                logger.warning(f"Clock tick {self.ticks} failed, will retry: {e}")
                continue
            if not running:
                logger.info(f"Clock stopped after {self.ticks} ticks")
                return False
        return True
