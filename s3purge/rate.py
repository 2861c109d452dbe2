import logging
import threading
import time


class RateReporter:
    """Periodically logs the deletion rate since the run started.

    Runs as a daemon thread with no stop signal; process exit ends it.
    """

    def __init__(self, counter, interval, start_time=None, clock=time.monotonic, sleep=time.sleep):
        self.counter = counter
        self.interval = interval
        self.clock = clock
        self.sleep = sleep
        self.start_time = start_time if start_time is not None else clock()
        self._thread = None

    def rate(self):
        elapsed = self.clock() - self.start_time
        if elapsed <= 0:
            return 0.0
        return self.counter.value / elapsed

    def report(self):
        logging.info(f"Current deletion rate: {self.rate():.3f} items/second")

    def _loop(self):
        while True:
            self.sleep(self.interval)
            self.report()

    def start(self):
        self._thread = threading.Thread(target=self._loop, name='s3purge-rate', daemon=True)
        self._thread.start()
        return self._thread
