import logging
import threading
import time

log = logging.getLogger(__name__)


class Repeater:
    """Calls fn every interval_sec seconds on a daemon thread, after delay_sec."""

    def __init__(self, interval_sec, fn, delay_sec=0.0, name=None):
        self.interval = interval_sec
        self.delay = delay_sec
        self.fn = fn
        self._stop = threading.Event()
        self.th = threading.Thread(target=self._run, daemon=True, name=name)

    def start(self): self.th.start()

    def _run(self):
        if self._stop.wait(self.delay):
            return
        while not self._stop.is_set():
            t0 = time.monotonic()
            try:
                self.fn()
            except Exception:
                log.exception("periodic task %r failed", self.fn)
            dt = time.monotonic() - t0
            self._stop.wait(max(0.0, self.interval - dt))

    def stop(self, wait=False):
        self._stop.set()
        if wait and self.th.is_alive():
            self.th.join()

    def is_running(self):
        return self.th.is_alive() and not self._stop.is_set()
