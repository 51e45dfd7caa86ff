"""
Latest-request-wins scheduling of generation jobs.

A front end may fire a new request every time a slider moves.  Each
output *target* (a preview pane, a gallery slot, ...) has at most one job
running and at most one request waiting.  Submitting while a job runs
puts the request in the waiting slot, replacing whatever was there, so
superseded requests never start.  When the running job finishes, the
waiting request (if any) starts next.  A result is published only if its
ticket is still the newest for the target; otherwise it is dropped.

Jobs run on a ThreadPoolExecutor.  Each job builds its own Raster and
NoiseField, so the lock only guards the scheduling tables.
"""

import concurrent.futures
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor

log = logging.getLogger(__name__)

from .generation_service import GenerationService


class GenerationScheduler:
    """
    Run generation requests in the background, one live request per target.

    Attributes:
        discarded:  Results that finished after a newer request arrived.
        superseded: Waiting requests replaced before they started.

    Args:
        service:     GenerationService to run jobs with (a new one if None).
        max_workers: Thread pool size, shared by all targets.
    """

    def __init__(self, service=None, max_workers=2):
        self.service = service or GenerationService()
        self._executor = ThreadPoolExecutor(max_workers=max(1, int(max_workers)),
                                            thread_name_prefix='camo-gen')
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._tickets = {}
        self._running = {}
        self._pending = {}
        self._published = {}
        self.discarded = 0
        self.superseded = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def submit(self, target, family, options=None):
        """
        Request a generation for *target*, superseding any earlier one.

        Starts at once if *target* is idle; otherwise waits in the
        target's single pending slot.

        Returns:
            The request's ticket number for *target*.
        """
        with self._lock:
            ticket = self._tickets.get(target, 0) + 1
            self._tickets[target] = ticket
            start = target not in self._running
            if start:
                self._running[target] = ticket
            else:
                if target in self._pending:
                    self.superseded += 1
                self._pending[target] = (ticket, family, options)
        if start:
            self._start(target, ticket, family, options)
            log.debug("Started %s ticket %d (%s)", target, ticket, family)
        else:
            log.debug("Queued %s ticket %d (%s)", target, ticket, family)
        return ticket

    def _start(self, target, ticket, family, options):
        try:
            self._executor.submit(self._run, target, ticket, family, options)
        except RuntimeError:
            # executor already shut down
            with self._idle:
                self._running.pop(target, None)
                self._pending.pop(target, None)
                self._idle.notify_all()
            raise

    def _run(self, target, ticket, family, options):
        result = None
        try:
            result = self.service.generate(family, options)
        finally:
            self._finish(target, ticket, result)
        return result

    def _finish(self, target, ticket, result):
        with self._idle:
            current = self._tickets.get(target) == ticket
            if result is not None:
                if current:
                    self._published[target] = result
                else:
                    self.discarded += 1
            following = self._pending.pop(target, None)
            if following is None:
                self._running.pop(target, None)
                self._idle.notify_all()
            else:
                self._running[target] = following[0]

        if result is not None and not current:
            log.warning("Discarding stale result for %s (ticket %d)", target, ticket)
            if result.raster is not None:
                result.raster.close()
        if following is not None:
            try:
                self._start(target, *following)
            except RuntimeError:
                log.warning("Dropped %s ticket %d: scheduler shut down",
                            target, following[0])

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def latest(self, target):
        """Newest published GenerationResult for *target*, or None."""
        with self._lock:
            return self._published.get(target)

    def is_current(self, target, ticket):
        with self._lock:
            return self._tickets.get(target) == ticket

    def busy(self, target):
        """True while *target* has a job running or a request waiting."""
        with self._lock:
            return target in self._running

    def wait(self, target, timeout=None):
        """
        Block until *target* has no job running and none waiting.

        Requests submitted while waiting are waited for too, but never
        beyond *timeout* seconds in total.

        Returns:
            The published GenerationResult, or None if nothing was published.

        Raises:
            concurrent.futures.TimeoutError: if *timeout* expires.
        """
        deadline = None if timeout is None else time.time() + timeout
        with self._idle:
            while target in self._running:
                remaining = None
                if deadline is not None:
                    remaining = deadline - time.time()
                    if remaining <= 0:
                        raise concurrent.futures.TimeoutError(
                            "{} still busy after {}s".format(target, timeout))
                self._idle.wait(remaining)
            return self._published.get(target)

    def shutdown(self, wait=True):
        """
        Stop accepting work and drop waiting requests.

        Jobs already running finish; with *wait* this call blocks until
        they have.
        """
        with self._idle:
            dropped = len(self._pending)
            self._pending.clear()
        if dropped:
            log.info("Dropped %d waiting request(s) at shutdown", dropped)
        self._executor.shutdown(wait=wait)
