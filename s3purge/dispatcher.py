import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from botocore.exceptions import BotoCoreError, ClientError


class ProgressCounter:
    """Running total of confirmed deletions, shared by all deletion tasks."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def add(self, amount):
        with self._lock:
            self._value += amount

    @property
    def value(self):
        return self._value


def delete_batch(s3, bucket_name, keys):
    """Delete one batch of keys in a single request; return how many the backend confirmed.

    Failures are logged and count as zero. Nothing is retried.
    """
    try:
        response = s3.delete_objects(
            Bucket=bucket_name,
            Delete={'Objects': [{'Key': key} for key in keys]},
        )
    except (ClientError, BotoCoreError) as e:
        logging.error(f"Failed to delete objects: keys={list(keys)} error={e}")
        return 0

    errors = response.get('Errors', [])
    for error in errors:
        logging.error(f"Failed to delete object {error.get('Key')}: {error.get('Code')} {error.get('Message')}")

    # quiet or minimal backends list no keys: an error-free response counts the whole batch
    if 'Deleted' not in response and not errors:
        for key in keys:
            logging.debug(f"Deleted object: {key}")
        return len(keys)

    deleted = response.get('Deleted', [])
    for obj in deleted:
        logging.debug(f"Deleted object: {obj.get('Key')}")
    return len(deleted)


class Dispatcher:
    """Runs deletion batches concurrently, never more than `concurrency` at a time.

    submit() is the backpressure point: it blocks until a slot is free, hands
    the batch to the thread pool and returns. wait_all() is the drain point: it
    returns once every submitted batch has finished.
    """

    def __init__(self, s3, bucket_name, concurrency, counter=None):
        if concurrency <= 0:
            raise ValueError(f"concurrency must be greater than 0, got {concurrency}")
        self.s3 = s3
        self.bucket_name = bucket_name
        self.counter = counter if counter is not None else ProgressCounter()
        self.batches_submitted = 0
        self._failed = ProgressCounter()
        self._gate = threading.BoundedSemaphore(concurrency)
        self._executor = ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix='s3purge-delete')

    @property
    def batches_failed(self):
        return self._failed.value

    def submit(self, batch):
        """Wait for a free slot, then start deleting the batch in the background."""
        self._gate.acquire()  # Acquire concurrency slot
        try:
            future = self._executor.submit(self._run, batch)
        except BaseException:
            self._gate.release()
            raise
        future.add_done_callback(self._log_crash)
        self.batches_submitted += 1
        return future

    def _run(self, batch):
        try:
            deleted = delete_batch(self.s3, self.bucket_name, batch)
            if deleted < len(batch):
                self._failed.add(1)
            self.counter.add(deleted)
            return deleted
        finally:
            self._gate.release()  # Release concurrency slot

    def _log_crash(self, future):
        error = future.exception()
        if error is not None:
            self._failed.add(1)
            logging.error(f"Deletion task crashed: {error!r}")

    def wait_all(self):
        """Block until every submitted batch has finished; return the deleted count."""
        self._executor.shutdown(wait=True)
        return self.counter.value
