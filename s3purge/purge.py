import logging
import time
from dataclasses import dataclass

from .batcher import batch_keys
from .dispatcher import Dispatcher, ProgressCounter
from .lister import list_keys
from .rate import RateReporter


@dataclass
class PurgeResult:
    bucket: str
    deleted: int
    batches_submitted: int
    batches_failed: int  # batches where at least one key was not confirmed deleted
    duration: float


def purge_bucket(s3, bucket_name, batch_size, concurrency, rate_display_interval):
    """Delete every object in the bucket and return a PurgeResult.

    A listing error stops further submissions; batches already handed to the
    dispatcher are drained before the error is re-raised.
    """
    logging.info(f"Purging bucket: bucket={bucket_name} concurrency={concurrency} batch_size={batch_size}")

    counter = ProgressCounter()
    dispatcher = Dispatcher(s3, bucket_name, concurrency, counter=counter)
    start_time = time.monotonic()
    RateReporter(counter, rate_display_interval, start_time=start_time).start()

    try:
        for batch in batch_keys(list_keys(s3, bucket_name), batch_size):
            dispatcher.submit(batch)
    finally:
        # Wait for all deletions to complete, even when listing failed
        deleted = dispatcher.wait_all()
        duration = time.monotonic() - start_time
        logging.info(f"Deleted {deleted} objects")
        logging.info(f"Time to delete objects: {duration:.2f} seconds")

    return PurgeResult(
        bucket=bucket_name,
        deleted=deleted,
        batches_submitted=dispatcher.batches_submitted,
        batches_failed=dispatcher.batches_failed,
        duration=duration,
    )
