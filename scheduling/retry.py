import time

from scheduling.errors import StorageUnavailable


def call_with_retry(fn, retries=2, delay_seconds=0.05, logger=None):
    """
    Run fn, retrying only on StorageUnavailable.

    Business rejections (SlotTaken and friends) propagate on the first raise.
    """
    attempt = 0
    while True:
        try:
            return fn()
        except StorageUnavailable:
            if attempt >= retries:
                raise
            attempt += 1
            if logger is not None:
                logger.warning("booking storage unavailable, retry %s/%s", attempt, retries)
            time.sleep(delay_seconds * attempt)
