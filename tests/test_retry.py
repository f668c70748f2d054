import pytest

from scheduling.errors import SlotTaken, StorageUnavailable
from scheduling.retry import call_with_retry


class DummyLogger:
    def __init__(self):
        self.warnings = []

    def warning(self, msg, *args):
        self.warnings.append(msg % args)


def test_transient_errors_are_retried_until_success():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise StorageUnavailable()
        return "booked"

    logger = DummyLogger()
    assert call_with_retry(flaky, retries=2, delay_seconds=0, logger=logger) == "booked"
    assert len(calls) == 3
    assert len(logger.warnings) == 2


def test_retries_are_bounded():
    calls = []

    def down():
        calls.append(1)
        raise StorageUnavailable()

    with pytest.raises(StorageUnavailable):
        call_with_retry(down, retries=2, delay_seconds=0)
    assert len(calls) == 3


def test_business_rejections_are_not_retried():
    calls = []

    def taken():
        calls.append(1)
        raise SlotTaken()

    with pytest.raises(SlotTaken):
        call_with_retry(taken, retries=2, delay_seconds=0)
    assert len(calls) == 1
