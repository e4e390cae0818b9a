import pytest

from catalog_lib.rate import RateLimiter


def test_wait_sleeps_configured_delay():
    calls = []
    limiter = RateLimiter(1500, sleep=calls.append)
    limiter.wait()
    limiter.wait()
    assert calls == [1.5, 1.5]
    assert limiter.waits == 2


def test_zero_delay_never_sleeps():
    calls = []
    RateLimiter(0, sleep=calls.append).wait()
    assert calls == []


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        RateLimiter(-1)
