# tests/services/test_retry.py
from itertools import islice
from unittest.mock import AsyncMock, patch

import pytest

from chess_coach.utils.retry import backoff_delays, retry_with_backoff


def test_backoff_delays_double_and_cap():
    delays = list(islice(backoff_delays(0.5, 3.0, jitter_factor=0.0), 5))
    assert delays == [0.5, 1.0, 2.0, 3.0, 3.0]

def test_backoff_jitter_stays_in_range():
    for delay in islice(backoff_delays(1.0, 10.0, jitter_factor=0.2), 1):
        assert 0.8 <= delay <= 1.2

@pytest.mark.asyncio
async def test_retries_transient_errors_then_succeeds():
    func = AsyncMock(side_effect=[ConnectionError("reset"), TimeoutError(), "ok"])
    func.__name__ = "func"

    with patch("chess_coach.utils.retry.asyncio.sleep", new=AsyncMock()) as sleep:
        result = await retry_with_backoff(attempts=3, service="test")(func)()

    assert result == "ok"
    assert func.await_count == 3
    assert sleep.await_count == 2

@pytest.mark.asyncio
async def test_gives_up_after_the_last_attempt():
    func = AsyncMock(side_effect=ConnectionError("down"))
    func.__name__ = "func"

    with patch("chess_coach.utils.retry.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(ConnectionError):
            await retry_with_backoff(attempts=2, service="test")(func)()

    assert func.await_count == 2

@pytest.mark.asyncio
async def test_other_errors_are_not_retried():
    func = AsyncMock(side_effect=ValueError("bad request"))
    func.__name__ = "func"

    with pytest.raises(ValueError):
        await retry_with_backoff(attempts=3)(func)()

    assert func.await_count == 1
