"""Unit tests for synse_cli.core.concurrency."""

import asyncio
from functools import partial

import pytest

from synse_cli.core.concurrency import gather_bounded, run_with_deadline


async def _sleep_then_return(value, delay: float = 0.0):
    await asyncio.sleep(delay)
    return value


class TestRunWithDeadline:
    """Tests for run_with_deadline."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        assert await run_with_deadline(partial(_sleep_then_return, 7), timeout=1.0) == 7

    @pytest.mark.asyncio
    async def test_times_out(self):
        """Should raise TimeoutError when the call overruns."""
        with pytest.raises(TimeoutError):
            await run_with_deadline(partial(_sleep_then_return, 7, delay=1.0), timeout=0.01)

    @pytest.mark.asyncio
    async def test_no_timeout(self):
        """Should wait indefinitely when timeout is None."""
        assert await run_with_deadline(partial(_sleep_then_return, "ok", delay=0.01), None) == "ok"

    @pytest.mark.asyncio
    async def test_propagates_errors(self):
        async def _boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await run_with_deadline(_boom, timeout=1.0)


class TestGatherBounded:
    """Tests for gather_bounded."""

    @pytest.mark.asyncio
    async def test_preserves_input_order(self):
        """Should return results in call order, not completion order."""
        delays = [0.05, 0.0, 0.03, 0.01]
        calls = [partial(_sleep_then_return, i, delay=d) for i, d in enumerate(delays)]

        assert await gather_bounded(calls, limit=4) == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_respects_limit(self):
        """Should never run more than limit calls at once."""
        running = 0
        peak = 0

        async def _tracked():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        await gather_bounded([_tracked for _ in range(10)], limit=3)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await gather_bounded([], limit=2) == []

    @pytest.mark.asyncio
    async def test_invalid_limit(self):
        with pytest.raises(ValueError, match="at least 1"):
            await gather_bounded([], limit=0)

    @pytest.mark.asyncio
    async def test_first_error_propagates(self):
        async def _boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await gather_bounded([partial(_sleep_then_return, 1), _boom], limit=2)
