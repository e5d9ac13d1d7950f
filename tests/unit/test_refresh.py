"""Tests for BackgroundRefresher."""

import asyncio

import pytest

from aipulse.services.refresh import BackgroundRefresher


class TestSchedule:
    """Tests for scheduling and draining refreshes."""

    @pytest.mark.asyncio
    async def test_runs_in_background(self) -> None:
        refresher = BackgroundRefresher()
        ran = asyncio.Event()

        async def refresh() -> None:
            ran.set()

        refresher.schedule("github_tools_page_1", refresh)
        assert not ran.is_set()

        await refresher.drain()

        assert ran.is_set()
        assert refresher.pending == 0

    @pytest.mark.asyncio
    async def test_failure_is_contained(self) -> None:
        refresher = BackgroundRefresher()

        async def refresh() -> None:
            raise RuntimeError("upstream exploded")

        task = refresher.schedule("github_tools_page_1", refresh)
        await refresher.drain()

        assert task.done()
        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_each_call_schedules_a_task_by_default(self) -> None:
        refresher = BackgroundRefresher()
        calls = 0

        async def refresh() -> None:
            nonlocal calls
            calls += 1

        first = refresher.schedule("k", refresh)
        second = refresher.schedule("k", refresh)
        await refresher.drain()

        assert first is not second
        assert calls == 2


class TestSingleFlight:
    """Tests for collapsing concurrent refreshes of one key."""

    @pytest.mark.asyncio
    async def test_concurrent_refreshes_collapse(self) -> None:
        refresher = BackgroundRefresher(single_flight=True)
        release = asyncio.Event()
        calls = 0

        async def refresh() -> None:
            nonlocal calls
            calls += 1
            await release.wait()

        first = refresher.schedule("k", refresh)
        second = refresher.schedule("k", refresh)
        other = refresher.schedule("other", refresh)
        release.set()
        await refresher.drain()

        assert first is second
        assert other is not first
        assert calls == 2

    @pytest.mark.asyncio
    async def test_new_refresh_after_completion(self) -> None:
        refresher = BackgroundRefresher(single_flight=True)
        calls = 0

        async def refresh() -> None:
            nonlocal calls
            calls += 1

        refresher.schedule("k", refresh)
        await refresher.drain()
        refresher.schedule("k", refresh)
        await refresher.drain()

        assert calls == 2


class TestClose:
    """Tests for shutdown."""

    @pytest.mark.asyncio
    async def test_close_cancels_pending(self) -> None:
        refresher = BackgroundRefresher()

        async def refresh() -> None:
            await asyncio.sleep(3600)

        task = refresher.schedule("k", refresh)
        await asyncio.sleep(0)

        await refresher.close()

        assert task.cancelled()
        assert refresher.pending == 0
