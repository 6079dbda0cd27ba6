"""Tests for rolodex.reactive.debouncer — settling bursts of keystrokes."""

from __future__ import annotations

import asyncio
import time
from contextlib import aclosing

import pytest

from rolodex.reactive.debouncer import Debouncer

from .conftest import next_item


class TestInitialValue:
    """The first value is available immediately."""

    @pytest.mark.asyncio
    async def test_emits_empty_string_before_any_submit(self) -> None:
        debouncer = Debouncer(quiet_ms=1000)
        async with aclosing(debouncer.settled()) as stream:
            assert await next_item(stream, timeout=0.1) == ""

    @pytest.mark.asyncio
    async def test_reattach_starts_from_last_settled(self) -> None:
        debouncer = Debouncer(quiet_ms=20)
        async with aclosing(debouncer.settled()) as stream:
            await next_item(stream)
            debouncer.submit("Tom")
            assert await next_item(stream) == "Tom"

        async with aclosing(debouncer.settled()) as stream:
            assert await next_item(stream, timeout=0.1) == "Tom"


class TestSettling:
    """Latest-value-wins after the quiet window."""

    @pytest.mark.asyncio
    async def test_burst_settles_once_with_last_value(self) -> None:
        debouncer = Debouncer(quiet_ms=50)
        async with aclosing(debouncer.settled()) as stream:
            assert await next_item(stream) == ""

            debouncer.submit("S")
            await asyncio.sleep(0.01)
            debouncer.submit("Sa")
            await asyncio.sleep(0.01)
            debouncer.submit("Sam")

            assert await next_item(stream) == "Sam"
            with pytest.raises(TimeoutError):
                await asyncio.wait_for(anext(stream), 0.2)

    @pytest.mark.asyncio
    async def test_quiet_window_measured_from_last_submit(self) -> None:
        debouncer = Debouncer(quiet_ms=60)
        async with aclosing(debouncer.settled()) as stream:
            await next_item(stream)

            debouncer.submit("a")
            await asyncio.sleep(0.04)
            debouncer.submit("ab")
            last_submit = time.monotonic()

            assert await next_item(stream) == "ab"
            assert time.monotonic() - last_submit >= 0.05

    @pytest.mark.asyncio
    async def test_separate_bursts_settle_separately(self) -> None:
        debouncer = Debouncer(quiet_ms=20)
        async with aclosing(debouncer.settled()) as stream:
            await next_item(stream)
            debouncer.submit("Am")
            assert await next_item(stream) == "Am"
            debouncer.submit("Amb")
            assert await next_item(stream) == "Amb"

    @pytest.mark.asyncio
    async def test_submit_before_subscribe_is_settled(self) -> None:
        debouncer = Debouncer(quiet_ms=20)
        debouncer.submit("Zoe")
        assert debouncer.has_pending

        async with aclosing(debouncer.settled()) as stream:
            assert await next_item(stream) == ""
            assert await next_item(stream) == "Zoe"
        assert not debouncer.has_pending

    @pytest.mark.asyncio
    async def test_none_is_treated_as_empty(self) -> None:
        debouncer = Debouncer(quiet_ms=20)
        async with aclosing(debouncer.settled()) as stream:
            await next_item(stream)
            debouncer.submit("x")
            debouncer.submit(None)
            assert await next_item(stream) == ""
        assert debouncer.last_settled == ""
