import asyncio

from backend.steptimer.core.ticker import LoopTicker, RepeatingCall


def test_repeats_until_callback_stops():
    fired = []

    def cb():
        fired.append(1)
        return len(fired) < 3

    async def run():
        handle = LoopTicker().call_every(0.01, cb)
        await asyncio.sleep(0.2)
        return handle

    handle = asyncio.run(run())
    assert len(fired) == 3
    assert handle.cancelled


def test_cancel_prevents_further_calls():
    fired = []

    async def run():
        handle = LoopTicker().call_every(0.01, lambda: fired.append(1) or True)
        await asyncio.sleep(0.05)
        handle.cancel()
        count = len(fired)
        await asyncio.sleep(0.05)
        return count

    count = asyncio.run(run())
    assert count >= 1
    assert len(fired) == count


def test_cancel_before_first_tick():
    fired = []

    async def run():
        handle = LoopTicker().call_every(0.01, lambda: fired.append(1) or True)
        handle.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(run())
    assert fired == []


class StubLoop:
    def __init__(self):
        self.now = 0.0
        self.scheduled = []

    def time(self):
        return self.now

    def call_at(self, when, callback):
        self.scheduled.append((when, callback))
        return StubHandle()


class StubHandle:
    def cancel(self):
        pass


def test_late_firing_does_not_shift_schedule():
    loop = StubLoop()
    RepeatingCall(loop, 1.0, lambda: True)
    assert loop.scheduled[-1][0] == 1.0

    loop.now = 1.7
    loop.scheduled[-1][1]()
    assert loop.scheduled[-1][0] == 2.0

    loop.now = 2.05
    loop.scheduled[-1][1]()
    assert loop.scheduled[-1][0] == 3.0
