import pytest

from backend.steptimer.core.config import Settings


class FakeCall:
    def __init__(self, period, callback, next_at):
        self.period = period
        self.callback = callback
        self.next_at = next_at
        self.cancelled = False
        self.fired = 0

    def cancel(self):
        self.cancelled = True


class FakeTicker:
    """Virtual clock: nothing fires until advance() is called."""

    def __init__(self):
        self.now = 0.0
        self.calls = []

    def call_every(self, period, callback):
        call = FakeCall(period, callback, self.now + period)
        self.calls.append(call)
        return call

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [c for c in self.calls if not c.cancelled and c.next_at <= target]
            if not due:
                break
            call = min(due, key=lambda c: c.next_at)
            self.now = call.next_at
            call.fired += 1
            if call.callback():
                call.next_at += call.period
            else:
                call.cancelled = True
        self.now = target

    @property
    def live(self):
        return [c for c in self.calls if not c.cancelled]


@pytest.fixture
def ticker():
    return FakeTicker()


@pytest.fixture
def settings():
    return Settings(tick_period=1.0, rewind_amount=10, fast_forward_amount=10)
