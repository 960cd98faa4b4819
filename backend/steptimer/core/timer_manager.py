import itertools
import logging
from typing import Callable, Dict, List, Optional

from .config import Settings, get_settings
from .ticker import Ticker
from ..models.timer import TimerSnapshot, TimerState
from ..services.duration_parser import parse_duration

log = logging.getLogger(__name__)

ChangeCallback = Callable[[int, TimerSnapshot], None]


class TimerScheduler:
    """
    Countdown timers for the steps of one recipe viewing session.

    Each running step owns its own repeating tick. Every operation is a
    silent no-op when it does not apply (unknown step, unparsable text,
    already running, already disposed).
    """

    def __init__(
        self,
        ticker: Ticker,
        settings: Optional[Settings] = None,
        on_change: Optional[ChangeCallback] = None,
    ):
        self.ticker = ticker
        self.settings = settings or get_settings()
        self.on_change = on_change
        self.timers: Dict[int, TimerState] = {}
        self._generations = itertools.count(1)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.dispose()

    # ----- host controls -----
    def start(self, step_id: int, text: str) -> None:
        timer = self.timers.get(step_id)
        if timer is None:
            duration = parse_duration(text)
            if duration is None:
                log.debug("Step %s: no duration in %r", step_id, text)
                return
            if duration <= 0:
                log.debug("Step %s: zero-length duration, nothing to count down", step_id)
                return
            timer = TimerState(step_id=step_id, remaining_time=duration, initial_duration=duration)
            self.timers[step_id] = timer
            log.info("Step %s: timer set to %ss", step_id, duration)
        elif timer.is_active:
            log.debug("Step %s: already running", step_id)
            return
        elif timer.remaining_time <= 0:
            log.debug("Step %s: already finished", step_id)
            return
        else:
            log.info("Step %s: resuming at %ss", step_id, timer.remaining_time)

        generation = next(self._generations)
        timer.generation = generation
        timer.is_active = True
        timer.handle = self.ticker.call_every(
            self.settings.tick_period, lambda: self._tick(step_id, generation)
        )
        self._notify(timer)

    def pause(self, step_id: int) -> None:
        timer = self.timers.get(step_id)
        if timer is None or not timer.is_active:
            log.debug("Step %s: nothing to pause", step_id)
            return
        self._release(timer)
        log.info("Step %s: paused at %ss", step_id, timer.remaining_time)
        self._notify(timer)

    def rewind(self, step_id: int, amount: Optional[int] = None) -> None:
        timer = self.timers.get(step_id)
        if timer is None:
            log.debug("Step %s: no timer to rewind", step_id)
            return
        if amount is None:
            amount = self.settings.rewind_amount
        timer.remaining_time = max(0, timer.remaining_time - amount)
        self._notify(timer)

    def fast_forward(self, step_id: int, amount: Optional[int] = None) -> None:
        timer = self.timers.get(step_id)
        if timer is None:
            log.debug("Step %s: no timer to fast-forward", step_id)
            return
        if amount is None:
            amount = self.settings.fast_forward_amount
        # may run past initial_duration
        timer.remaining_time = max(0, timer.remaining_time + amount)
        self._notify(timer)

    def dispose(self) -> None:
        if not self.timers:
            log.debug("Nothing to dispose")
            return
        for timer in self.timers.values():
            self._release(timer)
        count = len(self.timers)
        self.timers.clear()
        log.info("Disposed %d step timer(s)", count)

    # ----- host reads -----
    def get_state(self, step_id: int) -> Optional[TimerSnapshot]:
        timer = self.timers.get(step_id)
        return timer.snapshot() if timer is not None else None

    def states(self) -> List[TimerSnapshot]:
        return [self.timers[k].snapshot() for k in sorted(self.timers)]

    # ----- internal -----
    def _tick(self, step_id: int, generation: int) -> bool:
        """Returns False once this tick task should stop repeating."""
        timer = self.timers.get(step_id)
        if timer is None or not timer.is_active or timer.generation != generation:
            log.debug("Step %s: stale tick %s dropped", step_id, generation)
            return False

        remaining = timer.remaining_time - 1
        if remaining <= 0:
            timer.remaining_time = 0
            timer.is_active = False
            timer.handle = None
            log.info("Step %s: timer finished", step_id)
            self._notify(timer)
            return False

        timer.remaining_time = remaining
        self._notify(timer)
        return True

    def _release(self, timer: TimerState) -> None:
        if timer.handle is not None:
            timer.handle.cancel()
        timer.handle = None
        timer.is_active = False

    def _notify(self, timer: TimerState) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(timer.step_id, timer.snapshot())
        except Exception:
            log.exception("Timer listener failed for step %s", timer.step_id)
