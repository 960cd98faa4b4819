from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, conint

from ..services.duration_parser import format_mmss

FINISHED_LABEL = "Finished!"


class TimerPhase(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class TimerState(BaseModel):
    """Mutable per-step record owned by a TimerScheduler."""

    step_id: int
    is_active: bool = False
    remaining_time: conint(ge=0) = 0
    initial_duration: conint(gt=0)
    generation: int = 0
    handle: Optional[Any] = Field(default=None, exclude=True, repr=False)

    model_config = {"arbitrary_types_allowed": True}

    def snapshot(self) -> "TimerSnapshot":
        return TimerSnapshot(
            step_id=self.step_id,
            is_active=self.is_active,
            remaining_time=self.remaining_time,
            initial_duration=self.initial_duration,
        )


class TimerSnapshot(BaseModel):
    """Read-only view of a step's timer handed to the host."""

    step_id: int
    is_active: bool
    remaining_time: int
    initial_duration: int

    model_config = {"frozen": True}

    @property
    def phase(self) -> TimerPhase:
        if self.is_active:
            return TimerPhase.RUNNING
        if self.remaining_time <= 0:
            return TimerPhase.FINISHED
        return TimerPhase.PAUSED

    @property
    def display(self) -> str:
        if self.phase is TimerPhase.FINISHED:
            return FINISHED_LABEL
        return format_mmss(self.remaining_time)

    def to_message(self) -> dict:
        data = self.model_dump()
        data["phase"] = self.phase.value
        data["display"] = self.display
        return data
