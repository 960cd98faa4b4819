from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError, conint
from starlette.websockets import WebSocketState
from enum import Enum
from typing import Optional
import logging
import asyncio
import contextlib
import json

from ..core.config import Settings, get_settings
from ..core.ticker import LoopTicker
from ..core.timer_manager import TimerScheduler
from ..models.recipe import Recipe
from ..models.timer import TimerSnapshot
from ..services.duration_parser import has_duration
from ..services.recipe_parser import RecipeParser

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")


class Action(str, Enum):
    START = "start"
    PAUSE = "pause"
    REWIND = "rewind"
    FAST_FORWARD = "fast_forward"
    STATE = "state"


class TimerCommand(BaseModel):
    action: Action
    step: int
    amount: Optional[conint(ge=0)] = None


def timer_message(step: int, snapshot: Optional[TimerSnapshot]) -> dict:
    return {
        "type": "timer",
        "step": step,
        "state": snapshot.to_message() if snapshot is not None else None,
    }


def recipe_message(recipe: Recipe) -> dict:
    return {
        "type": "recipe",
        "title": recipe.title,
        "steps": [
            {
                "step": inst.step_number,
                "description": inst.description,
                "has_timer": has_duration(inst.description),
            }
            for inst in recipe.instructions
        ],
    }


async def cancel_tasks(tasks) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    for task in pending:
        with contextlib.suppress(asyncio.CancelledError):
            await task


def apply_command(timers: TimerScheduler, recipe: Recipe, cmd: TimerCommand) -> None:
    """Dispatch one client command onto the session's scheduler."""
    if cmd.action == Action.START:
        inst = recipe.instruction(cmd.step)
        timers.start(cmd.step, inst.description if inst else "")
    elif cmd.action == Action.PAUSE:
        timers.pause(cmd.step)
    elif cmd.action == Action.REWIND:
        timers.rewind(cmd.step, cmd.amount)
    elif cmd.action == Action.FAST_FORWARD:
        timers.fast_forward(cmd.step, cmd.amount)


@router.websocket("/timers")
async def timers_endpoint(ws: WebSocket, settings: Settings = Depends(get_settings)):
    log.info("🔗 New timer session")
    await ws.accept()

    outbox: "asyncio.Queue[dict]" = asyncio.Queue()
    timers = TimerScheduler(
        LoopTicker(),
        settings=settings,
        on_change=lambda step, snapshot: outbox.put_nowait(timer_message(step, snapshot)),
    )

    async def push_updates():
        while True:
            message = await outbox.get()
            if ws.application_state != WebSocketState.CONNECTED:
                log.warning("❌ WebSocket not connected, timer update dropped")
                continue
            await ws.send_json(message)

    async def handle_commands(recipe: Recipe):
        while True:
            raw = await ws.receive_text()
            try:
                cmd = TimerCommand.model_validate(json.loads(raw))
            except json.JSONDecodeError as e:
                log.warning(f"⚠️ Malformed command: {e}")
                await outbox.put({"type": "error", "message": f"Malformed JSON: {e.msg}"})
                continue
            except ValidationError as e:
                log.warning(f"⚠️ Invalid command: {raw[:100]}")
                await outbox.put({"type": "error", "message": f"Invalid command: {e.errors()[0]['msg']}"})
                continue

            log.debug(f"📨 {cmd.action.value} step {cmd.step}")
            if cmd.action == Action.STATE:
                await outbox.put(timer_message(cmd.step, timers.get_state(cmd.step)))
            else:
                apply_command(timers, recipe, cmd)

    try:
        # Client must send the raw recipe first (text)
        raw_recipe = await ws.receive_text()
        recipe = RecipeParser.parse(raw_recipe)
        log.info(f"✅ Recipe parsed: {len(recipe.instructions)} steps")
        await ws.send_json(recipe_message(recipe))

        # both loops run forever, so whichever finishes first has failed
        tasks = [
            asyncio.create_task(handle_commands(recipe)),
            asyncio.create_task(push_updates()),
        ]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            await cancel_tasks(tasks)
        for task in done:
            task.result()
    except WebSocketDisconnect:
        log.info("👋 Timer session disconnected")
    except Exception as e:
        log.error(f"💥 Timer session error: {e}")
        if ws.application_state == WebSocketState.CONNECTED:
            await ws.send_json({"type": "error", "message": f"Server error: {str(e)}"})
            await ws.close()
    finally:
        timers.dispose()
        log.info("🛑 Timers disposed")
