from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Any, Literal

from agents import Agent, ModelSettings, RunContextWrapper, function_tool, run_demo_loop
from dotenv import load_dotenv
from loguru import logger

from .backend.agent import SessionEvent, TimesheetSession
from .backend.config import configure_logging, load_from_env
from .backend.exporters.csv import render_week_csv
from .backend.store import ScheduleStore

load_dotenv()


@dataclass
class TimesheetContext:
    """Per-run context holding the live session."""

    session: TimesheetSession


@function_tool
def show_week(ctx: RunContextWrapper[TimesheetContext]) -> dict[str, Any]:
    """Return the current week: times per day, weekly status and clock-out suggestion."""
    return {"status": "ok", **ctx.context.session.snapshot()}


@function_tool
def set_clock_time(
    ctx: RunContextWrapper[TimesheetContext],
    weekday: str,
    field: Literal["clock_in", "clock_out"],
    time: str,
) -> dict[str, Any]:
    """Record a clock-in or clock-out time for one working day.

    Args:
        weekday: Monday to Friday, in English or Italian (e.g. "monday", "lunedi").
        field: "clock_in" or "clock_out".
        time: 24-hour time such as "09:00" or "17:30". Empty string clears the value.
    """
    return _events_to_result(ctx.context.session.set_time(weekday, field, time))


@function_tool
def record_freeform(ctx: RunContextWrapper[TimesheetContext], text: str) -> dict[str, Any]:
    """Record times from a short phrase such as "monday in 9:00 out 17:30".

    Args:
        text: The user's words, passed through unchanged.
    """
    return _events_to_result(ctx.context.session.provide_input(text))


@function_tool
def clear_week(ctx: RunContextWrapper[TimesheetContext], confirm: bool = False) -> dict[str, Any]:
    """Delete all recorded times for the week.

    Call first with confirm=false to register the request, ask the user to
    confirm, then call again with confirm=true only after an explicit yes.

    Args:
        confirm: True only once the user has explicitly confirmed the deletion.
    """
    session = ctx.context.session
    if not confirm:
        return _events_to_result([session.request_clear()])
    return _events_to_result(session.confirm_clear())


@function_tool
def export_week_csv(ctx: RunContextWrapper[TimesheetContext]) -> str:
    """Export the week as CSV with headers: giorno,entrata,uscita,totale."""
    csv_text = render_week_csv(ctx.context.session.schedule)
    save_path = os.environ.get("TIMESHEET_EXPORT_PATH")
    if save_path:
        try:
            folder = os.path.dirname(save_path)
            if folder:
                os.makedirs(folder, exist_ok=True)
            with open(save_path, "w", encoding="utf-8") as f:
                f.write(csv_text)
        except OSError as exc:
            # Keep the tool output strictly CSV content.
            logger.error("Could not write CSV export to {}: {}", save_path, exc)
    return csv_text


def _events_to_result(events: list[SessionEvent]) -> dict[str, Any]:
    """Collapse session events into a single tool result.

    - Any ``error`` or ``needs_revision`` event makes the status "error".
    - ``needs_confirmation`` makes it "needs_confirmation".
    - The last ``snapshot`` payload, if any, is merged into the result.
    """
    problems: list[str] = []
    result: dict[str, Any] = {"status": "ok"}
    for e in events:
        if e.type in ("error", "needs_revision"):
            problems.extend(e.payload.get("problems") or [])
        elif e.type == "needs_confirmation":
            result["status"] = "needs_confirmation"
            result["message"] = e.payload.get("message")
        elif e.type == "cleared":
            result["message"] = e.payload.get("message")
        elif e.type == "snapshot":
            result.update(e.payload)
    if problems:
        result["status"] = "error"
        result["problems"] = problems
    return result


def build_agent(model_name: str) -> Agent[TimesheetContext]:
    instructions = (
        "You are a concise assistant that keeps a personal weekly timesheet. "
        "The week runs Monday to Friday; the target is 36 hours, and 30 minutes of lunch is deducted from every day that has both times. "
        "When the user tells you when they started or finished, call set_clock_time with the weekday, the field (clock_in or clock_out) and a 24-hour HH:MM time. "
        "If they give several times in one phrase, you may call record_freeform with their words instead. "
        "Never invent times; if the day or the time is unclear, ask. "
        "After each change, report the weekly summary. If the result contains a suggestion, tell the user the time to leave on that day to complete 36 hours. "
        "If the week is over target, point out the overage. "
        "To delete everything, call clear_week with confirm=false, ask the user to confirm that the data cannot be recovered, and only on an explicit yes call clear_week with confirm=true. "
        "When asked for a table or export, call export_week_csv and return only the CSV content. "
        "Ask one question at a time."
    )

    return Agent[TimesheetContext](
        name="Timesheet Tracker",
        instructions=instructions,
        tools=[
            show_week,
            set_clock_time,
            record_freeform,
            clear_week,
            export_week_csv,
        ],
        model=model_name,
        model_settings=ModelSettings(),
    )


async def main() -> None:
    config = load_from_env()
    configure_logging(config.log_level)

    # Basic check for API key; the SDK also checks env during first call
    if not os.environ.get("OPENAI_API_KEY"):
        print("Warning: OPENAI_API_KEY is not set. Set it in your shell or a .env file.")

    store = ScheduleStore(config.backend(), key=config.storage_key)
    session = TimesheetSession(store)
    started = session.start()
    print(f"Timesheet Tracker ready. {started.payload['summary']}. Ctrl+C to exit.")

    agent = build_agent(config.model)
    await run_demo_loop(agent, stream=True, context=TimesheetContext(session=session))


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
