"""Command line interface for inspecting process instance traces."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from flowtrace import DiagramSession, TraceAnalysis, get_history_source, load_config
from flowtrace.config import FlowtraceConfig
from flowtrace.errors import FlowtraceError
from flowtrace.graph import parse_bpmn
from flowtrace.heatmap import activity_counts, activity_heatmap
from flowtrace.sources import HistorySource, unwrap_list_envelope
from flowtrace.timeline import build_timeline
from flowtrace.trace import normalize_activities, normalize_task_history

app = typer.Typer(help="CLI for flowtrace process history inspection")


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, help="Path to a flowtrace YAML config file"
    ),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """flowtrace CLI entry point."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)
    ctx.obj = load_config(str(config) if config else None)


def _source(ctx: typer.Context) -> HistorySource:
    config: FlowtraceConfig = ctx.obj or load_config()
    return get_history_source(config=config)


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("plan")
def plan_command(
    ctx: typer.Context,
    instance_id: str,
    cursor: Optional[int] = typer.Option(
        None, help="Number of history records to reveal (default: all)"
    ),
) -> None:
    """
    Print the annotation plan of a process instance as JSON.

    Fetches activity and task history from the engine, reconciles them with
    the process diagram and prints node states, flow states, step badges and
    labels.

    Example:
        flowtrace plan 5f1c-instance
        flowtrace plan 5f1c-instance --cursor 4
    """
    session = DiagramSession(_source(ctx), instance_id)

    async def _run() -> None:
        async with session.source:
            await session.refresh()

    try:
        asyncio.run(_run())
    except FlowtraceError as exc:
        _fail(f"Failed to build plan for {instance_id}: {exc}")

    plan = session.set_cursor(cursor)
    typer.echo(plan.model_dump_json(indent=2))


@app.command("replay")
def replay_command(
    activities: Path,
    history: Path,
    diagram: Optional[Path] = typer.Option(None, help="BPMN XML of the process"),
    cursor: Optional[int] = typer.Option(None, help="Number of records to reveal"),
) -> None:
    """
    Plan annotations from exported history payloads, without an engine.

    Example:
        flowtrace replay activities.json history.json --diagram order.bpmn --cursor 3
    """
    try:
        raw_activities = unwrap_list_envelope(json.loads(activities.read_text()))
        raw_history = unwrap_list_envelope(json.loads(history.read_text()))
        graph = parse_bpmn(diagram.read_text()) if diagram else None
        analysis = TraceAnalysis.build(raw_activities, raw_history, graph)
    except (OSError, json.JSONDecodeError, FlowtraceError) as exc:
        _fail(f"Failed to replay history: {exc}")

    typer.echo(analysis.plan(cursor).model_dump_json(indent=2))


@app.command("timeline")
def timeline_command(ctx: typer.Context, instance_id: str) -> None:
    """
    Show the business history of a process instance, open steps first.

    Example:
        flowtrace timeline 5f1c-instance
        # Output: TASK    Approve Request    ACTIVE
        #         START   Submit Order       COMPLETED  2m  by alice
    """
    source = _source(ctx)

    async def _run():
        async with source:
            return await source.fetch_task_history(instance_id)

    try:
        records = normalize_task_history(asyncio.run(_run()))
    except FlowtraceError as exc:
        _fail(f"Failed to load history for {instance_id}: {exc}")

    entries = build_timeline(records)
    if not entries:
        typer.echo("No events recorded")
        return
    for entry in entries:
        status = "COMPLETED" if entry.completed else "ACTIVE"
        line = f"{entry.kind.value}\t{entry.label}\t{status}"
        if entry.duration:
            line += f"\t{entry.duration}"
        if entry.record.completed_by:
            line += f"\tby {entry.record.completed_by}"
        typer.echo(line)


@app.command("heatmap")
def heatmap_command(ctx: typer.Context, definition_id: str) -> None:
    """
    Show how often each activity of a process definition ran.

    Example:
        flowtrace heatmap order-process:3:42
    """
    source = _source(ctx)

    async def _run():
        async with source:
            return await source.fetch_definition_activities(definition_id)

    try:
        records = normalize_activities(asyncio.run(_run()))
    except FlowtraceError as exc:
        _fail(f"Failed to load activities for {definition_id}: {exc}")

    if not records:
        typer.echo("No activity recorded")
        return
    counts = activity_counts(records)
    levels = activity_heatmap(records)
    for activity_id, count in sorted(counts.items(), key=lambda item: -item[1]):
        level = levels.get(activity_id)
        typer.echo(f"{activity_id}\t{count}\t{level.value if level else '-'}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
