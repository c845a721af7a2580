"""Rich viewer rendering for TickPayload."""

from __future__ import annotations

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from harvester.sim.contracts import TickPayload
from harvester.sim.goals import describe_goal

GOAL_STYLES = {
    "upgrade": "bright_magenta",
    "harvest": "yellow",
    "deposit": "green3",
    "build": "bright_cyan",
}


def render_tick(payload: TickPayload, *, max_events: int = 8) -> RenderableType:
    header = Text(f"Tick {payload.tick}", style="bold")
    agents = _render_agents(payload)
    rooms = _render_rooms(payload)
    events = _render_events(payload, max_events=max_events)
    left = Group(header, agents)
    right = Group(rooms, events)
    return Columns([Panel(left, title="Agents"), Panel(right, title="Colony")])


def render_summary(payloads: list[TickPayload]) -> RenderableType:
    table = Table(title="Run Summary", show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    if not payloads:
        table.add_row("Ticks", "0")
        return table
    last = payloads[-1]
    counts: dict[str, int] = {}
    for payload in payloads:
        for event in payload.events or []:
            counts[event.kind.value] = counts.get(event.kind.value, 0) + 1
    table.add_row("Ticks", f"{payloads[0].tick}..{last.tick}")
    table.add_row("Agents alive", str(len(last.agents)))
    for room in last.rooms:
        table.add_row(
            f"{room.room_id} energy",
            f"{room.energy_available}/{room.energy_capacity}",
        )
        table.add_row(f"{room.room_id} controller", str(room.controller_progress))
    for kind in sorted(counts):
        table.add_row(kind, str(counts[kind]))
    return table


def _render_agents(payload: TickPayload) -> RenderableType:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Agent")
    table.add_column("Pos")
    table.add_column("Energy")
    table.add_column("Goal")

    for agent in payload.agents:
        if agent.spawning:
            goal = Text("spawning", style="grey50")
        else:
            kind = agent.goal.kind if agent.goal else "idle"
            goal = Text(describe_goal(agent.goal), style=GOAL_STYLES.get(kind, ""))
        table.add_row(
            agent.name,
            f"{agent.position[0]},{agent.position[1]}",
            f"{agent.energy}/{agent.capacity}",
            goal,
        )
    if not payload.agents:
        table.add_row("-", "-", "-", "None")
    return table


def _render_rooms(payload: TickPayload) -> RenderableType:
    table = Table(title="Rooms", show_header=True, header_style="bold")
    table.add_column("Room")
    table.add_column("Energy")
    table.add_column("Sites")
    table.add_column("Controller")
    for room in payload.rooms:
        table.add_row(
            room.room_id,
            f"{room.energy_available}/{room.energy_capacity}",
            str(room.construction_sites),
            str(room.controller_progress),
        )
    return table


def _render_events(payload: TickPayload, *, max_events: int) -> RenderableType:
    table = Table(title="Recent Events", show_header=True, header_style="bold")
    table.add_column("Kind")
    table.add_column("Detail")

    events = payload.events or []
    for event in events[-max_events:]:
        table.add_row(event.kind.value, _format_payload(event.payload))
    if not events:
        table.add_row("-", "None")
    return table


def _format_payload(payload: dict) -> str:
    return ", ".join(f"{key}={value}" for key, value in payload.items())
