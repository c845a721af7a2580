"""Play a stream of tick payloads through the viewer."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.live import Live

from harvester.db.replay_log import RUN_LOG_NAME
from harvester.render.replay_reader import read_tick_payloads
from harvester.render.viewer import render_tick
from harvester.sim.contracts import TickPayload


def play_payloads(
    payloads: Iterable[TickPayload],
    *,
    console: Console | None = None,
    tick_delay: float = 0.2,
) -> list[TickPayload]:
    console = console or Console()
    seen: list[TickPayload] = []
    with Live(console=console, auto_refresh=False) as live:
        for payload in payloads:
            seen.append(payload)
            live.update(render_tick(payload), refresh=True)
            if tick_delay > 0:
                time.sleep(tick_delay)
    return seen


def play_run_folder(
    run_folder: Path, *, console: Console | None = None, tick_delay: float = 0.2
) -> list[TickPayload]:
    return play_payloads(
        read_tick_payloads(run_folder / RUN_LOG_NAME),
        console=console,
        tick_delay=tick_delay,
    )
