"""Application entry for running the simulation loop."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from harvester.db.memory_log import MEMORY_FILE_NAME, save_memory_snapshot
from harvester.db.replay_log import (
    append_tick_payload,
    create_run_folder,
    write_header,
)
from harvester.render.replay_player import play_payloads
from harvester.sim.config import DEFAULT_SEED, PolicyConfig, PopulationConfig
from harvester.sim.contracts import TickPayload
from harvester.sim.memory import MemoryStore
from harvester.sim.resolver import make_rng
from harvester.sim.tick_loop import run_ticks
from harvester.sim.world_loader import load_world

logger = logging.getLogger(__name__)

DEFAULT_TICKS = 300
DEFAULT_LOG_LEVEL = "INFO"


def resolve_seed(seed: int | None) -> int:
    if seed is not None:
        return seed
    raw = os.getenv("HARVESTER_SEED")
    if raw is None:
        return DEFAULT_SEED
    try:
        return int(raw, 0)
    except ValueError as exc:
        raise ValueError(f"HARVESTER_SEED must be an integer, got {raw!r}") from exc


def resolve_world_path(world_path: Path | None) -> Path | None:
    if world_path is not None:
        return world_path
    raw = os.getenv("HARVESTER_WORLD")
    return Path(raw) if raw else None


def resolve_log_level(level: str | None) -> str:
    return (level or os.getenv("HARVESTER_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()


def run_simulation(
    base_dir: Path,
    *,
    ticks: int | None = DEFAULT_TICKS,
    seed: int | None = None,
    world_path: Path | None = None,
    policy: PolicyConfig | None = None,
    population: PopulationConfig | None = None,
    live: bool = False,
    tick_delay: float = 0.2,
) -> tuple[Path, list[TickPayload]]:
    run_dir, log_path = create_run_folder(base_dir)
    resolved_seed = resolve_seed(seed)
    resolved_world = resolve_world_path(world_path)
    write_header(
        log_path,
        metadata={
            "run_id": run_dir.name,
            "created_at": run_dir.name,
            "ticks": ticks,
            "seed": resolved_seed,
            "world": str(resolved_world) if resolved_world else "default",
        },
    )
    world = load_world(resolved_world)
    store = MemoryStore()
    logger.info("run %s starting with seed %#x", run_dir.name, resolved_seed)

    def _payloads():
        for payload in run_ticks(
            world,
            ticks=ticks,
            store=store,
            rng=make_rng(resolved_seed),
            policy=policy or PolicyConfig(),
            population=population or PopulationConfig(),
        ):
            append_tick_payload(log_path, payload)
            yield payload

    if live:
        payloads = play_payloads(_payloads(), tick_delay=tick_delay)
    else:
        payloads = list(_payloads())
    save_memory_snapshot(run_dir / MEMORY_FILE_NAME, store)
    logger.info("run %s finished after %s ticks", run_dir.name, len(payloads))
    return run_dir, payloads
