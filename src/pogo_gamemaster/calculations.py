"""Core stat and CP calculations."""
from __future__ import annotations

from math import floor, sqrt
from typing import Tuple

from .cpm_table import CPM, level_index
from .models import Creature, Stats
from .observability import get_logger, metrics

LOGGER = get_logger(__name__)

MIN_CP = 10


def effective_stats(base_stats: Stats, ivs: Stats, level: float) -> Stats:
    """Return the unrounded ``(base + iv) * CPM`` stats at *level*."""

    multiplier = CPM[level_index(level)]
    return Stats(
        attack=(base_stats.attack + ivs.attack) * multiplier,
        defense=(base_stats.defense + ivs.defense) * multiplier,
        hp=(base_stats.hp + ivs.hp) * multiplier,
    )


def combat_values(base_stats: Stats, ivs: Stats, level: float) -> Tuple[int, Stats]:
    """Return ``(cp, calculated_stats)`` for the given inputs.

    CP uses the unrounded stamina, while the calculated stats carry it rounded
    down the way the game displays HP. Attack and defense are left unrounded.
    """

    stats = effective_stats(base_stats, ivs, level)
    cp = floor(sqrt(stats.hp) * stats.attack * sqrt(stats.defense) / 10)
    calculated = Stats(
        attack=stats.attack,
        defense=stats.defense,
        hp=float(floor(stats.hp)),
    )
    return max(MIN_CP, int(cp)), calculated


def calculate(creature: Creature) -> Creature:
    """Populate ``creature.cp`` and ``creature.calculated_stats`` and return it."""

    cp, calculated = combat_values(creature.base_stats, creature.ivs, creature.level)
    creature.cp = cp
    creature.calculated_stats = calculated
    metrics.increment("pogo_gamemaster_calculations_total")
    LOGGER.debug(
        "creature_calculated",
        extra={
            "event": "creature_calculated",
            "species_id": creature.id,
            "level": creature.level,
            "cp": cp,
        },
    )
    return creature


def stat_product(stats: Stats) -> float:
    """Return ``attack * defense * hp`` for a set of calculated stats."""

    return stats.attack * stats.defense * stats.hp


__all__ = ["MIN_CP", "effective_stats", "combat_values", "calculate", "stat_product"]
