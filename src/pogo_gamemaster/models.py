"""Species reference records and individual creature instances."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Stats:
    """Attack, defense, and stamina (HP).

    Used for a species' base stats, which every creature of that species
    shares, for a creature's individual values (IVs), and for its calculated
    stats.
    """

    attack: float = 0.0
    defense: float = 0.0
    hp: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        """Return ``(attack, defense, hp)`` for convenience."""

        return self.attack, self.defense, self.hp


@dataclass(frozen=True)
class Moves:
    """One fast move and up to two charge moves; empty slots are ``""``."""

    fast: str = ""
    charge: Tuple[str, str] = ("", "")


@dataclass(frozen=True)
class Species:
    """A gamemaster species entry, read-only once the catalog is built."""

    id: str
    dex: int
    name: str
    base_stats: Stats
    is_shadow: bool = False
    fast_moves: Tuple[str, ...] = ()
    charge_moves: Tuple[str, ...] = ()


@dataclass
class Creature:
    """A concrete creature with IVs, level and moves.

    ``calculated_stats`` and ``cp`` are derived from ``base_stats``, ``ivs``
    and ``level`` by :meth:`calculate`. A creature loaded from storage keeps
    the stored values until it is recalculated.
    """

    id: str
    dex: int
    name: str
    base_stats: Stats
    ivs: Stats = field(default_factory=Stats)
    calculated_stats: Stats = field(default_factory=Stats)
    level: float = 1.0
    cp: int = 10
    moves: Moves = field(default_factory=Moves)

    @classmethod
    def from_species(
        cls,
        species: Species,
        ivs: Stats | Tuple[float, float, float] = (0.0, 0.0, 0.0),
        level: float = 1.0,
        moves: Moves | None = None,
    ) -> "Creature":
        """Create an uncalculated creature carrying *species*' identity and base stats."""

        if not isinstance(ivs, Stats):
            ivs = Stats(*(float(value) for value in ivs))
        return cls(
            id=species.id,
            dex=species.dex,
            name=species.name,
            base_stats=species.base_stats,
            ivs=ivs,
            level=level,
            moves=moves if moves is not None else Moves(),
        )

    def calculate(self) -> "Creature":
        """Recompute ``cp`` and ``calculated_stats`` in place and return ``self``."""

        from .calculations import calculate

        return calculate(self)


__all__ = ["Stats", "Moves", "Species", "Creature"]
