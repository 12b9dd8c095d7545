"""Save and load individual creatures as YAML.

YAML rather than JSON because saved creatures are meant to be read and
hand-edited. Loading never recalculates: edited IVs or levels leave a stale
``cp`` until :func:`pogo_gamemaster.calculations.calculate` is called again.
"""

from __future__ import annotations

from typing import IO, Any, Dict, Mapping

import yaml

from .errors import ParseError, StreamError
from .models import Creature, Moves, Stats
from .observability import get_logger

LOGGER = get_logger(__name__)

# Keys written by older tooling that lower-cased every field name.
_LEGACY_KEYS = {"basestats": "baseStats", "calculatedstats": "calculatedStats"}


def _stats_to_dict(stats: Stats) -> Dict[str, float]:
    return {"attack": stats.attack, "defense": stats.defense, "hp": stats.hp}


def to_document(creature: Creature) -> Dict[str, Any]:
    """Return the persisted mapping for *creature*, in field order."""

    return {
        "id": creature.id,
        "dex": creature.dex,
        "name": creature.name,
        "baseStats": _stats_to_dict(creature.base_stats),
        "ivs": _stats_to_dict(creature.ivs),
        "calculatedStats": _stats_to_dict(creature.calculated_stats),
        "level": creature.level,
        "cp": creature.cp,
        "moves": {
            "fast": creature.moves.fast,
            "charge": list(creature.moves.charge),
        },
    }


def dumps(creature: Creature) -> bytes:
    """Serialise *creature* to UTF-8 YAML bytes."""

    text = yaml.safe_dump(
        to_document(creature),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    return text.encode("utf-8")


def _number(value: Any, field: str, *, integral: bool = False) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"Creature field '{field}' must be numeric.", context={"field": field})
    if integral:
        if isinstance(value, float) and not value.is_integer():
            raise ParseError(f"Creature field '{field}' must be an integer.", context={"field": field})
        return int(value)
    return float(value)


def _string(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(f"Creature field '{field}' must be a string.", context={"field": field})
    return value


def _stats_from_dict(value: Any, field: str) -> Stats:
    if value is None:
        return Stats()
    if not isinstance(value, Mapping):
        raise ParseError(f"Creature field '{field}' must be a mapping.", context={"field": field})
    return Stats(
        attack=_number(value.get("attack", 0.0), f"{field}.attack"),
        defense=_number(value.get("defense", 0.0), f"{field}.defense"),
        hp=_number(value.get("hp", 0.0), f"{field}.hp"),
    )


def _moves_from_dict(value: Any) -> Moves:
    if value is None:
        return Moves()
    if not isinstance(value, Mapping):
        raise ParseError("Creature field 'moves' must be a mapping.", context={"field": "moves"})
    charge = value.get("charge")
    if charge is None:
        charge = []
    if not isinstance(charge, list) or len(charge) > 2:
        raise ParseError(
            "Creature field 'moves.charge' must be a list of at most two moves.",
            context={"field": "moves.charge"},
        )
    slots = [_string(item, "moves.charge") for item in charge]
    slots.extend([""] * (2 - len(slots)))
    return Moves(fast=_string(value.get("fast"), "moves.fast"), charge=(slots[0], slots[1]))


def from_document(document: Any) -> Creature:
    """Build a :class:`Creature` from a persisted mapping without recalculating."""

    if not isinstance(document, Mapping):
        raise ParseError("Creature document must be a mapping.", context={"type": type(document).__name__})
    fields = {_LEGACY_KEYS.get(key, key): value for key, value in document.items()}
    return Creature(
        id=_string(fields.get("id"), "id"),
        dex=_number(fields.get("dex", 0), "dex", integral=True),
        name=_string(fields.get("name"), "name"),
        base_stats=_stats_from_dict(fields.get("baseStats"), "baseStats"),
        ivs=_stats_from_dict(fields.get("ivs"), "ivs"),
        calculated_stats=_stats_from_dict(fields.get("calculatedStats"), "calculatedStats"),
        level=_number(fields.get("level", 1.0), "level"),
        cp=_number(fields.get("cp", 10), "cp", integral=True),
        moves=_moves_from_dict(fields.get("moves")),
    )


def loads(raw: bytes | str) -> Creature:
    """Parse YAML *raw* into a :class:`Creature` or raise :class:`ParseError`."""

    try:
        document = yaml.safe_load(raw)
    except (yaml.YAMLError, RecursionError) as exc:
        raise ParseError(
            f"Error unmarshalling creature: {exc}",
            remediation="Check the saved creature is valid YAML.",
        ) from exc
    return from_document(document)


def save(creature: Creature, sink: IO[bytes]) -> None:
    """Write *creature* as YAML to *sink*. The stream is left open."""

    body = dumps(creature)
    try:
        sink.write(body)
    except OSError as exc:
        raise StreamError(
            f"Error writing creature: {exc}",
            context={"species_id": creature.id},
        ) from exc
    LOGGER.debug("creature_saved", extra={"event": "creature_saved", "species_id": creature.id})


def load(source: IO[bytes]) -> Creature:
    """Read *source* to exhaustion and parse a creature from it."""

    try:
        raw = source.read()
    except OSError as exc:
        raise StreamError(
            f"Error reading creature: {exc}",
            context={"source": getattr(source, "name", repr(source))},
        ) from exc
    return loads(raw)


__all__ = ["to_document", "from_document", "dumps", "loads", "save", "load"]
