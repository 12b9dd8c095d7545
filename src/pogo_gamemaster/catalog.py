"""Species catalog parsed from a PvPoke-format gamemaster document.

The gamemaster also carries cups, moves and settings; only the ``pokemon``
list and the ``shadowPokemon`` id list are read here.
"""

from __future__ import annotations

import json
import time
from dataclasses import replace
from typing import IO, Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from . import config
from .errors import DependencyError, ParseError, StreamError
from .models import Species, Stats
from .observability import get_logger, metrics

try:  # Pandas is only needed for DataFrame exports.
    import pandas as pd
except ModuleNotFoundError:  # pragma: no cover - exercised when pandas is absent.
    pd = None

LOGGER = get_logger(__name__)

_STAT_KEYS = (("atk", "attack"), ("def", "defense"), ("hp", "hp"))


class Catalog:
    """In-memory species list indexed by dex number, display name and species id.

    Dex numbers and names are shared by regional forms and other variants. The
    single-value lookups return the last species listed with the key; use
    :meth:`all_by_dex` and :meth:`all_by_name` to see every variant.
    """

    def __init__(self, species: Iterable[Species], shadow_ids: Iterable[str] = ()):
        self._shadow_ids = frozenset(shadow_ids)
        entries: List[Species] = []
        dex_index: Dict[int, Species] = {}
        name_index: Dict[str, Species] = {}
        id_index: Dict[str, Species] = {}
        dex_groups: Dict[int, List[Species]] = {}
        name_groups: Dict[str, List[Species]] = {}
        for entry in species:
            is_shadow = entry.id in self._shadow_ids
            if entry.is_shadow != is_shadow:
                entry = replace(entry, is_shadow=is_shadow)
            entries.append(entry)
            dex_index[entry.dex] = entry
            name_index[entry.name] = entry
            id_index[entry.id] = entry
            dex_groups.setdefault(entry.dex, []).append(entry)
            name_groups.setdefault(entry.name, []).append(entry)
        self._entries = tuple(entries)
        self._dex_index = dex_index
        self._name_index = name_index
        self._id_index = id_index
        self._dex_groups = {key: tuple(group) for key, group in dex_groups.items()}
        self._name_groups = {key: tuple(group) for key, group in name_groups.items()}

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Catalog":
        """Parse gamemaster JSON *raw* into a catalog or raise :class:`ParseError`."""

        started = time.perf_counter()
        try:
            document = _decode(raw)
            shadow_ids = _parse_shadow_ids(document)
            species = [
                _parse_species(position, record)
                for position, record in enumerate(_require_list(document, "pokemon"))
            ]
        except ParseError as exc:
            metrics.increment("pogo_gamemaster_catalog_failures_total")
            LOGGER.warning(
                "catalog_parse_failed",
                extra={"event": "catalog_parse_failed", "reason": exc.message},
            )
            raise

        catalog = cls(species, shadow_ids)
        metrics.increment("pogo_gamemaster_catalog_loads_total")
        metrics.observe("pogo_gamemaster_catalog_build_seconds", time.perf_counter() - started)
        metrics.set_gauge("pogo_gamemaster_catalog_species", float(len(catalog)))
        LOGGER.info(
            "catalog_loaded",
            extra={
                "event": "catalog_loaded",
                "species_count": len(catalog),
                "shadow_count": len(shadow_ids),
            },
        )
        return catalog

    @classmethod
    def load(cls, source: IO[bytes]) -> "Catalog":
        """Read *source* to exhaustion and parse it. The stream is left open."""

        try:
            raw = source.read()
        except OSError as exc:
            raise StreamError(
                f"Error reading gamemaster: {exc}",
                context={"source": getattr(source, "name", repr(source))},
            ) from exc
        return cls.from_bytes(raw)

    def by_dex(self, dex: int) -> Optional[Species]:
        """Return the species for Pokédex number *dex* (e.g. ``150``), or ``None``."""

        return self._dex_index.get(dex)

    def by_name(self, name: str) -> Optional[Species]:
        """Return the species with display name *name* (e.g. ``"Bulbasaur"``), or ``None``."""

        return self._name_index.get(name)

    def by_id(self, species_id: str) -> Optional[Species]:
        """Return the species with id *species_id* (e.g. ``"mewtwo_armored"``), or ``None``."""

        return self._id_index.get(species_id)

    def all_by_dex(self, dex: int) -> Tuple[Species, ...]:
        return self._dex_groups.get(dex, ())

    def all_by_name(self, name: str) -> Tuple[Species, ...]:
        return self._name_groups.get(name, ())

    @property
    def shadow_ids(self) -> frozenset[str]:
        return self._shadow_ids

    def to_frame(self) -> "pd.DataFrame":
        """Return the species list as a pandas DataFrame in source order."""

        if pd is None:
            raise DependencyError(
                "pandas is required for DataFrame exports.",
                remediation="Install the optional extra: pip install 'pogo-gamemaster[pandas]'.",
            )
        rows = [
            {
                "id": entry.id,
                "dex": entry.dex,
                "name": entry.name,
                "attack": entry.base_stats.attack,
                "defense": entry.base_stats.defense,
                "hp": entry.base_stats.hp,
                "is_shadow": entry.is_shadow,
            }
            for entry in self._entries
        ]
        columns = ["id", "dex", "name", "attack", "defense", "hp", "is_shadow"]
        return pd.DataFrame(rows, columns=columns)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Species]:
        yield from self._entries

    def __contains__(self, species_id: object) -> bool:
        return species_id in self._id_index


def load_default_catalog() -> Catalog:
    """Load the gamemaster named by ``POGO_GAMEMASTER_FILE``."""

    path = config.gamemaster_path()
    if path is None:
        raise StreamError(
            f"{config.GAMEMASTER_FILE_ENV} is not set.",
            remediation=f"Download {config.GAMEMASTER_URL} and point {config.GAMEMASTER_FILE_ENV} at it.",
        )
    try:
        with path.open("rb") as stream:
            return Catalog.load(stream)
    except OSError as exc:
        raise StreamError(
            f"Error opening gamemaster: {exc}",
            context={"path": str(path)},
        ) from exc


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def _decode(raw: bytes) -> Mapping[str, Any]:
    try:
        document = json.loads(raw, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, TypeError, RecursionError) as exc:
        raise ParseError(
            f"Error unmarshalling gamemaster: {exc}",
            remediation="Provide the gamemaster as UTF-8 encoded JSON.",
            context={"payload": raw if isinstance(raw, (bytes, bytearray)) else repr(raw)},
        ) from exc
    if not isinstance(document, dict):
        raise ParseError(
            "Gamemaster document must be a JSON object.",
            context={"type": type(document).__name__},
        )
    return document


def _require_list(document: Mapping[str, Any], key: str) -> List[Any]:
    value = document.get(key)
    if not isinstance(value, list):
        raise ParseError(
            f"Gamemaster field '{key}' must be a list.",
            context={"field": key, "type": type(value).__name__},
        )
    return value


def _parse_shadow_ids(document: Mapping[str, Any]) -> frozenset[str]:
    if document.get("shadowPokemon") is None:
        return frozenset()
    ids = _require_list(document, "shadowPokemon")
    if not all(isinstance(item, str) for item in ids):
        raise ParseError("Gamemaster field 'shadowPokemon' must only contain strings.")
    return frozenset(ids)


def _string_list(record: Mapping[str, Any], key: str, position: int) -> Tuple[str, ...]:
    value = record.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ParseError(
            f"Species field '{key}' must be a list of strings.",
            context={"position": position, "field": key},
        )
    return tuple(value)


def _parse_species(position: int, record: Any) -> Species:
    if not isinstance(record, dict):
        raise ParseError(
            "Species entries must be JSON objects.",
            context={"position": position, "type": type(record).__name__},
        )
    species_id = record.get("speciesId")
    name = record.get("speciesName")
    dex = record.get("dex")
    if not isinstance(species_id, str):
        raise ParseError("Species field 'speciesId' must be a string.", context={"position": position})
    if not isinstance(name, str):
        raise ParseError(
            "Species field 'speciesName' must be a string.",
            context={"position": position, "species_id": species_id},
        )
    if isinstance(dex, bool) or not isinstance(dex, int):
        raise ParseError(
            "Species field 'dex' must be an integer.",
            context={"position": position, "species_id": species_id},
        )

    base = record.get("baseStats")
    if not isinstance(base, dict):
        raise ParseError(
            "Species field 'baseStats' must be an object.",
            context={"position": position, "species_id": species_id},
        )
    values: Dict[str, float] = {}
    for source_key, attribute in _STAT_KEYS:
        value = base.get(source_key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ParseError(
                f"Base stat '{source_key}' must be numeric.",
                context={"position": position, "species_id": species_id},
            )
        values[attribute] = float(value)

    return Species(
        id=species_id,
        dex=dex,
        name=name,
        base_stats=Stats(**values),
        fast_moves=_string_list(record, "fastMoves", position),
        charge_moves=_string_list(record, "chargedMoves", position),
    )


__all__ = ["Catalog", "load_default_catalog"]
