"""Pokémon GO gamemaster catalog and CP calculations."""

from . import calculations, catalog, config, cpm_table, errors, models, observability, persistence
from .calculations import calculate, combat_values, stat_product
from .catalog import Catalog, load_default_catalog
from .cpm_table import CPM, get_cpm, level_index
from .errors import InvalidLevelError, ParseError, PogoGamemasterError, StreamError
from .models import Creature, Moves, Species, Stats

__all__ = [
    "calculations",
    "catalog",
    "config",
    "cpm_table",
    "errors",
    "models",
    "observability",
    "persistence",
    "Catalog",
    "load_default_catalog",
    "Creature",
    "Moves",
    "Species",
    "Stats",
    "CPM",
    "get_cpm",
    "level_index",
    "calculate",
    "combat_values",
    "stat_product",
    "PogoGamemasterError",
    "ParseError",
    "InvalidLevelError",
    "StreamError",
]
