"""YAML persistence of individual creatures."""

from __future__ import annotations

import io

import pytest
import yaml

from pogo_gamemaster import persistence
from pogo_gamemaster.calculations import calculate
from pogo_gamemaster.errors import ParseError, StreamError
from pogo_gamemaster.models import Creature, Moves, Stats

WIGGLYTUFF_YAML = """\
id: wigglytuff
dex: 40
name: Wigglytuff
baseStats:
  attack: 156.0
  defense: 90.0
  hp: 295.0
ivs:
  attack: 10.0
  defense: 15.0
  hp: 12.0
calculatedStats:
  attack: 117.3427772
  defense: 74.222841
  hp: 217.0
level: 28.0
cp: 1489
moves:
  fast: CHARM
  charge:
  - ICE_BEAM
  - PLAY_ROUGH
"""

LEGACY_YAML = """\
id: wigglytuff
dex: 40
name: Wigglytuff
basestats:
    attack: 156
    defense: 90
    hp: 295
ivs:
    attack: 10
    defense: 15
    hp: 12
calculatedstats:
    attack: 117.3427772
    defense: 74.222841
    hp: 217
level: 28
cp: 1489
moves:
    fast: CHARM
    charge:
      - ICE_BEAM
      - PLAY_ROUGH
"""


@pytest.fixture()
def wigglytuff() -> Creature:
    return Creature(
        id="wigglytuff",
        dex=40,
        name="Wigglytuff",
        base_stats=Stats(156.0, 90.0, 295.0),
        ivs=Stats(10.0, 15.0, 12.0),
        calculated_stats=Stats(117.3427772, 74.222841, 217.0),
        level=28.0,
        cp=1489,
        moves=Moves(fast="CHARM", charge=("ICE_BEAM", "PLAY_ROUGH")),
    )


def test_dumps_matches_persisted_layout(wigglytuff: Creature) -> None:
    assert persistence.dumps(wigglytuff).decode("utf-8") == WIGGLYTUFF_YAML


def test_loads_happy_path(wigglytuff: Creature) -> None:
    assert persistence.loads(WIGGLYTUFF_YAML.encode("utf-8")) == wigglytuff


def test_loads_accepts_lowercase_legacy_keys(wigglytuff: Creature) -> None:
    assert persistence.loads(LEGACY_YAML) == wigglytuff


def test_round_trip_after_calculate() -> None:
    creature = Creature(
        id="shedinja",
        dex=292,
        name="Shedinja",
        base_stats=Stats(153.0, 73.0, 1.0),
        ivs=Stats(1.0, 14.0, 15.0),
        level=33.5,
        moves=Moves(fast="BITE"),
    )
    calculate(creature)
    restored = persistence.loads(persistence.dumps(creature))
    assert restored == creature
    assert restored.calculated_stats.attack == creature.calculated_stats.attack


def test_empty_charge_slots_are_written_as_empty_strings() -> None:
    creature = Creature(id="ditto", dex=132, name="Ditto", base_stats=Stats(91.0, 91.0, 134.0))
    document = yaml.safe_load(persistence.dumps(creature))
    assert document["moves"] == {"fast": "", "charge": ["", ""]}
    assert persistence.loads(persistence.dumps(creature)).moves == Moves()


def test_loads_does_not_recalculate(wigglytuff: Creature) -> None:
    edited = WIGGLYTUFF_YAML.replace("level: 28.0", "level: 40.0")
    creature = persistence.loads(edited)
    assert creature.level == 40.0
    assert creature.cp == 1489
    assert calculate(creature).cp != 1489


def test_loads_pads_short_charge_list() -> None:
    creature = persistence.loads(WIGGLYTUFF_YAML.replace("  - PLAY_ROUGH\n", ""))
    assert creature.moves.charge == ("ICE_BEAM", "")


@pytest.mark.parametrize(
    "raw",
    [
        "!@#$%^&*()",
        "id: [unterminated",
        "- just\n- a list\n",
        "",
        WIGGLYTUFF_YAML.replace("dex: 40", "dex: forty"),
        WIGGLYTUFF_YAML.replace("cp: 1489", "cp: 1489.5"),
        WIGGLYTUFF_YAML.replace("  hp: 295.0", "  hp: lots"),
        WIGGLYTUFF_YAML.replace("  - PLAY_ROUGH\n", "  - PLAY_ROUGH\n  - HYPER_BEAM\n"),
        WIGGLYTUFF_YAML.replace("fast: CHARM", "fast: [CHARM]"),
        WIGGLYTUFF_YAML.replace("  charge:\n  - ICE_BEAM\n  - PLAY_ROUGH\n", "  charge: ''\n"),
        WIGGLYTUFF_YAML.replace("  charge:\n  - ICE_BEAM\n  - PLAY_ROUGH\n", "  charge: 0\n"),
        WIGGLYTUFF_YAML.replace("  charge:\n  - ICE_BEAM\n  - PLAY_ROUGH\n", "  charge: {}\n"),
        "[" * 100000,
    ],
)
def test_loads_rejects_bad_documents(raw: str) -> None:
    with pytest.raises(ParseError):
        persistence.loads(raw)


def test_save_and_load_streams(wigglytuff: Creature) -> None:
    sink = io.BytesIO()
    persistence.save(wigglytuff, sink)
    assert sink.getvalue() == WIGGLYTUFF_YAML.encode("utf-8")
    sink.seek(0)
    assert persistence.load(sink) == wigglytuff
    assert not sink.closed


class _BrokenStream(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError("sorry, something's gone wrong")

    def write(self, data) -> int:
        raise OSError("sorry, something's gone wrong")


def test_save_wraps_write_errors(wigglytuff: Creature) -> None:
    with pytest.raises(StreamError) as excinfo:
        persistence.save(wigglytuff, _BrokenStream())
    assert excinfo.value.context == {"species_id": "wigglytuff"}


def test_load_wraps_read_errors() -> None:
    with pytest.raises(StreamError):
        persistence.load(_BrokenStream())


def test_missing_charge_list_loads_as_empty_slots() -> None:
    creature = persistence.loads(WIGGLYTUFF_YAML.replace("  charge:\n  - ICE_BEAM\n  - PLAY_ROUGH\n", ""))
    assert creature.moves == Moves(fast="CHARM")


def test_deeply_nested_document_is_chained_parse_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        persistence.loads(b"[" * 100000)
    assert isinstance(excinfo.value.__cause__, RecursionError)
