from __future__ import annotations

import random

import pytest

from app.core.errors import CharacterAlreadyDead, CharacterNotFound, CharacterUpdateFailed, SameCombatant
from app.modules.battle.engine import BattleEngine
from app.modules.battle.service import BattleService
from app.modules.characters.service import CharacterService
from app.modules.characters.store import CharacterStore
from app.modules.jobs.stats import Job


@pytest.fixture
def pair(characters: CharacterService):
    w = characters.create_character("WarriorTest", Job.WARRIOR)
    m = characters.create_character("MageTest", Job.MAGE)
    return w["id"], m["id"]


def _battles(store: CharacterStore, seed: int = 7) -> BattleService:
    return BattleService(store, BattleEngine(rng=random.Random(seed)))


def test_battle_persists_final_health(store, characters, pair) -> None:
    id1, id2 = pair
    out = _battles(store).start_battle(id1, id2)

    after = [characters.get_character(i)["current_health"] for i in pair]
    assert sorted(after)[0] == 0
    assert sorted(after)[1] > 0
    assert out["winner"]["health"] == max(after)
    assert out["loser"]["health"] == 0
    assert out["winner"]["id"] in pair
    assert out["log"].endswith(f"still has {out['winner']['health']:.2f} HP remaining!")
    assert len(out["rounds"]) >= 1


def test_battle_keeps_other_attributes(store, characters, pair) -> None:
    id1, _ = pair
    before = characters.get_character(id1)
    _battles(store).start_battle(*pair)
    after = characters.get_character(id1)
    assert after["max_health"] == before["max_health"]
    assert after["stats"] == before["stats"]
    assert after["battle_modifiers"] == before["battle_modifiers"]


@pytest.mark.parametrize("first", [True, False])
def test_unknown_character(store, characters, pair, first: bool) -> None:
    id1, id2 = pair
    args = (9999, id2) if first else (id1, 9999)
    with pytest.raises(CharacterNotFound) as exc:
        _battles(store).start_battle(*args)
    assert exc.value.message == "Character with ID 9999 not found"
    assert characters.get_character(id1)["current_health"] == 20
    assert characters.get_character(id2)["current_health"] == 12


def test_dead_character_cannot_battle(store, characters, pair) -> None:
    id1, id2 = pair
    dead = characters.create_character("Fallen", Job.THIEF, {"health": 0})
    with pytest.raises(CharacterAlreadyDead) as exc:
        _battles(store).start_battle(id1, dead["id"])
    assert exc.value.message == "Fallen is already dead and cannot battle"
    assert characters.get_character(id1)["current_health"] == 20


def test_loser_cannot_battle_again(store, pair) -> None:
    out = _battles(store).start_battle(*pair)
    with pytest.raises(CharacterAlreadyDead):
        _battles(store).start_battle(*pair)
    assert out["loser"]["name"] in ("WarriorTest", "MageTest")


def test_same_combatant(store, pair) -> None:
    with pytest.raises(SameCombatant):
        _battles(store).start_battle(pair[0], pair[0])


class _ReadOnlyStore(CharacterStore):
    def update(self, character_id, attributes):
        return False


def test_update_failure_is_reported(store, pair) -> None:
    broken = _ReadOnlyStore(store.engine)
    with pytest.raises(CharacterUpdateFailed):
        _battles(broken).start_battle(*pair)
