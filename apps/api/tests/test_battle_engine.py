from __future__ import annotations

import random

import pytest

from app.core.errors import BattleCannotConclude, CharacterAlreadyDead
from app.modules.battle.engine import BattleEngine
from app.modules.characters.entity import Character
from app.modules.jobs.stats import Job, Modifier


def _warrior() -> Character:
    return Character(name="Conan", job=Job.WARRIOR, id=1)


def _mage() -> Character:
    return Character(name="Merlin", job=Job.MAGE, id=2)


def test_scripted_battle_log(scripted_rng) -> None:
    # tie, redraw, warrior hits + mage counters, mage hits + warrior finishes
    rng = scripted_rng([0.0, 0.0, 0.5, 0.5, 0.99, 0.5, 0.1, 0.9, 0.1, 0.99])
    a, b = _warrior(), _mage()

    result = BattleEngine(rng=rng).resolve(a, b)

    assert result.lines == [
        "Battle between Conan (Warrior) - 20.00 HP and Merlin (Mage) - 12.00 HP begins!",
        "",
        "Conan 2.00 speed was faster than Merlin 1.45 speed and will attack first.",
        "Conan attacks Merlin for 8.91. Merlin has 3.09 HP remaining.",
        "Merlin attacks Conan for 7.10. Conan has 12.90 HP remaining.",
        "",
        "Merlin 2.61 speed was faster than Conan 0.40 speed and will attack first.",
        "Merlin attacks Conan for 1.42. Conan has 11.48 HP remaining.",
        "Conan attacks Merlin for 8.91. Merlin has 0.00 HP remaining.",
        "Conan wins the battle! Conan still has 11.48 HP remaining!",
    ]
    assert result.log == "\n".join(result.lines)
    assert result.winner is a
    assert result.loser is b
    assert b.attributes.health == 0
    assert a.attributes.health == pytest.approx(11.48)
    assert rng.values == []

    assert len(result.rounds) == 2
    first, second = result.rounds
    assert (first.attacker_id, first.defender_id) == (1, 2)
    assert first.counter is not None
    assert (second.attacker_id, second.defender_id) == (2, 1)


def test_no_counter_when_defender_dies(scripted_rng) -> None:
    a, b = _warrior(), _mage()
    b.attributes.health = 1
    rng = scripted_rng([0.9, 0.1, 0.5])

    result = BattleEngine(rng=rng).resolve(a, b)

    assert len(result.rounds) == 1
    assert result.rounds[0].counter is None
    assert "Merlin attacks" not in result.log
    assert result.lines[-1] == "Conan wins the battle! Conan still has 20.00 HP remaining!"


def test_speed_tie_redraw_is_bounded(scripted_rng) -> None:
    slow = Modifier(multipliers={})
    a = Character(name="Stone", job=Job.WARRIOR, id=1, attributes=None)
    b = Character(name="Rock", job=Job.WARRIOR, id=2, attributes=None)
    for c in (a, b):
        c.attributes.speed_modifier = slow
    b.attributes.health = 1
    # speed draws are always 0: 1 draw + 3 redraws, then a choice, then damage
    rng = scripted_rng([0.3] * 8 + [0.5], choice_index=0)

    result = BattleEngine(rng=rng, max_speed_redraws=3).resolve(a, b)

    assert rng.choices == 1
    assert result.winner is a
    assert "Stone 0.00 speed was faster than Rock 0.00 speed" in result.log


def test_check_ready_rejects_dead_combatant() -> None:
    a, b = _warrior(), _mage()
    b.attributes.health = 0
    with pytest.raises(CharacterAlreadyDead) as exc:
        BattleEngine().resolve(a, b)
    assert "Merlin" in exc.value.message
    assert a.attributes.health == 20


def test_check_ready_rejects_harmless_pair() -> None:
    a, b = _warrior(), _mage()
    for c in (a, b):
        c.attributes.attack_modifier = Modifier(multipliers={})
    with pytest.raises(BattleCannotConclude):
        BattleEngine().resolve(a, b)


def test_one_harmless_side_still_concludes() -> None:
    a, b = _warrior(), _mage()
    b.attributes.attack_modifier = Modifier(multipliers={})
    result = BattleEngine(rng=random.Random(3)).resolve(a, b)
    assert result.winner is a
    assert a.attributes.health == 20


@pytest.mark.parametrize("seed", range(50))
def test_exactly_one_survivor(seed: int) -> None:
    a, b = _warrior(), _mage()
    result = BattleEngine(rng=random.Random(seed)).resolve(a, b)

    healths = sorted([a.attributes.health, b.attributes.health])
    assert healths[0] == 0
    assert healths[1] > 0
    assert result.winner.is_alive() and not result.loser.is_alive()
    assert len(result.rounds) >= 1
    for phrase in ("Battle between", "attacks", "speed was faster", "wins the battle", "HP remaining"):
        assert phrase in result.log


def test_same_seed_same_battle() -> None:
    logs = []
    for _ in range(2):
        logs.append(BattleEngine(rng=random.Random(99)).resolve(_warrior(), _mage()).log)
    assert logs[0] == logs[1]


@pytest.mark.parametrize("seed", range(10))
def test_negative_attack_never_heals(seed: int) -> None:
    healer = _warrior()
    healer.attributes.attack_modifier = Modifier(multipliers={"strength": -1})
    victim = _mage()
    victim.attributes.health = 5

    result = BattleEngine(rng=random.Random(seed)).resolve(healer, victim)

    assert result.winner is victim
    assert 0 < victim.attributes.health <= 5
    for r in result.rounds:
        for hit in (r.attack, r.counter):
            if hit is not None:
                assert hit.damage >= 0
