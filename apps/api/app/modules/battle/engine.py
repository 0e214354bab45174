"""
Round-based battle resolution between two characters.

Each round both sides draw a speed in [0, speed modifier); the higher draw
attacks with a damage draw in [0, attack modifier). A defender that survives
the hit counter-attacks once. Rounds repeat until one side is at 0 health.

The engine only mutates the Character objects it is given; writing the
outcome back to the store is BattleService's job.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from app.core.errors import BattleCannotConclude, CharacterAlreadyDead
from app.core.observability import emit
from app.modules.characters.entity import Character

DEFAULT_MAX_SPEED_REDRAWS = 100


@dataclass(frozen=True)
class Strike:
    attacker_id: Optional[int]
    defender_id: Optional[int]
    damage: float
    defender_health: float


@dataclass(frozen=True)
class Round:
    number: int
    attacker_id: Optional[int]
    defender_id: Optional[int]
    attacker_speed: float
    defender_speed: float
    attack: Strike
    counter: Optional[Strike] = None


@dataclass
class BattleResult:
    winner: Character
    loser: Character
    rounds: List[Round] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)

    @property
    def log(self) -> str:
        return "\n".join(self.lines)


def _fmt(v: float) -> str:
    return f"{v:.2f}"


def opening_line(a: Character, b: Character) -> str:
    return (
        f"Battle between {a.name} ({a.job.value}) - {_fmt(a.attributes.health)} HP "
        f"and {b.name} ({b.job.value}) - {_fmt(b.attributes.health)} HP begins!"
    )


def speed_line(attacker: Character, attacker_speed: float, defender: Character, defender_speed: float) -> str:
    return (
        f"{attacker.name} {_fmt(attacker_speed)} speed was faster than "
        f"{defender.name} {_fmt(defender_speed)} speed and will attack first."
    )


def strike_line(attacker: Character, defender: Character, damage: float) -> str:
    return (
        f"{attacker.name} attacks {defender.name} for {_fmt(damage)}. "
        f"{defender.name} has {_fmt(defender.attributes.health)} HP remaining."
    )


def closing_line(winner: Character) -> str:
    return f"{winner.name} wins the battle! {winner.name} still has {_fmt(winner.attributes.health)} HP remaining!"


class BattleEngine:
    def __init__(self, rng: Optional[random.Random] = None, max_speed_redraws: int = DEFAULT_MAX_SPEED_REDRAWS) -> None:
        self.rng = rng or random.Random()
        self.max_speed_redraws = max(0, int(max_speed_redraws))

    def check_ready(self, a: Character, b: Character) -> None:
        """Raise before any round runs if the pair cannot fight to a finish."""
        for c in (a, b):
            if not c.can_battle():
                raise CharacterAlreadyDead(c.name, c.id)
        if a.get_attack_modifier() <= 0 and b.get_attack_modifier() <= 0:
            raise BattleCannotConclude(
                f"Neither {a.name} nor {b.name} can deal damage",
                {"character_ids": [a.id, b.id]},
            )

    def draw(self, upper: float) -> float:
        return self.rng.random() * upper

    def roll_initiative(self, a: Character, b: Character) -> Tuple[Character, float, Character, float]:
        """Return (attacker, attacker_speed, defender, defender_speed) for one round."""
        speed_a = self.draw(a.get_speed_modifier())
        speed_b = self.draw(b.get_speed_modifier())

        redraws = 0
        while speed_a == speed_b:
            if redraws >= self.max_speed_redraws:
                emit(
                    "warning",
                    "battle.speed_tie_exhausted",
                    f"{a.name} and {b.name} tied {redraws} times, picking attacker at random",
                    None,
                    __name__,
                )
                if self.rng.choice((a, b)) is a:
                    return a, speed_a, b, speed_b
                return b, speed_b, a, speed_a
            speed_a = self.draw(a.get_speed_modifier())
            speed_b = self.draw(b.get_speed_modifier())
            redraws += 1

        if speed_a > speed_b:
            return a, speed_a, b, speed_b
        return b, speed_b, a, speed_a

    def strike(self, attacker: Character, defender: Character) -> Strike:
        damage = self.draw(max(0.0, attacker.get_attack_modifier()))
        defender.take_damage(damage)
        return Strike(attacker.id, defender.id, damage, defender.attributes.health)

    def resolve(self, a: Character, b: Character) -> BattleResult:
        self.check_ready(a, b)

        lines = [opening_line(a, b)]
        rounds: List[Round] = []

        while a.is_alive() and b.is_alive():
            attacker, attacker_speed, defender, defender_speed = self.roll_initiative(a, b)
            lines.append("")
            lines.append(speed_line(attacker, attacker_speed, defender, defender_speed))

            hit = self.strike(attacker, defender)
            lines.append(strike_line(attacker, defender, hit.damage))

            counter = None
            if defender.is_alive():
                counter = self.strike(defender, attacker)
                lines.append(strike_line(defender, attacker, counter.damage))

            rounds.append(
                Round(
                    number=len(rounds) + 1,
                    attacker_id=attacker.id,
                    defender_id=defender.id,
                    attacker_speed=attacker_speed,
                    defender_speed=defender_speed,
                    attack=hit,
                    counter=counter,
                )
            )

        winner, loser = (a, b) if a.is_alive() else (b, a)
        lines.append(closing_line(winner))
        return BattleResult(winner=winner, loser=loser, rounds=rounds, lines=lines)
